"""Plugin system — pluggy hook specs, discovery, and the WAL-backed event bus."""
