"""Built-in plugins shipped with fanout."""
