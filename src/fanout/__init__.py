"""fanout — equal-split fund fan-out registry."""

__version__ = "0.1.0"
