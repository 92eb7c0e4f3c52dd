"""Guild events board: Discord scheduled events served as JSON."""

__version__ = "1.0.0"
