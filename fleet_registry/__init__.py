"""Aircraft catalog and airline company registry."""

__version__ = "1.0.0"
