"""DoWiki: a minimal wiki server."""

__version__ = "0.1.0"
