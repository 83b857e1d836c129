"""Article content extraction and rating prompt service."""

__version__ = "0.1.0"
