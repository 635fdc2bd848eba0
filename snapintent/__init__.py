"""snapintent: screenshot intent extraction with place clustering."""

__version__ = "0.3.0"
