"""Herald: a retrying, authenticated HTTP client."""

__version__ = "0.1.0"
