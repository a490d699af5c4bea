"""Task list management API with per-user task ownership."""

__version__ = "0.1.0"
