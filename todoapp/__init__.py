"""Per-user todo lists served over HTTP with session cookie authentication."""

__version__ = "1.0.0"
