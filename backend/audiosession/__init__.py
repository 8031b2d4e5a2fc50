"""Audio Session Store - chunked audio recording sessions on a blob store."""

__version__ = "1.0.0"
