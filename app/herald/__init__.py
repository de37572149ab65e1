"""herald: multi-channel notification dispatch with driver fallback routing."""

__version__ = "0.1.0"
