"""Key/value store on-disk encoding, flushing and loading, with benchmark report helpers."""

__version__ = "0.1.0"