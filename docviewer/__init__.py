"""Document extraction viewer: upload, inspect and chat with extracted documents."""

__version__ = "1.0.0"
