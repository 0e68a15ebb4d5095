"""Loaders persisting scraped products."""

from .file_loader import FileLoader

__all__ = ["FileLoader"]
