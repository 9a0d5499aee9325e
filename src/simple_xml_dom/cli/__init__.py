"""Command-line interface for the simple XML DOM."""

from .main import main

__all__ = ["main"]
