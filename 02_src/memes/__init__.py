"""Memes: workspace messaging server."""

from .app import Application

__version__ = "0.1.0"

__all__ = ["Application"]
