"""Tienda Online demo backend."""

from .app import create_app

__all__ = ["create_app"]
