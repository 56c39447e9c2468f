"""Service mode for docmeta (requires the ``service`` extra)."""

from .app import create_app

__all__ = ["create_app"]
