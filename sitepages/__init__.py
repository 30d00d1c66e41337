"""Render static-site pages, data tables, and search indexes from markdown."""

from .cli import app, main

__all__ = ["app", "main"]
