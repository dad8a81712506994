"""
Helixboard CLI - Command line entry point for the API server.
"""

from __future__ import annotations

from .main import app, main

__all__ = ["main", "app"]
