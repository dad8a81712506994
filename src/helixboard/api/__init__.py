"""
API module - FastAPI endpoints.
"""

from __future__ import annotations

from .router import get_helix_client, get_metadata, router

__all__ = [
    "router",
    "get_helix_client",
    "get_metadata",
]
