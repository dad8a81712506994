"""
Runtime module - HelixDB client and metadata loading.
"""

from __future__ import annotations

from .helix_client import API_KEY_HEADER, HelixClient
from .metadata import MetadataProvider

__all__ = [
    "API_KEY_HEADER",
    "HelixClient",
    "MetadataProvider",
]
