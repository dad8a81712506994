"""
Custom exceptions for the Helixboard system.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .helix_types import HelixType


class HelixboardError(Exception):
    """Base exception for all helixboard errors."""
    pass


# =============================================================================
# Type system
# =============================================================================


class HelixTypeError(HelixboardError):
    """Base class for type name and value conversion errors."""
    pass


class TypeParseError(HelixTypeError):
    """Raised when a type name is not part of the Helix type grammar."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Parse error: Unknown type: {text}")


class ConversionError(HelixTypeError):
    """Raised when a raw string cannot be converted to its declared type."""

    def __init__(self, value: str, expected_type: HelixType, cause: str):
        self.value = value
        self.expected_type = expected_type
        self.cause = cause
        super().__init__(f"Failed to convert '{value}' to {expected_type}: {cause}")


# =============================================================================
# Schema / query definitions
# =============================================================================


class SchemaGrammarError(HelixboardError):
    """Raised when a block parser is pointed at a line that does not open a block."""

    def __init__(self, message: str, line: Optional[str] = None):
        self.line = line
        super().__init__(message)


class SchemaLoadError(HelixboardError):
    """Raised when a schema or query file cannot be read."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


# =============================================================================
# Remote HelixDB
# =============================================================================


class RemoteMetadataError(HelixboardError):
    """Raised when introspection metadata cannot be fetched or decoded."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Failed to fetch introspect data from {url}: {message}")


class ServiceError(HelixboardError):
    """Raised when a HelixDB call fails."""

    def __init__(self, url: str, status_code: int, message: str):
        self.url = url
        self.status_code = status_code
        if status_code:
            super().__init__(f"Server returned error: {status_code} - {message}")
        else:
            super().__init__(f"HTTP request failed: {message}")
