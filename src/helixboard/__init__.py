"""
Helixboard - REST backend for browsing a HelixDB schema and running its queries.

Reads node/edge/vector declarations and queries either from local
helixdb-cfg files or from a HelixDB /introspect endpoint, lists the queries
as REST endpoints, and executes them with query-string values typed from
the declared parameter types.

Usage:
    from helixboard import AppConfig, DataSource, create_app

    app = create_app(AppConfig(source=DataSource.LOCAL_FILE))
"""

from __future__ import annotations

__version__ = "0.1.0"

from .app import create_app
from .config import AppConfig, Settings
from .core import (
    ApiEndpointInfo,
    DataSource,
    HelixboardError,
    HelixType,
    QueryDefinition,
    SchemaDocument,
    canonicalize,
    coerce,
    merge_parameters,
    parse_queries,
    parse_schema,
    parse_type,
    to_text,
)
from .runtime import HelixClient, MetadataProvider

__all__ = [
    "__version__",
    # App
    "create_app",
    "AppConfig",
    "Settings",
    # Core
    "ApiEndpointInfo",
    "DataSource",
    "HelixboardError",
    "HelixType",
    "QueryDefinition",
    "SchemaDocument",
    "canonicalize",
    "coerce",
    "merge_parameters",
    "parse_queries",
    "parse_schema",
    "parse_type",
    "to_text",
    # Runtime
    "HelixClient",
    "MetadataProvider",
]
