"""
Core module - type system, schema/query parsers, parameter handling.
"""

from __future__ import annotations

from .defs import DataSource, QueryDefinition, QueryParameter
from .errors import (
    ConversionError,
    HelixboardError,
    HelixTypeError,
    RemoteMetadataError,
    SchemaGrammarError,
    SchemaLoadError,
    ServiceError,
    TypeParseError,
)
from .helix_types import HelixType, coerce, parse_type, to_text
from .params import (
    MAX_LIMIT,
    QueryParams,
    catalogue_from_introspection,
    catalogue_from_queries,
    merge_parameters,
    validate_limit,
)
from .query_parser import (
    determine_http_method,
    endpoint_from_introspection,
    endpoints_from_queries,
    generate_endpoint_path,
    parse_queries,
    parse_queries_file,
    parse_query_line,
)
from .query_types import ApiEndpointInfo, EndpointParameter, IntrospectData, IntrospectQuery
from .schema_parser import parse_schema, parse_schema_file, validate_references
from .schema_types import DanglingReference, EdgeType, NodeType, SchemaDocument, VectorType
from .utils import canonicalize, to_kebab_case

__all__ = [
    # Defs
    "DataSource",
    "QueryDefinition",
    "QueryParameter",
    # Errors
    "ConversionError",
    "HelixboardError",
    "HelixTypeError",
    "RemoteMetadataError",
    "SchemaGrammarError",
    "SchemaLoadError",
    "ServiceError",
    "TypeParseError",
    # Type system
    "HelixType",
    "coerce",
    "parse_type",
    "to_text",
    # Parameters
    "MAX_LIMIT",
    "QueryParams",
    "catalogue_from_introspection",
    "catalogue_from_queries",
    "merge_parameters",
    "validate_limit",
    # Queries
    "ApiEndpointInfo",
    "EndpointParameter",
    "IntrospectData",
    "IntrospectQuery",
    "determine_http_method",
    "endpoint_from_introspection",
    "endpoints_from_queries",
    "generate_endpoint_path",
    "parse_queries",
    "parse_queries_file",
    "parse_query_line",
    # Schema
    "DanglingReference",
    "EdgeType",
    "NodeType",
    "SchemaDocument",
    "VectorType",
    "parse_schema",
    "parse_schema_file",
    "validate_references",
    # Utils
    "canonicalize",
    "to_kebab_case",
]
