"""
Request parameter handling for query execution.

Merges a JSON request body with raw URL query-string values, typing the
query-string values from a parameter catalogue (name -> Helix type text).

Example:
    merge_parameters(
        {"limit": "50", "filter": "test"},
        {"user_id": "123", "active": True},
        {"limit": "U32"},
    )
    -> {"user_id": "123", "active": True, "limit": 50, "filter": "test"}
"""

from __future__ import annotations

from typing import Any, Mapping, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict

from .defs import QueryDefinition
from .errors import HelixTypeError
from .helix_types import coerce, parse_type
from .query_types import IntrospectData


MAX_LIMIT = 300


# =============================================================================
# Parameter merge
# =============================================================================


def merge_parameters(
    query_params: Mapping[str, str],
    body: Any,
    catalogue: Mapping[str, str],
) -> dict[str, Any]:
    """
    Build the typed parameter object for a query.

    - An object body seeds the result verbatim (never re-coerced).
    - Any other non-null body is wrapped as {"body": value}.
    - Query-string keys missing from the body are coerced through the
      catalogue; a catalogue miss or failed conversion keeps the raw string.

    Body values always win over query-string values with the same key.
    """
    if isinstance(body, dict):
        params = dict(body)
    elif body is not None:
        params = {"body": body}
    else:
        params = {}

    for key, value in query_params.items():
        if key in params:
            continue
        params[key] = coerce_query_value(value, catalogue.get(key))

    return params


def coerce_query_value(value: str, type_text: Optional[str]) -> Any:
    """Type a single query-string value, falling back to the raw string."""
    if type_text is None:
        return value
    try:
        return coerce(value, parse_type(type_text))
    except HelixTypeError:
        return value


# =============================================================================
# Parameter catalogues
# =============================================================================


def catalogue_from_queries(queries: list[QueryDefinition], query_name: str) -> dict[str, str]:
    """Parameter types of one locally parsed query (empty if not declared)."""
    for query in queries:
        if query.name == query_name:
            return {param.name: param.param_type for param in query.parameters}
    return {}


def catalogue_from_introspection(data: IntrospectData, query_name: str) -> dict[str, str]:
    """Parameter types of one introspected query; non-string types are skipped."""
    query = data.find_query(query_name)
    if query is None:
        return {}
    return {
        name: type_text
        for name, type_text in query.parameter_types().items()
        if isinstance(type_text, str)
    }


# =============================================================================
# Passthrough query strings
# =============================================================================


def validate_limit(limit: Optional[int]) -> Optional[int]:
    """Drop limits above MAX_LIMIT."""
    if limit is None or limit > MAX_LIMIT:
        return None
    return limit


class QueryParams(BaseModel):
    """
    Query-string parameters forwarded to HelixDB.

    Example:
        QueryParams(limit=10, q="search", custom="x").to_url("api/search")
        -> "api/search?limit=10&q=search&custom=x"
    """
    model_config = ConfigDict(extra="allow")

    limit: Optional[int] = None
    q: Optional[str] = None

    @property
    def params(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    def to_url(self, base_url: str) -> str:
        pairs: list[tuple[str, Any]] = []
        if self.limit is not None:
            pairs.append(("limit", self.limit))
        if self.q is not None:
            pairs.append(("q", self.q))
        pairs.extend((key, value) for key, value in self.params.items() if value is not None)

        if not pairs:
            return base_url
        return f"{base_url}?{urlencode(pairs)}"
