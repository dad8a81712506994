"""
Parser for Helix query definitions (queries.hx).

Each query is declared on one line:

    QUERY getUserById (user_id: ID) => User
    QUERY createUser (name: String, age: I32) => User

and is exposed as a REST endpoint whose method and path are derived from
the query name by convention:

    getUserById -> GET  /api/query/get-user-by-id/{user_id}
    createUser  -> POST /api/query/create-user
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .defs import QueryDefinition, QueryParameter
from .errors import TypeParseError
from .helix_types import parse_type, to_text
from .query_types import ApiEndpointInfo, IntrospectQuery
from .schema_parser import read_definition_file
from .utils import to_kebab_case


QUERY_PREFIX = "QUERY "
QUERY_PATH_PREFIX = "/api/query"

# Alternative spellings folded into the Helix type vocabulary
TYPE_ALIASES = {
    "string": "String",
    "str": "String",
    "i32": "I32",
    "i64": "I64",
    "u32": "U32",
    "u64": "U64",
    "u128": "U128",
    "f64": "F64",
    "id": "ID",
    "Vec<f64>": "[F64]",
    "Array<F64>": "[F64]",
}

# Case-insensitive name prefix -> HTTP method; first match wins
METHOD_PREFIXES: list[tuple[tuple[str, ...], str]] = [
    (("create", "add"), "POST"),
    (("update",), "PUT"),
    (("delete", "remove"), "DELETE"),
]


# =============================================================================
# Parsing
# =============================================================================


def parse_queries(content: str) -> list[QueryDefinition]:
    """Parse every `QUERY ` line of a queries file. Unparseable lines are skipped."""
    queries = []

    for line in content.splitlines():
        line = line.strip()
        if not line.startswith(QUERY_PREFIX):
            continue

        query = parse_query_line(line)
        if query is not None:
            queries.append(query)

    return queries


def parse_queries_file(path: str | Path) -> list[QueryDefinition]:
    """
    Read and parse a queries file.

    Raises:
        SchemaLoadError: If the file cannot be read
    """
    return parse_queries(read_definition_file(path))


def parse_query_line(line: str) -> Optional[QueryDefinition]:
    """
    Parse a single `QUERY name (params) => Return` line.

    The return type is discarded. Returns None when the line has no
    parenthesized parameter section.
    """
    parts = line.split(" (")
    if len(parts) < 2:
        return None

    name = parts[0].replace(QUERY_PREFIX, "").strip()
    params_section = parts[1].split(") =>")[0]
    parameters = parse_parameters(params_section)

    return QueryDefinition(
        name=name,
        parameters=parameters,
        http_method=determine_http_method(name),
        endpoint_path=generate_endpoint_path(name, parameters),
    )


def parse_parameters(params_str: str) -> list[QueryParameter]:
    """
    Parse a `name: Type, name: Type` parameter list.

    Pieces without a `": "` separator are skipped.
    """
    if not params_str.strip():
        return []

    parameters = []
    for param in params_str.split(", "):
        name, separator, param_type = param.strip().partition(": ")
        if not separator:
            continue
        parameters.append(
            QueryParameter(name=name.strip(), param_type=normalize_type_name(param_type.strip()))
        )

    return parameters


def normalize_type_name(type_name: str) -> str:
    """
    Map a declared parameter type onto the Helix type vocabulary.

    Known types are rendered canonically (`Array(F64)` -> `[F64]`); other
    names (custom or return-only types) are kept verbatim.
    """
    type_name = TYPE_ALIASES.get(type_name, type_name)
    try:
        return to_text(parse_type(type_name))
    except TypeParseError:
        return type_name


# =============================================================================
# Endpoint derivation
# =============================================================================


def determine_http_method(query_name: str) -> str:
    """
    Derive the HTTP method from the query name.

    create*/add* -> POST, update* -> PUT, delete*/remove* -> DELETE, else GET.
    """
    lowered = query_name.lower()
    for prefixes, method in METHOD_PREFIXES:
        if lowered.startswith(prefixes):
            return method
    return "GET"


def generate_endpoint_path(query_name: str, parameters: list[QueryParameter]) -> str:
    """
    Derive the REST path for a query.

    id-like parameters (`id`, `*_id`) are appended as `{name}` segments in
    declaration order.

    Examples:
        getUserById, [user_id]        -> /api/query/get-user-by-id/{user_id}
        getUserPosts, [user_id, post_id] -> /api/query/get-user-posts/{user_id}/{post_id}
        getAllUsers, [name]           -> /api/query/get-all-users
    """
    base_path = f"{QUERY_PATH_PREFIX}/{to_kebab_case(query_name)}"
    path_params = [f"{{{param.name}}}" for param in parameters if param.is_path_param]

    if not path_params:
        return base_path
    return f"{base_path}/{'/'.join(path_params)}"


def resolve_endpoint_path(
    queries: list[QueryDefinition],
    slug: str,
    segments: list[str],
) -> Optional[tuple[QueryDefinition, dict[str, str]]]:
    """
    Match a derived endpoint path back to its query.

    Args:
        queries: Known query definitions
        slug: Kebab-case query segment (e.g. "get-user-by-id")
        segments: Remaining path segments, bound to id-like params in order

    Returns:
        Tuple of (query, {param_name: raw_value}) or None if nothing matches
    """
    for query in queries:
        if to_kebab_case(query.name) != slug and query.name != slug:
            continue

        path_params = query.path_parameters
        if len(path_params) != len(segments):
            continue

        return query, {param.name: value for param, value in zip(path_params, segments)}

    return None


# =============================================================================
# Endpoint listing
# =============================================================================


def endpoints_from_queries(queries: list[QueryDefinition]) -> list[ApiEndpointInfo]:
    """Project parsed query definitions into the endpoint listing."""
    return [ApiEndpointInfo.from_query_definition(query) for query in queries]


def query_from_introspection(query: IntrospectQuery) -> QueryDefinition:
    """
    Build a QueryDefinition from introspection metadata.

    Remote queries are served at `/api/query/{name}` with the name verbatim.
    Non-string parameter types are listed as String.
    """
    parameters = [
        QueryParameter(name=name, param_type=_introspected_type(type_value))
        for name, type_value in query.parameter_types().items()
    ]
    return QueryDefinition(
        name=query.name,
        parameters=parameters,
        http_method=determine_http_method(query.name),
        endpoint_path=f"{QUERY_PATH_PREFIX}/{query.name}",
    )


def endpoint_from_introspection(query: IntrospectQuery) -> ApiEndpointInfo:
    return ApiEndpointInfo.from_query_definition(query_from_introspection(query))


def _introspected_type(type_value: Any) -> str:
    if isinstance(type_value, str):
        return normalize_type_name(type_value)
    return "String"
