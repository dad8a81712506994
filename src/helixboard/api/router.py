"""
FastAPI router for the Helixboard API.

Endpoints:
- GET  /api/schema            - Schema document for the active data source
- GET  /api/schema/validate   - Edge endpoints that name no declared type
- GET  /api/endpoints         - Query endpoint listing
- ANY  /api/query/{name}      - Execute a HelixDB query (GET/POST/PUT/DELETE)
- ANY  /api/query/{slug}/...  - Execute a query through its derived REST path

Graph inspection passthrough (forwarded to HelixDB):
- GET /nodes-edges?limit&node_label
- GET /nodes-by-label?label&limit
- GET /node-details?id
- GET /node-connections?node_id

Upstream failures never surface as HTTP errors: each endpoint answers 200
with an object carrying an "error" string and an empty payload of the shape
the dashboard expects. Every JSON payload is canonicalized before it is
returned.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..core.errors import ServiceError
from ..core.params import QueryParams, catalogue_from_queries, merge_parameters, validate_limit
from ..core.query_parser import resolve_endpoint_path
from ..core.query_types import (
    NodeConnectionsQuery,
    NodeDetailsQuery,
    NodesByLabelQuery,
    NodesEdgesQuery,
)
from ..core.schema_parser import validate_references
from ..core.utils import canonicalize
from ..runtime.helix_client import HelixClient
from ..runtime.metadata import MetadataProvider

logger = logging.getLogger(__name__)

QUERY_METHODS = ["GET", "POST", "PUT", "DELETE"]

# Create router
router = APIRouter()


def get_helix_client(request: Request) -> HelixClient:
    """HelixDB client installed on the app by create_app()."""
    return request.app.state.helix_client


def get_metadata(request: Request) -> MetadataProvider:
    """Metadata provider installed on the app by create_app()."""
    return request.app.state.metadata


# =============================================================================
# Schema & endpoint metadata
# =============================================================================


@router.get("/api/schema")
async def get_schema(metadata: MetadataProvider = Depends(get_metadata)) -> Any:
    """
    Return the schema document.

    Example response:
    {
        "nodes": [{"name": "User", "node_type": "N", "properties": {"name": "String"}}],
        "edges": [{"name": "Follows", "from_node": "User", "to_node": "User", "properties": {}}],
        "vectors": []
    }
    """
    schema = await metadata.get_schema()
    return canonicalize(schema.model_dump())


@router.get("/api/schema/validate")
async def validate_schema(metadata: MetadataProvider = Depends(get_metadata)) -> Any:
    """List edge endpoints that do not name a declared node or vector type."""
    schema = await metadata.get_schema()
    dangling = [ref.model_dump() for ref in validate_references(schema)]
    return canonicalize({"dangling_references": dangling})


@router.get("/api/endpoints")
async def get_endpoints(metadata: MetadataProvider = Depends(get_metadata)) -> Any:
    endpoints = await metadata.get_endpoints()
    return canonicalize([endpoint.model_dump() for endpoint in endpoints])


# =============================================================================
# Query execution
# =============================================================================


@router.api_route("/api/query/{query_name}", methods=QUERY_METHODS)
async def execute_query(
    query_name: str,
    request: Request,
    client: HelixClient = Depends(get_helix_client),
    metadata: MetadataProvider = Depends(get_metadata),
) -> Any:
    """
    Execute a query by name.

    The JSON body (if any) is merged with the URL query string; query-string
    values are typed from the query's declared parameters.

    Example:
        GET /api/query/getUsers?limit=50&filter=test
        -> POST {helix_url}/getUsers {"limit": 50, "filter": "test"}
    """
    body = await _read_json_body(request)

    # Derived kebab paths without path segments (e.g. /api/query/get-all-users)
    if "-" in query_name:
        resolved = resolve_endpoint_path(await metadata.get_queries(), query_name, [])
        if resolved is not None:
            query_name = resolved[0].name

    catalogue = await metadata.get_param_catalogue(query_name)
    params = merge_parameters(dict(request.query_params), body, catalogue)
    return await _run_query(client, query_name, params)


@router.api_route("/api/query/{slug}/{path:path}", methods=QUERY_METHODS)
async def execute_query_path(
    slug: str,
    path: str,
    request: Request,
    client: HelixClient = Depends(get_helix_client),
    metadata: MetadataProvider = Depends(get_metadata),
) -> Any:
    """
    Execute a query through its derived REST path.

    Path segments bind to the query's id-like parameters in declaration order.

    Example:
        GET /api/query/get-user-by-id/123
        -> POST {helix_url}/getUserById {"user_id": "123"}
    """
    segments = [segment for segment in path.split("/") if segment]
    queries = await metadata.get_queries()

    resolved = resolve_endpoint_path(queries, slug, segments)
    if resolved is None:
        raise HTTPException(
            status_code=404,
            detail={"error": f"No query matches /api/query/{slug}/{path}"},
        )
    query, path_values = resolved

    body = await _read_json_body(request)
    query_params = {**dict(request.query_params), **path_values}
    params = merge_parameters(query_params, body, catalogue_from_queries(queries, query.name))
    return await _run_query(client, query.name, params)


async def _read_json_body(request: Request) -> Any:
    """Decoded JSON body, or None when the body is empty or not JSON."""
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning(f"Ignoring non-JSON request body for {request.url.path}")
        return None


async def _run_query(client: HelixClient, query_name: str, params: dict[str, Any]) -> Any:
    try:
        result = await client.query(query_name, params)
    except ServiceError as e:
        logger.error(f"Error executing query '{query_name}': {e}")
        return canonicalize({"error": f"Failed to execute query: {e}", "query": query_name})
    return canonicalize(result)


# =============================================================================
# Graph inspection passthrough
# =============================================================================


def _empty_graph() -> dict[str, list]:
    return {"nodes": [], "edges": [], "vectors": []}


def _empty_connections() -> dict[str, dict]:
    return {
        "connected_nodes": {"values": []},
        "incoming_edges": {"values": []},
        "outgoing_edges": {"values": []},
    }


async def _passthrough(
    client: HelixClient,
    endpoint: str,
    query: QueryParams,
    fallback: dict[str, Any],
) -> Any:
    """GET a HelixDB inspection endpoint; on failure return the fallback shape."""
    try:
        data = await client.get(query.to_url(endpoint))
    except ServiceError as e:
        logger.error(f"Error with {endpoint} request: {e}")
        return canonicalize({"error": f"Request failed: {e}", **fallback})
    return canonicalize(data)


@router.get("/nodes-edges")
async def nodes_edges(
    params: Annotated[NodesEdgesQuery, Query()],
    client: HelixClient = Depends(get_helix_client),
) -> Any:
    query = QueryParams(limit=validate_limit(params.limit), node_label=params.node_label)
    return await _passthrough(client, "nodes-edges", query, {"data": _empty_graph()})


@router.get("/nodes-by-label")
async def nodes_by_label(
    params: Annotated[NodesByLabelQuery, Query()],
    client: HelixClient = Depends(get_helix_client),
) -> Any:
    query = QueryParams(label=params.label, limit=validate_limit(params.limit))
    return await _passthrough(client, "nodes-by-label", query, {"data": _empty_graph()})


@router.get("/node-details")
async def node_details(
    params: Annotated[NodeDetailsQuery, Query()],
    client: HelixClient = Depends(get_helix_client),
) -> Any:
    query = QueryParams(id=params.id)
    return await _passthrough(client, "node-details", query, {"data": {}})


@router.get("/node-connections")
async def node_connections(
    params: Annotated[NodeConnectionsQuery, Query()],
    client: HelixClient = Depends(get_helix_client),
) -> Any:
    query = QueryParams(node_id=params.node_id)
    return await _passthrough(client, "node-connections", query, _empty_connections())
