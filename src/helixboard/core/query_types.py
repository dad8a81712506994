"""
Pydantic models for the REST surface and the HelixDB wire formats.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from .defs import QueryDefinition
from .schema_types import SchemaDocument


# --- Endpoint listing (GET /api/endpoints) ---

class EndpointParameter(BaseModel):
    """A query parameter as listed to the frontend."""
    name: str
    param_type: str


class ApiEndpointInfo(BaseModel):
    """
    External projection of a QueryDefinition.

    Example:
    {
        "path": "/api/query/get-user-by-id/{user_id}",
        "method": "GET",
        "query_name": "getUserById",
        "parameters": [{"name": "user_id", "param_type": "ID"}]
    }
    """
    path: str
    method: str
    query_name: str
    parameters: list[EndpointParameter] = Field(default_factory=list)

    @classmethod
    def from_query_definition(cls, query: QueryDefinition) -> "ApiEndpointInfo":
        return cls(
            path=query.endpoint_path,
            method=query.http_method,
            query_name=query.name,
            parameters=[
                EndpointParameter(name=param.name, param_type=param.param_type)
                for param in query.parameters
            ],
        )


# --- HelixDB /introspect payload ---

class IntrospectQuery(BaseModel):
    """
    A query as reported by introspection.

    parameters maps parameter name -> type text, e.g. {"user_id": "ID"}.
    Non-string values are tolerated and treated as untyped.
    """
    name: str
    parameters: Any = Field(default_factory=dict)

    def parameter_types(self) -> dict[str, Any]:
        if isinstance(self.parameters, dict):
            return dict(self.parameters)
        return {}


class IntrospectData(BaseModel):
    """Response of GET {helix_url}/introspect."""
    schema_: SchemaDocument = Field(default_factory=SchemaDocument, alias="schema")
    queries: list[IntrospectQuery] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @property
    def schema_document(self) -> SchemaDocument:
        return self.schema_

    def find_query(self, query_name: str) -> Optional[IntrospectQuery]:
        for query in self.queries:
            if query.name == query_name:
                return query
        return None


# --- Passthrough inspection endpoints ---

class NodesEdgesQuery(BaseModel):
    limit: Optional[int] = Field(default=None, ge=0)
    node_label: Optional[str] = None


class NodesByLabelQuery(BaseModel):
    label: str
    limit: Optional[int] = Field(default=None, ge=0)


class NodeDetailsQuery(BaseModel):
    id: str


class NodeConnectionsQuery(BaseModel):
    node_id: str
