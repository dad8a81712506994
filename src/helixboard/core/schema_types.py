"""
Pydantic models for the Helix schema document.

The same models are produced by the local schema parser and decoded from
the HelixDB `/introspect` payload, so both sources serialize identically:

{
    "nodes":   [{"name": "User", "node_type": "N", "properties": {"name": "String"}}],
    "edges":   [{"name": "Follows", "from_node": "User", "to_node": "User", "properties": {}}],
    "vectors": [{"name": "Doc", "vector_type": "V", "properties": {"vec": "Array<F64>"}}]
}
"""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, Field


class NodeType(BaseModel):
    """A node type declared with `N::Name { ... }`."""
    name: str
    node_type: Literal["N", "V"] = "N"
    properties: dict[str, str] = Field(default_factory=dict)


class EdgeType(BaseModel):
    """
    An edge type declared with `E::Name { From: A, To: B, Properties: {...} }`.

    from_node / to_node are plain type names; they are not resolved against
    the node list (see schema_parser.validate_references).
    """
    name: str
    from_node: str = Field(default="", validation_alias=AliasChoices("from_node", "from"))
    to_node: str = Field(default="", validation_alias=AliasChoices("to_node", "to"))
    properties: dict[str, str] = Field(default_factory=dict)


class VectorType(BaseModel):
    """A vector type declared with `V::Name { ... }`."""
    name: str
    vector_type: Literal["V", "N"] = "V"
    properties: dict[str, str] = Field(default_factory=dict)


class SchemaDocument(BaseModel):
    """Parsed schema: node, edge and vector declarations in source order."""
    nodes: list[NodeType] = Field(default_factory=list)
    edges: list[EdgeType] = Field(default_factory=list)
    vectors: list[VectorType] = Field(default_factory=list)

    @property
    def type_names(self) -> set[str]:
        """Names an edge endpoint may legally refer to."""
        return {node.name for node in self.nodes} | {vector.name for vector in self.vectors}


class DanglingReference(BaseModel):
    """An edge endpoint that names no declared node or vector type."""
    edge: str
    end: Literal["from", "to"]
    target: str
