"""Shared fixtures for tests."""

import json
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest

from helixboard.config import Settings


SCHEMA_HX = """
// Social graph
N::User {
    name: String,
    age: I32,
    tags: [String]
}

N::Post {
    title: String
}

V::Embedding {
    vector: [F64]
}

E::Follows {
    From: User,
    To: User,
    Properties: {
        since: String
    }
}

E::Wrote {
    From: User,
    To: Post
}
"""

QUERIES_HX = """
// Read queries
QUERY getUserById (user_id: ID) => User
QUERY getAllUsers () => [User]
QUERY getUserPosts (user_id: ID, post_id: ID) => [Post]
QUERY searchUsers (limit: U32, min_age: I32, score: F64) => [User]
QUERY findSimilar (vector: [F64], k: I64) => [Embedding]

// Write queries
QUERY createUser (name: String, age: I32) => User
QUERY updateUser (id: ID, name: String) => User
QUERY deleteUser (id: ID) => User
"""

INTROSPECT = {
    "schema": {
        "nodes": [
            {"name": "User", "node_type": "N", "properties": {"name": "String", "age": "I32"}},
        ],
        "edges": [
            {"name": "Follows", "from": "User", "to": "User", "properties": {}},
        ],
        "vectors": [
            {"name": "Doc", "vector_type": "V", "properties": {"vec": "Array<F64>"}},
        ],
    },
    "queries": [
        {"name": "getUser", "parameters": {"user_id": "ID", "limit": "U32"}},
        {"name": "addDocs", "parameters": {"vec": "[F64]", "weight": "F64"}},
        {"name": "removeUser", "parameters": {"id": "ID", "meta": {"nested": True}}},
    ],
}


class FakeHelix:
    """
    In-memory HelixDB served through httpx.MockTransport.

    - GET /introspect returns the introspect payload
    - POST /{query} echoes the query name and JSON body
    - Other GETs echo the path and query string
    Individual paths can be overridden with (status, payload) via `responses`,
    and every request can be made to fail with a transport error via `fail`.
    """

    def __init__(self, introspect: Optional[dict] = None):
        self.introspect = INTROSPECT if introspect is None else introspect
        self.responses: dict[str, tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.fail = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            raise httpx.ConnectError("Connection refused", request=request)

        path = request.url.path
        if path in self.responses:
            status, payload = self.responses[path]
            if isinstance(payload, str):
                return httpx.Response(status, text=payload)
            return httpx.Response(status, json=payload)

        if path == "/introspect":
            return httpx.Response(200, json=self.introspect)
        if request.method == "POST":
            body = json.loads(request.content) if request.content else None
            return httpx.Response(200, json={"query": path.lstrip("/"), "params": body})
        return httpx.Response(200, json={"path": path, "params": dict(request.url.params)})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def schema_text() -> str:
    return SCHEMA_HX


@pytest.fixture
def queries_text() -> str:
    return QUERIES_HX


@pytest.fixture
def helix_cfg(tmp_path) -> Path:
    """A helixdb-cfg directory with schema.hx and queries.hx."""
    cfg = tmp_path / "helixdb-cfg"
    cfg.mkdir()
    (cfg / "schema.hx").write_text(SCHEMA_HX)
    (cfg / "queries.hx").write_text(QUERIES_HX)
    return cfg


@pytest.fixture
def settings(helix_cfg) -> Settings:
    """Settings pointing at the fixture files, isolated from any .env file."""
    return Settings(
        _env_file=None,
        HELIX_API_KEY=None,
        DOCKER_HOST_INTERNAL="localhost",
        HELIX_PORT=6969,
        SCHEMA_FILE_PATH=str(helix_cfg / "schema.hx"),
        QUERIES_FILE_PATH=str(helix_cfg / "queries.hx"),
    )


@pytest.fixture
def fake_helix() -> FakeHelix:
    return FakeHelix()
