"""Tests for the queries.hx parser and endpoint derivation."""

import pytest

from helixboard.core.defs import QueryDefinition, QueryParameter
from helixboard.core.errors import SchemaLoadError
from helixboard.core.query_parser import (
    determine_http_method,
    endpoint_from_introspection,
    endpoints_from_queries,
    generate_endpoint_path,
    normalize_type_name,
    parse_parameters,
    parse_queries,
    parse_queries_file,
    parse_query_line,
    query_from_introspection,
    resolve_endpoint_path,
)
from helixboard.core.query_types import IntrospectQuery


class TestParseQueryLine:
    def test_single_parameter(self):
        query = parse_query_line("QUERY getUserById (user_id: ID) => User")
        assert query.name == "getUserById"
        assert query.parameters == [QueryParameter("user_id", "ID")]
        assert query.http_method == "GET"
        assert query.endpoint_path == "/api/query/get-user-by-id/{user_id}"

    def test_no_parameters(self):
        query = parse_query_line("QUERY getAllUsers () => [User]")
        assert query.parameters == []
        assert query.endpoint_path == "/api/query/get-all-users"

    def test_multiple_parameters(self):
        query = parse_query_line("QUERY createUser (name: String, age: I32) => User")
        assert [param.name for param in query.parameters] == ["name", "age"]
        assert query.http_method == "POST"
        assert query.endpoint_path == "/api/query/create-user"

    def test_missing_parameter_section(self):
        assert parse_query_line("QUERY broken => User") is None

    def test_return_type_discarded(self):
        query = parse_query_line("QUERY findSimilar (vector: [F64], k: I64) => [Embedding]")
        assert query.parameters == [QueryParameter("vector", "[F64]"), QueryParameter("k", "I64")]


class TestParseParameters:
    def test_empty(self):
        assert parse_parameters("") == []
        assert parse_parameters("   ") == []

    def test_malformed_pieces_skipped(self):
        params = parse_parameters("user_id: ID, garbage, limit: U32")
        assert [param.name for param in params] == ["user_id", "limit"]

    def test_type_aliases_normalized(self):
        params = parse_parameters("a: i32, b: string, c: Vec<f64>, d: Array(F64), e: id")
        assert [param.param_type for param in params] == ["I32", "String", "[F64]", "[F64]", "ID"]

    def test_custom_type_kept_verbatim(self):
        assert parse_parameters("user: User")[0].param_type == "User"


class TestNormalizeTypeName:
    @pytest.mark.parametrize(
        "declared, expected",
        [
            ("String", "String"),
            ("u64", "U64"),
            ("Array<F64>", "[F64]"),
            ("Array(Array(I32))", "[[I32]]"),
            ("Timestamp", "Timestamp"),
        ],
    )
    def test_normalization(self, declared, expected):
        assert normalize_type_name(declared) == expected


class TestDetermineHttpMethod:
    @pytest.mark.parametrize(
        "name, method",
        [
            ("createUser", "POST"),
            ("addFriend", "POST"),
            ("updateUser", "PUT"),
            ("deleteUser", "DELETE"),
            ("removeTag", "DELETE"),
            ("getUser", "GET"),
            ("searchUsers", "GET"),
            ("CreateUser", "POST"),
            ("assignRole", "GET"),
        ],
    )
    def test_prefixes(self, name, method):
        assert determine_http_method(name) == method


class TestGenerateEndpointPath:
    def test_id_like_parameters_become_segments(self):
        params = [QueryParameter("user_id", "ID"), QueryParameter("post_id", "ID")]
        assert generate_endpoint_path("getUserPosts", params) == "/api/query/get-user-posts/{user_id}/{post_id}"

    def test_plain_id(self):
        assert generate_endpoint_path("deleteUser", [QueryParameter("id", "ID")]) == "/api/query/delete-user/{id}"

    def test_other_parameters_not_in_path(self):
        params = [QueryParameter("name", "String"), QueryParameter("identity", "String")]
        assert generate_endpoint_path("getAllUsers", params) == "/api/query/get-all-users"

    def test_acronyms_split_per_letter(self):
        assert generate_endpoint_path("getAllUsersFromDB", []) == "/api/query/get-all-users-from-d-b"


class TestParseQueries:
    def test_parses_all_queries(self, queries_text):
        queries = parse_queries(queries_text)
        assert [query.name for query in queries] == [
            "getUserById",
            "getAllUsers",
            "getUserPosts",
            "searchUsers",
            "findSimilar",
            "createUser",
            "updateUser",
            "deleteUser",
        ]

    def test_ignores_non_query_lines(self):
        content = "// comment\nQUERY getX (id: ID) => X\n    RETURN x\nQUERY bad => Y\n"
        queries = parse_queries(content)
        assert [query.name for query in queries] == ["getX"]

    def test_indented_query_lines(self):
        assert parse_queries("    QUERY getX () => X")[0].name == "getX"

    def test_file(self, helix_cfg):
        assert len(parse_queries_file(helix_cfg / "queries.hx")) == 8

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaLoadError):
            parse_queries_file(tmp_path / "nope.hx")


class TestEndpointListing:
    def test_endpoint_projection(self, queries_text):
        endpoints = endpoints_from_queries(parse_queries(queries_text))
        update = next(endpoint for endpoint in endpoints if endpoint.query_name == "updateUser")
        assert update.model_dump() == {
            "path": "/api/query/update-user/{id}",
            "method": "PUT",
            "query_name": "updateUser",
            "parameters": [
                {"name": "id", "param_type": "ID"},
                {"name": "name", "param_type": "String"},
            ],
        }


class TestResolveEndpointPath:
    @pytest.fixture
    def queries(self, queries_text):
        return parse_queries(queries_text)

    def test_binds_segments_in_order(self, queries):
        query, values = resolve_endpoint_path(queries, "get-user-posts", ["u1", "p9"])
        assert query.name == "getUserPosts"
        assert values == {"user_id": "u1", "post_id": "p9"}

    def test_no_segments(self, queries):
        query, values = resolve_endpoint_path(queries, "get-all-users", [])
        assert query.name == "getAllUsers"
        assert values == {}

    def test_verbatim_name(self, queries):
        query, _ = resolve_endpoint_path(queries, "getUserById", ["1"])
        assert query.name == "getUserById"

    def test_segment_count_mismatch(self, queries):
        assert resolve_endpoint_path(queries, "get-user-by-id", []) is None
        assert resolve_endpoint_path(queries, "get-user-by-id", ["1", "2"]) is None

    def test_unknown_slug(self, queries):
        assert resolve_endpoint_path(queries, "no-such-query", []) is None

    def test_derived_paths_resolve_back(self, queries):
        for query in queries:
            segments = [f"v{i}" for i, _ in enumerate(query.path_parameters)]
            slug = query.endpoint_path.split("/")[3]
            resolved, _ = resolve_endpoint_path(queries, slug, segments)
            assert resolved is query


class TestIntrospection:
    def test_query_from_introspection(self):
        query = query_from_introspection(
            IntrospectQuery(name="addDocs", parameters={"vec": "Array(F64)", "weight": "f64"})
        )
        assert query.http_method == "POST"
        assert query.endpoint_path == "/api/query/addDocs"
        assert query.parameters == [QueryParameter("vec", "[F64]"), QueryParameter("weight", "F64")]

    def test_non_string_types_listed_as_string(self):
        query = query_from_introspection(
            IntrospectQuery(name="getX", parameters={"filter": {"kind": "object"}})
        )
        assert query.parameters == [QueryParameter("filter", "String")]

    def test_non_object_parameters(self):
        query = query_from_introspection(IntrospectQuery(name="getX", parameters=["a", "b"]))
        assert query.parameters == []

    def test_endpoint_from_introspection(self):
        endpoint = endpoint_from_introspection(IntrospectQuery(name="removeUser", parameters={"id": "ID"}))
        assert endpoint.method == "DELETE"
        assert endpoint.path == "/api/query/removeUser"
        assert endpoint.parameters[0].param_type == "ID"

    def test_definition_type(self):
        assert isinstance(query_from_introspection(IntrospectQuery(name="getX")), QueryDefinition)
