"""Tests for request parameter merging and passthrough query strings."""

from helixboard.core.defs import QueryDefinition, QueryParameter
from helixboard.core.params import (
    MAX_LIMIT,
    QueryParams,
    catalogue_from_introspection,
    catalogue_from_queries,
    coerce_query_value,
    merge_parameters,
    validate_limit,
)
from helixboard.core.query_types import IntrospectData


class TestMergeParameters:
    def test_query_values_typed_from_catalogue(self):
        params = merge_parameters(
            {"limit": "50", "filter": "test"},
            {"user_id": "123", "active": True},
            {"limit": "U32"},
        )
        assert params == {"user_id": "123", "active": True, "limit": 50, "filter": "test"}

    def test_body_wins_over_query_string(self):
        params = merge_parameters({"name": "from-query"}, {"name": "from-body"}, {"name": "String"})
        assert params == {"name": "from-body"}

    def test_body_values_never_coerced(self):
        params = merge_parameters({}, {"limit": "50"}, {"limit": "U32"})
        assert params == {"limit": "50"}

    def test_non_object_body_is_wrapped(self):
        assert merge_parameters({}, [1, 2], {}) == {"body": [1, 2]}
        assert merge_parameters({}, "text", {}) == {"body": "text"}

    def test_falsy_body_is_still_wrapped(self):
        assert merge_parameters({}, 0, {}) == {"body": 0}
        assert merge_parameters({}, False, {}) == {"body": False}

    def test_null_body(self):
        assert merge_parameters({"a": "1"}, None, {}) == {"a": "1"}

    def test_body_key_collides_with_wrapped_body(self):
        params = merge_parameters({"body": "q", "x": "1"}, [1], {"x": "I32"})
        assert params == {"body": [1], "x": 1}

    def test_failed_conversion_keeps_raw_string(self):
        assert merge_parameters({"limit": "abc"}, None, {"limit": "U32"}) == {"limit": "abc"}

    def test_unknown_type_keeps_raw_string(self):
        assert merge_parameters({"user": "u1"}, None, {"user": "User"}) == {"user": "u1"}

    def test_array_parameter(self):
        params = merge_parameters({"vector": "1.5, 2.5"}, None, {"vector": "[F64]"})
        assert params == {"vector": [1.5, 2.5]}

    def test_id_stays_string(self):
        assert merge_parameters({"user_id": "42"}, None, {"user_id": "ID"}) == {"user_id": "42"}

    def test_body_dict_not_mutated(self):
        body = {"a": 1}
        merge_parameters({"b": "2"}, body, {})
        assert body == {"a": 1}


class TestCoerceQueryValue:
    def test_no_type(self):
        assert coerce_query_value("5", None) == "5"

    def test_typed(self):
        assert coerce_query_value("5", "I64") == 5
        assert coerce_query_value("2.5", "F64") == 2.5

    def test_non_finite_float_falls_back(self):
        assert coerce_query_value("inf", "F64") == "inf"

    def test_unsupported_array_falls_back(self):
        assert coerce_query_value("1,2", "[I32]") == "1,2"


class TestCatalogues:
    def test_from_queries(self):
        queries = [
            QueryDefinition("getUser", [QueryParameter("user_id", "ID"), QueryParameter("limit", "U32")]),
        ]
        assert catalogue_from_queries(queries, "getUser") == {"user_id": "ID", "limit": "U32"}
        assert catalogue_from_queries(queries, "other") == {}

    def test_from_introspection(self):
        data = IntrospectData.model_validate(
            {"queries": [{"name": "q", "parameters": {"a": "I32", "b": {"nested": True}, "c": 3}}]}
        )
        assert catalogue_from_introspection(data, "q") == {"a": "I32"}
        assert catalogue_from_introspection(data, "missing") == {}


class TestValidateLimit:
    def test_within_limit(self):
        assert validate_limit(10) == 10
        assert validate_limit(MAX_LIMIT) == MAX_LIMIT
        assert validate_limit(0) == 0

    def test_above_limit_dropped(self):
        assert validate_limit(MAX_LIMIT + 1) is None

    def test_none(self):
        assert validate_limit(None) is None


class TestQueryParams:
    def test_limit_and_q(self):
        assert QueryParams(limit=10, q="search").to_url("api/search") == "api/search?limit=10&q=search"

    def test_extra_params(self):
        url = QueryParams(limit=10, q="search", custom="x").to_url("api/search")
        assert url == "api/search?limit=10&q=search&custom=x"

    def test_no_params(self):
        assert QueryParams().to_url("nodes-edges") == "nodes-edges"

    def test_none_values_skipped(self):
        assert QueryParams(limit=None, node_label=None).to_url("nodes-edges") == "nodes-edges"

    def test_values_are_encoded(self):
        assert QueryParams(label="Big Thing&co").to_url("nodes-by-label") == "nodes-by-label?label=Big+Thing%26co"

    def test_params_property(self):
        assert QueryParams(limit=1, node_label="User").params == {"node_label": "User"}
