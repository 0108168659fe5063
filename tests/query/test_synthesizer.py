"""Tests for preview/aggregate synthesis and the operation role check."""

from __future__ import annotations

from graphql import parse
import pytest

from hasura_mcp.errors import RequestValidationError
from hasura_mcp.query.synthesizer import (
    AggregateFunction,
    build_aggregate_query,
    build_preview_query,
    check_operation_role,
)


class TestPreviewQuery:
    def test_shape(self):
        built = build_preview_query("users", ["id", "name"], limit=5, offset=10)
        assert "query PreviewData($limit: Int!, $offset: Int!)" in built.document
        assert "users(limit: $limit, offset: $offset)" in built.document
        assert built.variables == {"limit": 5, "offset": 10}
        parse(built.document)

    def test_offset_optional(self):
        built = build_preview_query("users", ["id"], limit=3)
        assert "offset" not in built.document
        assert built.variables == {"limit": 3}

    def test_bad_table_name(self):
        with pytest.raises(RequestValidationError):
            build_preview_query("users(limit: 1000)", ["id"], limit=3)


class TestAggregateQuery:
    def test_count_without_filter(self):
        built = build_aggregate_query("users", "count")
        assert "users_aggregate {" in built.document
        assert "aggregate {\n      count\n    }" in built.document
        assert "$filter" not in built.document
        assert built.variables == {}
        parse(built.document)

    def test_sum_with_filter(self):
        where = {"status": {"_eq": "active"}}
        built = build_aggregate_query("orders", AggregateFunction.SUM, field="total", filter=where)
        assert "query AggregateData($filter: orders_bool_exp!)" in built.document
        assert "orders_aggregate(where: $filter)" in built.document
        assert "sum {\n        total\n      }" in built.document
        assert built.variables == {"filter": where}
        assert "active" not in built.document

    @pytest.mark.parametrize("function", ["sum", "avg", "min", "max"])
    def test_field_required(self, function):
        with pytest.raises(RequestValidationError, match="'field' parameter is required"):
            build_aggregate_query("orders", function)

    def test_field_ignored_for_count(self):
        built = build_aggregate_query("orders", "count", field="total")
        assert "total" not in built.document

    def test_unknown_function(self):
        with pytest.raises(ValueError):
            build_aggregate_query("orders", "median", field="total")


class TestOperationRole:
    @pytest.mark.parametrize("doc", ["mutation { x }", "  MUTATION { x }", "\n\tMutation Foo { x }"])
    def test_mutation_documents(self, doc):
        check_operation_role(doc, mutation=True)
        with pytest.raises(RequestValidationError, match="read-only"):
            check_operation_role(doc, mutation=False)

    @pytest.mark.parametrize("doc", ["query { x }", "{ x }", "  Query Foo { x }", "subscription { x }"])
    def test_non_mutation_documents(self, doc):
        check_operation_role(doc, mutation=False)
        with pytest.raises(RequestValidationError, match="does not appear to be a mutation"):
            check_operation_role(doc, mutation=True)
