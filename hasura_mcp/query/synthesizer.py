"""Synthesize preview and aggregate queries, and gate passthrough documents."""

from __future__ import annotations

from enum import Enum
from typing import Any

from graphql.language.ast import FieldNode, OperationType

from hasura_mcp.errors import RequestValidationError
from hasura_mcp.query.builder import BuiltDocument, DocumentBuilder, validate_name

MUTATION_KEYWORD = "mutation"


class AggregateFunction(str, Enum):
    COUNT = "count"
    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"


def build_preview_query(
    table_name: str,
    fields: list[str],
    limit: int,
    offset: int | None = None,
) -> BuiltDocument:
    """``query PreviewData($limit: Int![, $offset: Int!]) { table(limit: $limit[, offset: $offset]) { fields } }``"""
    builder = DocumentBuilder(OperationType.QUERY, "PreviewData")
    arguments = {"limit": builder.variable("limit", "Int", limit)}
    if offset is not None:
        arguments["offset"] = builder.variable("offset", "Int", offset)

    root = builder.field(table_name, arguments, list[FieldNode | str](fields))
    return builder.build([root])


def aggregate_field_name(table_name: str) -> str:
    return f"{validate_name(table_name, 'table name')}_aggregate"


def build_aggregate_query(
    table_name: str,
    function: AggregateFunction | str,
    field: str | None = None,
    filter: dict[str, Any] | None = None,
) -> BuiltDocument:
    """Build ``<table>_aggregate(where: $filter) { aggregate { ... } }``.

    The filter, when given, is bound to ``$filter: <table>_bool_exp!``.
    *field* is required for every function except ``count``, where it is
    ignored.
    """
    function = AggregateFunction(function)
    if function is not AggregateFunction.COUNT and not field:
        raise RequestValidationError(
            f"The 'field' parameter is required for '{function.value}' aggregation."
        )

    builder = DocumentBuilder(OperationType.QUERY, "AggregateData")
    arguments = {}
    if filter:
        bool_exp = f"{validate_name(table_name, 'table name')}_bool_exp"
        arguments["where"] = builder.variable("filter", bool_exp, filter)

    if function is AggregateFunction.COUNT:
        metric: FieldNode | str = "count"
    else:
        metric = builder.field(function.value, selections=[field or ""])

    aggregate = builder.field("aggregate", selections=[metric])
    root = builder.field(aggregate_field_name(table_name), arguments, [aggregate])
    return builder.build([root])


def is_mutation_document(document: str) -> bool:
    return document.lstrip().lower().startswith(MUTATION_KEYWORD)


def check_operation_role(document: str, *, mutation: bool) -> None:
    """Raise unless *document*'s leading keyword matches the expected role.

    Read-only documents must not start with ``mutation``; mutation documents
    must. Whitespace is trimmed and the check is case-insensitive.
    """
    if mutation and not is_mutation_document(document):
        raise RequestValidationError(
            "The provided string does not appear to be a mutation. "
            "Mutation documents must begin with the 'mutation' keyword; "
            "use 'run_graphql_query' for read-only operations."
        )
    if not mutation and is_mutation_document(document):
        raise RequestValidationError(
            "This tool only supports read-only queries. "
            "Use 'run_graphql_mutation' for insert, update, or delete operations."
        )
