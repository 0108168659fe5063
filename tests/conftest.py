"""Shared test fixtures for hasura-mcp tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from hasura_mcp.schema.cache import SchemaCache
from hasura_mcp.schema.types import IntrospectedSchema, parse_schema
from hasura_mcp.tools.base import ToolContext


def named(kind: str, name: str) -> dict[str, Any]:
    return {"kind": kind, "name": name, "ofType": None}


def non_null(inner: dict[str, Any]) -> dict[str, Any]:
    return {"kind": "NON_NULL", "name": None, "ofType": inner}


def list_of(inner: dict[str, Any]) -> dict[str, Any]:
    return {"kind": "LIST", "name": None, "ofType": inner}


def field(
    name: str,
    type_ref: dict[str, Any],
    description: str | None = None,
    args: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "type": type_ref,
        "args": args or [],
        "isDeprecated": False,
        "deprecationReason": None,
    }


def arg(name: str, type_ref: dict[str, Any]) -> dict[str, Any]:
    return {"name": name, "description": None, "type": type_ref, "defaultValue": None}


def object_type(name: str, fields: list[dict[str, Any]], description: str | None = None) -> dict[str, Any]:
    return {
        "kind": "OBJECT",
        "name": name,
        "description": description,
        "fields": fields,
        "inputFields": None,
        "interfaces": [],
        "enumValues": None,
        "possibleTypes": None,
    }


def scalar(name: str) -> dict[str, Any]:
    return {"kind": "SCALAR", "name": name, "description": None}


def make_raw_schema(extra_types: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """A small Hasura-shaped ``__schema`` document."""
    int_nn = non_null(named("SCALAR", "Int"))
    table_args = [arg("limit", named("SCALAR", "Int")), arg("offset", named("SCALAR", "Int"))]
    types: list[dict[str, Any]] = [
        scalar("Int"),
        scalar("String"),
        scalar("Boolean"),
        object_type(
            "query_root",
            [
                field(
                    "users",
                    non_null(list_of(non_null(named("OBJECT", "users")))),
                    'fetch data from the table: "users"',
                    table_args,
                ),
                field("users_aggregate", non_null(named("OBJECT", "users_aggregate"))),
                field("users_by_pk", named("OBJECT", "users"), args=[arg("id", int_nn)]),
                field("users_stream", non_null(list_of(non_null(named("OBJECT", "users"))))),
                field(
                    "orders",
                    non_null(list_of(non_null(named("OBJECT", "orders")))),
                    "fetch data from the table: orders schema: sales",
                ),
                field("only_links", non_null(list_of(non_null(named("OBJECT", "only_links"))))),
            ],
        ),
        object_type(
            "mutation_root",
            [
                field("insert_users", named("OBJECT", "users_mutation_response"), "insert data into users"),
                field("delete_users", named("OBJECT", "users_mutation_response")),
            ],
        ),
        object_type(
            "subscription_root",
            [field("users_stream", non_null(list_of(non_null(named("OBJECT", "users")))))],
        ),
        object_type(
            "users",
            [
                field("id", int_nn, "primary key"),
                field("name", named("SCALAR", "String")),
                field("status", non_null(named("ENUM", "user_status"))),
                field("tags", list_of(non_null(named("SCALAR", "String")))),
                field("orders", non_null(list_of(non_null(named("OBJECT", "orders")))), args=table_args),
                field("profile", named("OBJECT", "profiles")),
            ],
            description='columns and relationships of "users"',
        ),
        object_type(
            "orders",
            [field("id", int_nn), field("total", named("SCALAR", "Int"))],
        ),
        object_type(
            "only_links",
            [
                field("user", named("OBJECT", "users")),
                field("results", list_of(named("UNION", "search_result"))),
            ],
        ),
        object_type("users_aggregate", [field("aggregate", named("OBJECT", "users_aggregate_fields"))]),
        object_type("users_aggregate_fields", [field("count", int_nn)]),
        object_type(
            "users_mutation_response",
            [
                field("affected_rows", int_nn),
                field("returning", non_null(list_of(non_null(named("OBJECT", "users"))))),
            ],
        ),
        object_type("profiles", [field("bio", named("SCALAR", "String"))]),
        {
            "kind": "ENUM",
            "name": "user_status",
            "description": "user lifecycle",
            "enumValues": [
                {"name": "active", "description": None, "isDeprecated": False},
                {"name": "banned", "description": "no access", "isDeprecated": False},
            ],
        },
        {
            "kind": "INPUT_OBJECT",
            "name": "users_bool_exp",
            "description": None,
            "inputFields": [
                {"name": "_and", "description": None, "type": list_of(non_null(named("INPUT_OBJECT", "users_bool_exp"))), "defaultValue": None},
                {"name": "name", "description": None, "type": named("INPUT_OBJECT", "String_comparison_exp"), "defaultValue": None},
            ],
        },
        {
            "kind": "UNION",
            "name": "search_result",
            "description": None,
            "possibleTypes": [named("OBJECT", "users"), named("OBJECT", "orders")],
        },
        {
            "kind": "INTERFACE",
            "name": "node",
            "description": None,
            "fields": [field("id", non_null(named("SCALAR", "Int")))],
            "possibleTypes": [named("OBJECT", "users")],
        },
        object_type("__Schema", [field("types", non_null(list_of(non_null(named("OBJECT", "__Type")))))]),
        object_type("__internal_root", [field("x", named("SCALAR", "Int"))]),
    ]
    types.extend(extra_types or [])
    return {
        "queryType": {"name": "query_root"},
        "mutationType": {"name": "mutation_root"},
        "subscriptionType": {"name": "subscription_root"},
        "types": types,
        "directives": [],
    }


@pytest.fixture
def raw_schema() -> dict[str, Any]:
    return make_raw_schema()


@pytest.fixture
def schema(raw_schema: dict[str, Any]) -> IntrospectedSchema:
    return parse_schema(raw_schema)


def make_client(
    response: Any = None, side_effect: Any = None, endpoint: str = "https://hasura.example.com/v1/graphql"
) -> MagicMock:
    """A GraphQLClient stand-in whose ``request`` is an AsyncMock."""
    client = MagicMock()
    client.endpoint = endpoint
    client.request = AsyncMock(return_value=response, side_effect=side_effect)
    return client


@pytest.fixture
def context(raw_schema: dict[str, Any]) -> ToolContext:
    """Tool context whose cache is already populated with the sample schema."""
    client = make_client()
    cache = SchemaCache(client)
    cache._schema = parse_schema(raw_schema)  # pyright: ignore[reportPrivateUsage]
    return ToolContext(client=client, cache=cache)
