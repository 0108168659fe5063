"""Schema discovery tools: root fields, type descriptions, root-type checks."""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import Field

from hasura_mcp.errors import RequestValidationError
from hasura_mcp.schema.roots import SUSPECT_ROOT_SUFFIX, classify_roots
from hasura_mcp.schema.types import (
    EnumType,
    FieldDescriptor,
    InputObjectType,
    InterfaceType,
    ObjectType,
    ScalarType,
    TypeDescriptor,
    UnionType,
)
from hasura_mcp.schema.wrappers import render_type_ref
from hasura_mcp.tools.base import NoInput, ServerTool, ToolInput, ToolResult, json_result

logger = logging.getLogger(__name__)


# -- list_root_fields ----------------------------------------------------------


class ListRootFieldsInput(ToolInput):
    field_type: Literal["QUERY", "MUTATION", "SUBSCRIPTION"] | None = Field(
        default=None,
        description="Optional. Filter by field type: QUERY, MUTATION, or SUBSCRIPTION.",
    )
    filter: str | None = Field(
        default=None,
        description="Optional. Case-insensitive search filter for field names and descriptions.",
    )
    limit: int = Field(
        default=10, gt=0, description="Optional. Maximum number of fields to return. Default: 10."
    )
    offset: int = Field(
        default=0, ge=0, description="Optional. Number of fields to skip for pagination. Default: 0."
    )


class ListRootFieldsTool(ServerTool[ListRootFieldsInput]):
    name = "list_root_fields"
    description = """
Lists the available top-level query, mutation, or subscription fields from the GraphQL schema.

Parameters:
  - fieldType: Filter by QUERY, MUTATION, or SUBSCRIPTION (optional)
  - filter: Case-insensitive text search on field names/descriptions (optional)
  - limit: Maximum number of fields to return (default: 10)
  - offset: Number of fields to skip for pagination (default: 0)

Returns:
  - fields: Array of field objects with name and description
  - totalCount: Total fields before filtering
  - filteredCount: Fields after filter, before pagination
  - returnedCount: Actual number of fields returned
  - offset: Current offset value
  - limit: Current limit value
  - warning: Alert if custom root types are detected (optional)
  - unsupportedTypes: Array of custom root type names (optional)
""".strip()
    input_model = ListRootFieldsInput

    async def execute(self, params: ListRootFieldsInput) -> ToolResult:
        logger.info(
            "Executing tool '%s', filtering by: %s, filter: %s, limit: %d, offset: %d",
            self.name,
            params.field_type or "ALL",
            params.filter or "NONE",
            params.limit,
            params.offset,
        )
        schema = await self.cache.get()
        roots = classify_roots(schema)

        selected = {
            "QUERY": roots.query,
            "MUTATION": roots.mutation,
            "SUBSCRIPTION": roots.subscription,
        }
        fields: list[FieldDescriptor] = []
        for role, root in selected.items():
            if root is not None and params.field_type in (None, role):
                fields.extend(root.fields)

        info = [{"name": f.name, "description": f.description or "No description."} for f in fields]
        total_count = len(info)

        if params.filter:
            needle = params.filter.lower()
            info = [
                f for f in info if needle in f["name"].lower() or needle in f["description"].lower()
            ]
        info.sort(key=lambda f: f["name"])
        filtered_count = len(info)
        page = info[params.offset : params.offset + params.limit]

        result: dict[str, Any] = {
            "fields": page,
            "totalCount": total_count,
            "filteredCount": filtered_count,
            "returnedCount": len(page),
            "offset": params.offset,
            "limit": params.limit,
        }
        if roots.suspects:
            names = [s.name for s in roots.suspects]
            result["warning"] = (
                f"Found {len(names)} potential custom root type(s) that are not standard "
                f"Query/Mutation/Subscription types: {', '.join(names)}. "
                "These may require additional support to be queried."
            )
            result["unsupportedTypes"] = names

        return json_result(result)


# -- describe_graphql_type -----------------------------------------------------


class DescribeGraphQLTypeInput(ToolInput):
    type_name: str = Field(description="The exact, case-sensitive name of the GraphQL type.")


def _describe_fields(fields: tuple[FieldDescriptor, ...]) -> list[dict[str, Any]]:
    return [
        {
            "name": f.name,
            "description": f.description,
            "type": render_type_ref(f.type),
            "args": [{"name": a.name, "type": render_type_ref(a.type)} for a in f.args],
        }
        for f in fields
    ]


def describe_type(type_info: TypeDescriptor) -> dict[str, Any]:
    """Kind-specific description of a single type."""
    out: dict[str, Any] = {
        "kind": type_info.kind.value,
        "name": type_info.name,
        "description": type_info.description,
    }
    if isinstance(type_info, ObjectType):
        out["fields"] = _describe_fields(type_info.fields)
        out["interfaces"] = list(type_info.interfaces)
    elif isinstance(type_info, InterfaceType):
        out["fields"] = _describe_fields(type_info.fields)
        out["possibleTypes"] = list(type_info.possible_types)
    elif isinstance(type_info, UnionType):
        out["possibleTypes"] = list(type_info.possible_types)
    elif isinstance(type_info, EnumType):
        out["enumValues"] = [
            {"name": v.name, "description": v.description} for v in type_info.enum_values
        ]
    elif isinstance(type_info, InputObjectType):
        out["inputFields"] = [
            {"name": f.name, "description": f.description, "type": render_type_ref(f.type)}
            for f in type_info.input_fields
        ]
    elif not isinstance(type_info, ScalarType):
        raise TypeError(f"Unhandled type descriptor {type(type_info).__name__}")
    return out


class DescribeGraphQLTypeTool(ServerTool[DescribeGraphQLTypeInput]):
    name = "describe_graphql_type"
    description = """
Provides detailed information about a specific GraphQL type from the schema.

Parameters:
  - typeName: The exact, case-sensitive name of the GraphQL type

Returns:
  - kind: Type kind (OBJECT, INPUT_OBJECT, SCALAR, ENUM, INTERFACE, UNION)
  - name: Type name
  - description: Type description (if available)
  - fields: Array of fields with names, types, and arguments (for OBJECT/INTERFACE)
  - interfaces: Implemented interface names (for OBJECT)
  - inputFields: Array of input fields (for INPUT_OBJECT)
  - enumValues: Array of enum values (for ENUM)
  - possibleTypes: Array of possible type names (for UNION/INTERFACE)
""".strip()
    input_model = DescribeGraphQLTypeInput

    async def execute(self, params: DescribeGraphQLTypeInput) -> ToolResult:
        logger.info("Executing tool '%s' for type: %s", self.name, params.type_name)
        schema = await self.cache.get()
        type_info = schema.find(params.type_name)
        if type_info is None:
            raise RequestValidationError(f"Type '{params.type_name}' not found in the schema.")
        return json_result(describe_type(type_info))


# -- check_unsupported_root_types ----------------------------------------------


class CheckUnsupportedRootTypesTool(ServerTool[NoInput]):
    name = "check_unsupported_root_types"
    description = f"""
Checks the GraphQL schema for non-standard or custom root types that may not be supported.

Parameters:
  - None

Returns:
  - hasUnsupportedTypes: Boolean indicating if custom root types were detected
  - standardTypes: Object showing the standard query/mutation/subscription type names
  - unsupportedTypes: Array of detected custom root types with name and fieldCount
  - recommendation: Guidance message on handling custom types

Note: Custom root types are object types whose name ends with "{SUSPECT_ROOT_SUFFIX}" but
that are not assigned as the query, mutation or subscription type.
""".strip()
    input_model = NoInput

    async def execute(self, params: NoInput) -> ToolResult:
        logger.info("Executing tool '%s'", self.name)
        schema = await self.cache.get()
        roots = classify_roots(schema)

        unsupported = [{"name": s.name, "fieldCount": s.field_count} for s in roots.suspects]
        if unsupported:
            recommendation = (
                f"Found {len(unsupported)} custom root type(s). These types may indicate: "
                "1) Custom schema configuration requiring special handling, "
                "2) Federation or stitching setup with custom root types, or "
                "3) Schema design patterns not following GraphQL conventions. "
                "Review these types to determine if they need to be queried through special "
                "endpoints or if the schema configuration needs adjustment."
            )
        else:
            recommendation = (
                "No custom root types detected. Schema follows standard GraphQL conventions "
                "with standard Query/Mutation/Subscription types."
            )

        return json_result(
            {
                "hasUnsupportedTypes": bool(unsupported),
                "standardTypes": roots.bound_names,
                "unsupportedTypes": unsupported,
                "recommendation": recommendation,
            }
        )
