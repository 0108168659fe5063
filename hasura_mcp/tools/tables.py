"""Table-oriented tools: listing, description, preview and aggregation.

Hasura exposes each tracked table as a query-root field returning a list
of an object type with the same name, plus ``<table>_aggregate``,
``<table>_by_pk`` and ``<table>_stream`` companions.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Literal

from pydantic import Field

from hasura_mcp.errors import BackendFault, RequestValidationError
from hasura_mcp.query.governor import ROW_CEILING
from hasura_mcp.query.synthesizer import (
    aggregate_field_name,
    build_aggregate_query,
    build_preview_query,
)
from hasura_mcp.schema.projection import projectable_fields
from hasura_mcp.schema.roots import classify_roots
from hasura_mcp.schema.wrappers import render_resolved, render_type_ref, resolve_type_ref
from hasura_mcp.tools.base import ServerTool, ToolInput, ToolResult, json_result

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA = "public"

# Root fields that are Hasura companions of a table, not tables themselves
_COMPANION_MARKERS = ("_aggregate", "_by_pk", "_stream", "_mutation")

_SCHEMA_RE = re.compile(r"schema:\s*([^\s,]+)", re.IGNORECASE)


def schema_of(description: str | None) -> str:
    """Database schema named by a ``schema: <name>`` marker, else ``public``."""
    if description:
        m = _SCHEMA_RE.search(description)
        if m:
            return m.group(1)
    return DEFAULT_SCHEMA


def _matches(needle: str | None, *haystacks: str | None) -> bool:
    if not needle:
        return True
    needle = needle.lower()
    return any(h and needle in h.lower() for h in haystacks)


# -- list_tables ---------------------------------------------------------------


class ListTablesInput(ToolInput):
    schema_name: str | None = Field(
        default=None,
        description="Optional. The database schema name to filter results. If omitted, returns tables from all schemas.",
    )
    filter: str | None = Field(
        default=None,
        description="Optional. Case-insensitive search filter for table names and descriptions.",
    )
    limit: int = Field(
        default=10, gt=0, description="Optional. Maximum number of tables to return per schema. Default: 10."
    )
    offset: int = Field(
        default=0, ge=0, description="Optional. Number of tables to skip for pagination. Default: 0."
    )


class ListTablesTool(ServerTool[ListTablesInput]):
    name = "list_tables"
    description = """
Lists available data tables (or collections) managed by Hasura, organized by schema with descriptions.

Parameters:
  - schemaName: Filter by database schema name (optional)
  - filter: Case-insensitive text search on table names/descriptions (optional)
  - limit: Maximum number of tables to return per schema (default: 10)
  - offset: Number of tables to skip for pagination (default: 0)

Returns an array of schema groups, each with:
  - schema: Schema name
  - tables: Array of table objects with name and description
  - totalCount: Total tables in schema before filtering
  - filteredCount: Tables after filter, before pagination
  - returnedCount: Actual number of tables returned
  - offset: Current offset value
  - limit: Current limit value
""".strip()
    input_model = ListTablesInput

    async def execute(self, params: ListTablesInput) -> ToolResult:
        logger.info(
            "Executing tool '%s' for schema: %s, filter: %s, limit: %d, offset: %d",
            self.name,
            params.schema_name or "ALL",
            params.filter or "NONE",
            params.limit,
            params.offset,
        )
        schema = await self.cache.get()
        query_root = classify_roots(schema).query

        grouped: dict[str, list[dict[str, Any]]] = {}
        for f in query_root.fields if query_root else ():
            if f.name.startswith("__") or any(m in f.name for m in _COMPANION_MARKERS):
                continue
            table_schema = schema_of(f.description)
            if params.schema_name and table_schema != params.schema_name:
                continue
            grouped.setdefault(table_schema, []).append(
                {"name": f.name, "description": f.description}
            )

        output: list[dict[str, Any]] = []
        for table_schema, tables in sorted(grouped.items()):
            filtered = sorted(
                (t for t in tables if _matches(params.filter, t["name"], t["description"])),
                key=lambda t: t["name"],
            )
            page = filtered[params.offset : params.offset + params.limit]
            if not page:
                continue
            output.append(
                {
                    "schema": table_schema,
                    "tables": page,
                    "totalCount": len(tables),
                    "filteredCount": len(filtered),
                    "returnedCount": len(page),
                    "offset": params.offset,
                    "limit": params.limit,
                }
            )

        return json_result(output)


# -- describe_table ------------------------------------------------------------


class DescribeTableInput(ToolInput):
    table_name: str = Field(description="The exact name of the table to describe.")
    schema_name: str = Field(
        default=DEFAULT_SCHEMA, description="Optional. The database schema name, defaults to 'public'."
    )


class DescribeTableTool(ServerTool[DescribeTableInput]):
    name = "describe_table"
    description = """
Shows the complete structure of a table including all columns with their types and descriptions.

Parameters:
  - tableName: The exact name of the table to describe
  - schemaName: The database schema name (default: 'public')

Returns:
  - table: Object containing table metadata
    - name: Table name
    - schema: Schema name
    - description: Table description (if available)
    - columns: Array of column objects with:
      - name: Column name
      - type: GraphQL type (e.g., String!, [Int], etc.)
      - description: Column description (if available)
      - args: Arguments for the field (if any)

Note: If the exact table name is not found, the name with its first letter
upper-cased is tried as well.
""".strip()
    input_model = DescribeTableInput

    async def execute(self, params: DescribeTableInput) -> ToolResult:
        logger.info(
            "Executing tool '%s' for table: %s in schema: %s",
            self.name,
            params.table_name,
            params.schema_name,
        )
        schema = await self.cache.get()

        table = schema.find_object(params.table_name)
        if table is None:
            logger.info("No direct match for table type: %s, trying case variations", params.table_name)
            table = schema.find_object(params.table_name[:1].upper() + params.table_name[1:])
        if table is None:
            raise RequestValidationError(
                f"Table '{params.table_name}' not found in schema. Check the table name and schema."
            )

        columns = [
            {
                "name": f.name,
                "type": render_resolved(resolve_type_ref(f.type)),
                "description": f.description,
                "args": [
                    {
                        "name": a.name,
                        "type": render_type_ref(a.type),
                        "description": a.description,
                    }
                    for a in f.args
                ]
                or None,
            }
            for f in table.fields
        ]

        return json_result(
            {
                "table": {
                    "name": params.table_name,
                    "schema": params.schema_name,
                    "description": table.description,
                    "columns": sorted(columns, key=lambda c: c["name"]),
                }
            }
        )


# -- preview_table_data --------------------------------------------------------


class PreviewTableDataInput(ToolInput):
    table_name: str = Field(description="The exact name of the table to preview.")
    limit: int = Field(
        default=5,
        gt=0,
        le=ROW_CEILING,
        description=f"Optional. Maximum number of rows to fetch (at most {ROW_CEILING}). Default: 5.",
    )
    offset: int = Field(
        default=0, ge=0, description="Optional. Number of rows to skip for pagination. Default: 0."
    )


class PreviewTableDataTool(ServerTool[PreviewTableDataInput]):
    name = "preview_table_data"
    description = f"""
Fetches a limited sample of rows from a specified table for preview purposes.

Parameters:
  - tableName: The exact name of the table to preview
  - limit: Maximum number of rows to fetch (default: 5, at most {ROW_CEILING})
  - offset: Number of rows to skip for pagination (default: 0)

Returns:
  - data: JSON object with table data containing scalar/enum fields only
  - returnedCount: Number of rows returned
  - limit: Current limit value
  - offset: Current offset value

Note: Only scalar fields (String, Int, Boolean, etc.) and enum fields are included
in the preview. Use GraphQL queries directly for complex nested data.
""".strip()
    input_model = PreviewTableDataInput

    async def execute(self, params: PreviewTableDataInput) -> ToolResult:
        logger.info(
            "Executing tool '%s' for table: %s, limit: %d, offset: %d",
            self.name,
            params.table_name,
            params.limit,
            params.offset,
        )
        schema = await self.cache.get()
        table = schema.find_object(params.table_name)
        if table is None:
            raise RequestValidationError(
                f"Table (Object type) '{params.table_name}' not found in schema."
            )

        fields = projectable_fields(table)
        if fields == ["__typename"]:
            logger.warning("No scalar fields found for table %s, selecting __typename only", params.table_name)

        built = build_preview_query(params.table_name, fields, params.limit, params.offset)
        result = await self.client.request(built.document, built.variables)

        rows = result.get(params.table_name) if isinstance(result, dict) else None
        return json_result(
            {
                "data": result,
                "returnedCount": len(rows) if isinstance(rows, list) else 0,
                "limit": params.limit,
                "offset": params.offset,
            }
        )


# -- aggregate_data ------------------------------------------------------------


class AggregateDataInput(ToolInput):
    table_name: str = Field(description="The exact name of the table to aggregate.")
    aggregate_function: Literal["count", "sum", "avg", "min", "max"] = Field(
        description="The aggregation function to perform."
    )
    field: str | None = Field(
        default=None,
        description="Required for 'sum', 'avg', 'min', 'max'. The field to aggregate. Ignored for 'count'.",
    )
    filter: dict[str, Any] | None = Field(
        default=None,
        description="Optional. A Hasura GraphQL 'where' filter object applied before aggregation.",
    )


class AggregateDataTool(ServerTool[AggregateDataInput]):
    name = "aggregate_data"
    description = """
Performs aggregation operations on a Hasura table (count, sum, avg, min, max).

Parameters:
  - tableName: The exact name of the table to aggregate
  - aggregateFunction: The aggregation function (count, sum, avg, min, max)
  - field: The field to aggregate (required for sum, avg, min, max; not used for count)
  - filter: Hasura GraphQL 'where' filter object to filter rows before aggregation (optional)

Returns:
  - For count: { "count": number }
  - For sum/avg/min/max: { "<function>": { "<field>": value } }
""".strip()
    input_model = AggregateDataInput

    async def execute(self, params: AggregateDataInput) -> ToolResult:
        logger.info(
            "Executing tool '%s': %s on %s",
            self.name,
            params.aggregate_function,
            params.table_name,
        )
        if params.aggregate_function == "count" and params.field:
            logger.warning("'field' parameter is ignored for 'count' aggregation.")

        built = build_aggregate_query(
            params.table_name,
            params.aggregate_function,
            field=params.field,
            filter=params.filter,
        )

        try:
            result = await self.client.request(built.document, built.variables)
        except BackendFault as e:
            if not e.errors:
                raise
            raise BackendFault(
                f"GraphQL aggregation failed: {', '.join(e.errors)}. "
                "Check table/field names and filter syntax.",
                errors=e.errors,
            ) from e

        aggregate_name = aggregate_field_name(params.table_name)
        node = result.get(aggregate_name) if isinstance(result, dict) else None
        if isinstance(node, dict) and node.get("aggregate") is not None:
            return json_result(node["aggregate"])

        logger.warning("Unexpected result structure from aggregation query: %s", result)
        return json_result(result)
