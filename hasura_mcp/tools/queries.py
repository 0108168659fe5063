"""Passthrough query and mutation tools."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import Field

from hasura_mcp.query.governor import ROW_CEILING, annotate, enforce_ceiling, trim_result
from hasura_mcp.query.synthesizer import check_operation_role
from hasura_mcp.tools.base import ServerTool, ToolInput, ToolResult, json_result

logger = logging.getLogger(__name__)


class RunGraphQLQueryInput(ToolInput):
    query: str = Field(description="The GraphQL query string (must be a read-only operation).")
    variables: dict[str, Any] | None = Field(
        default=None, description="Optional. An object containing variables for the query."
    )
    limit: int | None = Field(
        default=None,
        gt=0,
        description="Optional. Maximum number of rows to return. Automatically added to variables.",
    )
    offset: int | None = Field(
        default=None,
        ge=0,
        description="Optional. Number of rows to skip for pagination. Automatically added to variables.",
    )
    force_big_query: bool = Field(
        default=False,
        description=f"Optional. Set to true to allow queries without limit or with limit > {ROW_CEILING}.",
    )


class RunGraphQLQueryTool(ServerTool[RunGraphQLQueryInput]):
    name = "run_graphql_query"
    description = f"""
Executes a read-only GraphQL query against the Hasura endpoint.

Parameters:
  - query: The GraphQL query string (must be a read-only operation, not a mutation)
  - variables: Object containing query variables (optional)
  - limit: Maximum number of rows to return, merged into variables as $limit (optional)
  - offset: Number of rows to skip, merged into variables as $offset (optional)
  - forceBigQuery: Set to true to bypass the limit safety check (optional)

Returns:
  - JSON result of the GraphQL query execution

Note: Mutation documents are rejected; use 'run_graphql_mutation' for insert,
update or delete operations. Reference $limit/$offset in your query to use them.

IMPORTANT: Queries require a limit <= {ROW_CEILING}. Without a limit, or with a larger one,
the query is rejected before it is sent unless 'forceBigQuery: true' is set.
""".strip()
    input_model = RunGraphQLQueryInput

    async def execute(self, params: RunGraphQLQueryInput) -> ToolResult:
        logger.info(
            "Executing tool '%s', limit: %s, offset: %s",
            self.name,
            params.limit,
            params.offset,
        )
        check_operation_role(params.query, mutation=False)
        enforce_ceiling(params.limit, params.force_big_query)

        variables = dict(params.variables or {})
        if params.limit is not None:
            variables["limit"] = params.limit
        if params.offset is not None:
            variables["offset"] = params.offset

        result = await self.client.request(params.query, variables)
        return json_result(result)


class RunGraphQLMutationInput(ToolInput):
    mutation: str = Field(description="The GraphQL mutation string.")
    variables: dict[str, Any] | None = Field(
        default=None, description="Optional. An object containing variables for the mutation."
    )
    force_big_query: bool = Field(
        default=False,
        description=f"Optional. Set to true to return lists longer than {ROW_CEILING} entries untrimmed.",
    )


class RunGraphQLMutationTool(ServerTool[RunGraphQLMutationInput]):
    name = "run_graphql_mutation"
    description = f"""
Executes a GraphQL mutation to insert, update, or delete data in the Hasura database.

Parameters:
  - mutation: The GraphQL mutation string (must start with 'mutation')
  - variables: Object containing mutation variables (optional)
  - forceBigQuery: Set to true to return the full response untrimmed (optional)

Returns:
  - JSON result of the GraphQL mutation execution
  - warning: Present when lists in the response were trimmed to {ROW_CEILING} entries

Note: Only mutation operations are accepted. For read-only operations, use
'run_graphql_query'. Any list in the response longer than {ROW_CEILING} entries
(e.g. 'returning') is trimmed unless 'forceBigQuery: true' is set.
""".strip()
    input_model = RunGraphQLMutationInput

    async def execute(self, params: RunGraphQLMutationInput) -> ToolResult:
        logger.info("Executing tool '%s'", self.name)
        check_operation_role(params.mutation, mutation=True)

        result = await self.client.request(params.mutation, params.variables)

        trimmed = trim_result(result, params.force_big_query)
        for t in trimmed.trimmed:
            logger.warning("Trimmed %s from %d to %d rows", t.path, t.original_length, trimmed.ceiling)
        return json_result(annotate(trimmed.value, trimmed))
