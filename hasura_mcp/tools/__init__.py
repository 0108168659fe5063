"""Registry of every tool the server exposes."""

from __future__ import annotations

from hasura_mcp.tools.base import ServerTool, ToolContext
from hasura_mcp.tools.health import HealthCheckTool
from hasura_mcp.tools.queries import RunGraphQLMutationTool, RunGraphQLQueryTool
from hasura_mcp.tools.schema import (
    CheckUnsupportedRootTypesTool,
    DescribeGraphQLTypeTool,
    ListRootFieldsTool,
)
from hasura_mcp.tools.tables import (
    AggregateDataTool,
    DescribeTableTool,
    ListTablesTool,
    PreviewTableDataTool,
)

TOOL_CLASSES: list[type[ServerTool]] = [
    RunGraphQLQueryTool,
    RunGraphQLMutationTool,
    ListTablesTool,
    ListRootFieldsTool,
    DescribeGraphQLTypeTool,
    PreviewTableDataTool,
    AggregateDataTool,
    HealthCheckTool,
    DescribeTableTool,
    CheckUnsupportedRootTypesTool,
]


def build_tools(context: ToolContext) -> dict[str, ServerTool]:
    """Instantiate every tool against *context*, keyed by tool name."""
    return {cls.name: cls(context) for cls in TOOL_CLASSES}
