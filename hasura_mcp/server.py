"""MCP server wiring: tools, the schema resource and the stdio transport."""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
import mcp.types as types

from hasura_mcp import SERVER_NAME, __version__
from hasura_mcp.client import GraphQLClient
from hasura_mcp.config import ServerSettings
from hasura_mcp.errors import HasuraMcpError, RequestValidationError
from hasura_mcp.schema.cache import SchemaCache
from hasura_mcp.tools import build_tools
from hasura_mcp.tools.base import ServerTool, ToolContext, ToolResult

logger = logging.getLogger(__name__)

SCHEMA_RESOURCE_URI = "hasura:/schema"
SCHEMA_RESOURCE_NAME = "Hasura GraphQL Schema (via Introspection)"
SCHEMA_MIME_TYPE = "application/json"


class HasuraServer:
    """Owns the GraphQL client, the schema cache and every tool instance."""

    def __init__(
        self,
        settings: ServerSettings,
        *,
        client: GraphQLClient | None = None,
        cache: SchemaCache | None = None,
    ):
        self.settings = settings
        self.client = client or GraphQLClient(
            settings.endpoint,
            settings.admin_secret,
            timeout=settings.request_timeout,
        )
        self.cache = cache or SchemaCache(self.client)
        self.tools: dict[str, ServerTool] = build_tools(ToolContext(self.client, self.cache))
        self.server: Server[Any, Any] = Server(SERVER_NAME, version=__version__)
        self._register_handlers()

    def tool_specs(self) -> list[types.Tool]:
        return [
            types.Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema())
            for tool in self.tools.values()
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        tool = self.tools.get(name)
        if tool is None:
            raise RequestValidationError(
                f"Unknown tool '{name}'. Available: {sorted(self.tools)}"
            )
        return await tool.run(arguments)

    async def read_schema(self) -> str:
        logger.info("Handling read request for resource: %s", SCHEMA_RESOURCE_URI)
        try:
            schema = await self.cache.get()
        except HasuraMcpError as e:
            logger.error("Failed to provide schema resource: %s", e)
            raise
        return json.dumps(schema.raw, indent=2)

    async def prefetch_schema(self) -> bool:
        """Warm the schema cache. A failure is logged, not raised."""
        try:
            await self.cache.get()
        except HasuraMcpError as e:
            logger.warning("Initial schema fetch failed, will retry on first use: %s", e)
            return False
        return True

    async def run_stdio(self) -> None:
        logger.info("Starting %s v%s...", SERVER_NAME, __version__)
        await self.prefetch_schema()
        async with stdio_server() as (read_stream, write_stream):
            logger.info("%s v%s connected and running via STDIO.", SERVER_NAME, __version__)
            await self.server.run(
                read_stream, write_stream, self.server.create_initialization_options()
            )

    def _register_handlers(self) -> None:
        server = self.server

        @server.list_tools()
        async def _list_tools() -> list[types.Tool]:
            return self.tool_specs()

        @server.call_tool()
        async def _call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
            # Raising makes the transport report isError: true.
            result = await self.call_tool(name, arguments)
            return types.CallToolResult(
                content=[types.TextContent(type="text", text=result.text)],
                isError=bool(result.is_error),
            )

        @server.list_resources()
        async def _list_resources() -> list[types.Resource]:
            return [
                types.Resource(
                    uri=SCHEMA_RESOURCE_URI,  # type: ignore[arg-type]
                    name=SCHEMA_RESOURCE_NAME,
                    mimeType=SCHEMA_MIME_TYPE,
                )
            ]

        @server.read_resource()
        async def _read_resource(uri: Any) -> list[ReadResourceContents]:
            if str(uri) != SCHEMA_RESOURCE_URI:
                raise RequestValidationError(f"Unknown resource: {uri}")
            return [ReadResourceContents(content=await self.read_schema(), mime_type=SCHEMA_MIME_TYPE)]
