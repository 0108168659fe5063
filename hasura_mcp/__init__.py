"""MCP server exposing schema discovery and safe querying of a Hasura GraphQL endpoint."""

SERVER_NAME = "mcp-servers/hasura-advanced"
__version__ = "1.1.0"
