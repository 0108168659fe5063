"""Tests for the command line interface."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

from click.testing import CliRunner

from hasura_mcp.config import ENDPOINT_ENV
from hasura_mcp.errors import BackendFault
from hasura_mcp.main import cli
from hasura_mcp.tools.base import ToolResult

ENDPOINT = "https://hasura.example.com/v1/graphql"


def _patched_server(result: ToolResult | None = None, error: Exception | None = None) -> MagicMock:
    server = MagicMock()
    server.call_tool = AsyncMock(return_value=result, side_effect=error)
    return server


class TestTools:
    def test_lists_every_tool(self):
        result = CliRunner().invoke(cli, ["tools"])
        assert result.exit_code == 0
        for name in ("run_graphql_query", "aggregate_data", "check_unsupported_root_types"):
            assert name in result.output


class TestCall:
    def test_prints_tool_result(self):
        server = _patched_server(ToolResult(text='{"count": 3}'))
        with patch("hasura_mcp.server.HasuraServer", return_value=server) as server_cls:
            result = CliRunner().invoke(
                cli,
                ["call", "aggregate_data", "--endpoint", ENDPOINT, "--args", '{"tableName": "users", "aggregateFunction": "count"}'],
            )

        assert result.exit_code == 0, result.output
        assert '"count": 3' in result.output
        settings = server_cls.call_args.args[0]
        assert settings.endpoint == ENDPOINT
        server.call_tool.assert_awaited_once_with(
            "aggregate_data", {"tableName": "users", "aggregateFunction": "count"}
        )

    def test_tool_error_exits_nonzero(self):
        server = _patched_server(error=BackendFault("GraphQL operation failed: boom"))
        with patch("hasura_mcp.server.HasuraServer", return_value=server):
            result = CliRunner().invoke(cli, ["call", "list_tables", "--endpoint", ENDPOINT])

        assert result.exit_code == 1
        assert "boom" in result.output

    def test_bad_args_json(self):
        result = CliRunner().invoke(cli, ["call", "list_tables", "--endpoint", ENDPOINT, "--args", "{nope"])
        assert result.exit_code == 2
        assert "not valid JSON" in result.output

    def test_args_must_be_object(self):
        result = CliRunner().invoke(cli, ["call", "list_tables", "--endpoint", ENDPOINT, "--args", "[1, 2]"])
        assert result.exit_code == 2
        assert "must be a JSON object" in result.output

    def test_missing_endpoint(self, monkeypatch):
        monkeypatch.delenv(ENDPOINT_ENV, raising=False)
        result = CliRunner().invoke(cli, ["call", "list_tables"])
        assert result.exit_code == 2
        assert ENDPOINT_ENV in result.output


class TestServe:
    def test_runs_stdio_server(self):
        server = MagicMock()
        server.run_stdio = AsyncMock()
        with patch("hasura_mcp.server.HasuraServer", return_value=server):
            result = CliRunner().invoke(cli, ["serve", ENDPOINT, "secret"])

        assert result.exit_code == 0, result.output
        server.run_stdio.assert_awaited_once()
