"""Connectivity check. Failures are reported as data, never raised."""

from __future__ import annotations

import asyncio
import json
import logging

from pydantic import Field, HttpUrl

from hasura_mcp.errors import BackendFault
from hasura_mcp.tools.base import ServerTool, ToolInput, ToolResult

logger = logging.getLogger(__name__)

HEALTH_QUERY = "query HealthCheck { __typename }"


class HealthCheckInput(ToolInput):
    health_endpoint_url: HttpUrl | None = Field(
        default=None,
        description="Optional. A specific HTTP health check URL to GET instead of querying the GraphQL endpoint.",
    )


class HealthCheckTool(ServerTool[HealthCheckInput]):
    name = "health_check"
    description = """
Checks if the configured Hasura GraphQL endpoint is reachable and responsive.

Parameters:
  - healthEndpointUrl: A specific HTTP health check URL to test (optional)

Returns:
  - healthy: true when the check succeeded, false otherwise
  - message: Endpoint status and response details, or the failure reason

Note: If no healthEndpointUrl is provided, runs `query HealthCheck { __typename }`
against the configured endpoint. A failed check is reported as a normal result
(healthy: false), not as a tool error.
""".strip()
    input_model = HealthCheckInput

    async def execute(self, params: HealthCheckInput) -> ToolResult:
        logger.info("Executing tool '%s'...", self.name)
        try:
            if params.health_endpoint_url is not None:
                url = str(params.health_endpoint_url)
                logger.debug("Performing HTTP GET to: %s", url)
                response = await asyncio.to_thread(self.client.get, url)
                detail = f"Health endpoint {url} status: {response.status_code} {response.reason}"
                if not response.ok:
                    raise BackendFault(detail)
            else:
                logger.debug("Performing GraphQL query { __typename } to: %s", self.client.endpoint)
                result = await self.client.request(HEALTH_QUERY)
                detail = (
                    f"GraphQL endpoint {self.client.endpoint} is responsive. "
                    f"Result: {json.dumps(result)}"
                )
        except Exception as e:
            logger.error("Tool '%s' failed: %s", self.name, e)
            return ToolResult(
                text=json.dumps({"healthy": False, "message": f"Health check failed: {e}"}, indent=2),
                is_error=False,
            )

        return ToolResult(
            text=json.dumps({"healthy": True, "message": f"Health check successful. {detail}"}, indent=2)
        )
