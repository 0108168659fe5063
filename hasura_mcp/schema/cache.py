"""Process-lifetime cache of the introspected schema.

Lifecycle: ``empty -> populated``, and back to ``empty`` when a fetch fails
or ``invalidate()`` is called. Concurrent ``get()`` calls share a single
in-flight fetch.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from graphql import get_introspection_query

from hasura_mcp.client import RequestExecutor
from hasura_mcp.errors import HasuraMcpError, SchemaMalformed
from hasura_mcp.schema.types import IntrospectedSchema, parse_schema

logger = logging.getLogger(__name__)


class SchemaCache:
    """Fetch the schema once and hand the same snapshot to every caller.

    The check-and-set of the in-flight task happens without an ``await`` in
    between, so on a single event loop only one fetch can be started at a
    time. Waiters are shielded: cancelling one caller does not cancel the
    shared fetch.
    """

    def __init__(self, executor: RequestExecutor):
        self._executor = executor
        self._schema: IntrospectedSchema | None = None
        self._inflight: asyncio.Task[IntrospectedSchema] | None = None

    @property
    def schema(self) -> IntrospectedSchema | None:
        """The cached schema, or None if nothing has been fetched yet."""
        return self._schema

    async def get(self) -> IntrospectedSchema:
        if self._schema is not None:
            return self._schema

        task = self._inflight
        if task is None:
            task = asyncio.ensure_future(self._fetch())
            task.add_done_callback(self._on_fetch_done)
            self._inflight = task

        return await asyncio.shield(task)

    def invalidate(self) -> None:
        """Drop the cached schema so the next ``get()`` fetches again."""
        self._schema = None

    async def _fetch(self) -> IntrospectedSchema:
        logger.info("Fetching GraphQL schema via introspection...")
        try:
            result: Any = await self._executor.request(get_introspection_query())
            if not isinstance(result, dict) or not result.get("__schema"):
                raise SchemaMalformed("Introspection query did not return a __schema object.")
            schema = parse_schema(result["__schema"])
        except HasuraMcpError as e:
            logger.error("Failed to fetch or cache introspection schema: %s", e)
            self._schema = None
            raise type(e)(f"Failed to get GraphQL schema: {e}") from e

        self._schema = schema
        logger.info("Introspection successful, schema cached (%d types).", len(schema.types))
        return schema

    def _on_fetch_done(self, task: asyncio.Task[IntrospectedSchema]) -> None:
        if self._inflight is task:
            self._inflight = None
        if not task.cancelled():
            # Mark the exception as retrieved; waiters re-raise it themselves.
            task.exception()
