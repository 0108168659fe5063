"""HTTP client that sends GraphQL documents to the Hasura endpoint."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Protocol

import requests

from hasura_mcp.errors import BackendFault

logger = logging.getLogger(__name__)

ADMIN_SECRET_HEADER = "x-hasura-admin-secret"


class RequestExecutor(Protocol):
    """Anything that can run one GraphQL document and return its ``data``."""

    async def request(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any: ...


class GraphQLClient:
    """Send GraphQL documents to one endpoint.

    The blocking HTTP call runs in a worker thread so concurrent tool calls
    do not stall the event loop. An awaiting caller that gets cancelled
    abandons the result.

    ``requests.Session`` is not guaranteed to be thread-safe, so each worker
    thread lazily gets its own session. A *session* passed in is used by
    every thread as-is; the caller is responsible for its thread safety.
    """

    def __init__(
        self,
        endpoint: str,
        admin_secret: str | None = None,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self._endpoint = endpoint
        self._session = session
        self._local = threading.local()
        self._timeout = timeout
        self._headers: dict[str, str] = {"Content-Type": "application/json"}
        if admin_secret:
            self._headers[ADMIN_SECRET_HEADER] = admin_secret

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def session(self) -> requests.Session:
        """The session for the calling thread."""
        if self._session is not None:
            return self._session
        session: requests.Session | None = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    async def request(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await asyncio.to_thread(self.execute, document, variables, headers)

    def execute(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Run *document* with *variables* and return the response ``data``.

        Raises BackendFault when the transport fails, the body is not JSON,
        or the backend reports GraphQL errors. All error messages are joined
        with ", " so none is lost.
        """
        payload: dict[str, Any] = {"query": document}
        if variables:
            payload["variables"] = variables
        merged = {**self._headers, **(headers or {})}

        try:
            response = self.session.post(
                self._endpoint, json=payload, headers=merged, timeout=self._timeout
            )
        except requests.RequestException as e:
            logger.error("GraphQL request to %s failed: %s", self._endpoint, e)
            raise BackendFault(f"Request to {self._endpoint} failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("errors"):
            messages = [_error_message(err) for err in body["errors"]]
            joined = ", ".join(messages)
            logger.error("GraphQL request failed: %s", joined)
            raise BackendFault(f"GraphQL operation failed: {joined}", errors=messages)

        if response.status_code >= 400:
            logger.error("HTTP %s from %s", response.status_code, self._endpoint)
            raise BackendFault(f"HTTP {response.status_code} from {self._endpoint}")

        if not isinstance(body, dict):
            raise BackendFault(f"Response from {self._endpoint} is not a GraphQL JSON object")

        return body.get("data")

    def get(self, url: str) -> requests.Response:
        """Plain GET, used to probe a health-check URL."""
        try:
            return self.session.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise BackendFault(f"Request to {url} failed: {e}") from e


def _error_message(err: Any) -> str:
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    return "Unknown GraphQL error"
