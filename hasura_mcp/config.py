"""Server settings resolved from the command line and the environment."""

from __future__ import annotations

import os

from pydantic import BaseModel, field_validator

ENDPOINT_ENV = "HASURA_GRAPHQL_ENDPOINT"
ADMIN_SECRET_ENV = "HASURA_ADMIN_SECRET"


class ServerSettings(BaseModel):
    endpoint: str
    admin_secret: str | None = None
    request_timeout: float | None = None

    @field_validator("endpoint")
    @classmethod
    def _check_endpoint(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Endpoint must be an http(s) URL, got {value!r}")
        return value

    @field_validator("admin_secret")
    @classmethod
    def _blank_secret_is_none(cls, value: str | None) -> str | None:
        return value or None

    @classmethod
    def resolve(
        cls,
        endpoint: str | None = None,
        admin_secret: str | None = None,
        request_timeout: float | None = None,
    ) -> ServerSettings:
        """Explicit arguments win over ``HASURA_GRAPHQL_ENDPOINT`` / ``HASURA_ADMIN_SECRET``."""
        endpoint = endpoint or os.environ.get(ENDPOINT_ENV)
        if not endpoint:
            raise ValueError(
                f"No Hasura endpoint given. Pass it as an argument or set {ENDPOINT_ENV}."
            )
        return cls(
            endpoint=endpoint,
            admin_secret=admin_secret or os.environ.get(ADMIN_SECRET_ENV),
            request_timeout=request_timeout,
        )
