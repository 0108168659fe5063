"""Error taxonomy shared by the schema, query and tool layers."""

from __future__ import annotations


class HasuraMcpError(Exception):
    """Base class for every error raised by this package."""


class RequestValidationError(HasuraMcpError):
    """Caller input violates a documented precondition.

    Always raised before any request reaches the backend.
    """


class SchemaMalformed(HasuraMcpError):
    """Introspection data breaks a structural assumption."""


class BackendFault(HasuraMcpError):
    """The backend reported a transport or GraphQL-level failure."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors: list[str] = errors or []
