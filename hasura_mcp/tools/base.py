"""Base classes for the tools exposed over MCP."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import json
import logging
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from hasura_mcp.client import GraphQLClient
from hasura_mcp.errors import RequestValidationError
from hasura_mcp.schema.cache import SchemaCache

logger = logging.getLogger(__name__)


class ToolInput(BaseModel):
    """Tool parameters: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NoInput(ToolInput):
    pass


In = TypeVar("In", bound=ToolInput)


@dataclass
class ToolResult:
    """A single text payload. ``is_error`` is only set when a tool reports
    a failure as data instead of raising."""

    text: str
    is_error: bool | None = None


def json_result(value: Any) -> ToolResult:
    return ToolResult(text=json.dumps(value, indent=2, default=str))


@dataclass
class ToolContext:
    """Shared collaborators handed to every tool."""

    client: GraphQLClient
    cache: SchemaCache


class ServerTool(ABC, Generic[In]):
    """A named operation with a declarative parameter model.

    Subclasses set ``name``, ``description`` and ``input_model`` and
    implement ``execute``. ``run`` validates raw arguments first, so a bad
    call never reaches the backend.
    """

    name: ClassVar[str] = "tool"
    description: ClassVar[str] = ""
    input_model: ClassVar[type[ToolInput]] = NoInput

    def __init__(self, context: ToolContext):
        self.context = context

    @property
    def client(self) -> GraphQLClient:
        return self.context.client

    @property
    def cache(self) -> SchemaCache:
        return self.context.cache

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the parameters, camelCase property names."""
        return self.input_model.model_json_schema(by_alias=True)

    async def run(self, arguments: dict[str, Any] | None = None) -> ToolResult:
        try:
            params = self.input_model.model_validate(arguments or {})
        except ValidationError as e:
            raise RequestValidationError(f"Invalid arguments for '{self.name}': {e}") from e

        try:
            return await self.execute(params)  # type: ignore[arg-type]
        except Exception as e:
            logger.error("Tool '%s' failed: %s", self.name, e)
            raise

    @abstractmethod
    async def execute(self, params: In) -> ToolResult:
        """Run the tool with validated parameters."""
        ...
