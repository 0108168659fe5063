"""Build GraphQL documents from AST nodes instead of string concatenation.

Only names (fields, types, variables) end up in the document text, and each
one is checked against the GraphQL ``Name`` grammar first. Argument values
can only be ``$variables``; their runtime values are collected separately
and sent alongside the document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Any

from graphql.language import print_ast
from graphql.language.ast import (
    ArgumentNode,
    DocumentNode,
    FieldNode,
    NamedTypeNode,
    NameNode,
    NonNullTypeNode,
    OperationDefinitionNode,
    OperationType,
    SelectionSetNode,
    TypeNode,
    VariableDefinitionNode,
    VariableNode,
)

from hasura_mcp.errors import RequestValidationError

_NAME_RE = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


def validate_name(name: str, what: str = "name") -> str:
    """Return *name* unchanged if it is a legal GraphQL name, else raise."""
    if not isinstance(name, str) or not _NAME_RE.match(name):
        raise RequestValidationError(f"Invalid GraphQL {what}: {name!r}")
    return name


def _name(value: str, what: str = "name") -> NameNode:
    return NameNode(value=validate_name(value, what))


@dataclass
class BuiltDocument:
    """A printed GraphQL document and the variables it references."""

    document: str
    variables: dict[str, Any] = field(default_factory=lambda: dict[str, Any]())


class DocumentBuilder:
    """Assemble a single-operation document.

    >>> b = DocumentBuilder(OperationType.QUERY, "Users")
    >>> limit = b.variable("limit", "Int", 5)
    >>> built = b.build([b.field("users", {"limit": limit}, ["id"])])
    >>> built.variables
    {'limit': 5}
    """

    def __init__(self, operation: OperationType = OperationType.QUERY, name: str | None = None):
        self._operation = operation
        self._name = _name(name, "operation name") if name else None
        self._definitions: list[VariableDefinitionNode] = []
        self._values: dict[str, Any] = {}

    def variable(
        self, name: str, type_name: str, value: Any, *, non_null: bool = True
    ) -> VariableNode:
        """Declare ``$name: type_name[!]`` and bind *value* to it."""
        if name in self._values:
            raise ValueError(f"Variable ${name} is already declared")
        var = VariableNode(name=_name(name, "variable name"))
        type_node: TypeNode = NamedTypeNode(name=_name(type_name, "type name"))
        if non_null:
            type_node = NonNullTypeNode(type=type_node)
        self._definitions.append(
            VariableDefinitionNode(variable=var, type=type_node, directives=())
        )
        self._values[name] = value
        return var

    def field(
        self,
        name: str,
        arguments: dict[str, VariableNode] | None = None,
        selections: list[FieldNode | str] | None = None,
    ) -> FieldNode:
        """A field selection. Arguments accept declared variables only."""
        args: list[ArgumentNode] = []
        for arg_name, var in (arguments or {}).items():
            if not isinstance(var, VariableNode):
                raise TypeError(f"Argument {arg_name!r} must be bound to a variable")
            args.append(ArgumentNode(name=_name(arg_name, "argument name"), value=var))

        selection_set = None
        if selections:
            selection_set = SelectionSetNode(
                selections=tuple(
                    s if isinstance(s, FieldNode) else FieldNode(name=_name(s, "field name"))
                    for s in selections
                )
            )

        return FieldNode(
            name=_name(name, "field name"),
            arguments=tuple(args),
            directives=(),
            selection_set=selection_set,
        )

    def build(self, selections: list[FieldNode]) -> BuiltDocument:
        operation = OperationDefinitionNode(
            operation=self._operation,
            name=self._name,
            variable_definitions=tuple(self._definitions),
            directives=(),
            selection_set=SelectionSetNode(selections=tuple(selections)),
        )
        document = DocumentNode(definitions=(operation,))
        return BuiltDocument(document=print_ast(document), variables=dict(self._values))
