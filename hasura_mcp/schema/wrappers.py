"""Resolve NON_NULL/LIST wrapper chains to their innermost named type."""

from __future__ import annotations

from dataclasses import dataclass

from hasura_mcp.errors import SchemaMalformed
from hasura_mcp.schema.types import (
    MAX_WRAPPER_DEPTH,
    ListRef,
    NamedRef,
    NonNullRef,
    TypeKind,
    TypeRef,
)


@dataclass(frozen=True)
class ResolvedType:
    """Innermost named type plus the wrapper flags seen on the way down."""

    name: str
    kind: TypeKind
    is_list: bool = False
    is_non_null: bool = False

    @property
    def is_leaf(self) -> bool:
        """True for scalar and enum types, which need no sub-selection."""
        return self.kind in (TypeKind.SCALAR, TypeKind.ENUM)


def resolve_type_ref(ref: TypeRef, max_depth: int = MAX_WRAPPER_DEPTH) -> ResolvedType:
    """Strip wrapper layers off *ref* until a named type remains.

    ``is_list`` is set when any LIST layer was crossed and ``is_non_null``
    when any NON_NULL layer was crossed, so ``[Int!]!`` and ``[Int]!``
    resolve identically.

    >>> resolve_type_ref(NonNullRef(ListRef(NamedRef(TypeKind.SCALAR, "Int"))))
    ResolvedType(name='Int', kind=<TypeKind.SCALAR: 'SCALAR'>, is_list=True, is_non_null=True)
    """
    is_list = False
    is_non_null = False
    current: object = ref

    for _ in range(max_depth + 1):
        if isinstance(current, NamedRef):
            if not current.name:
                raise SchemaMalformed("Type reference chain ends in a nameless type")
            return ResolvedType(
                name=current.name,
                kind=current.kind,
                is_list=is_list,
                is_non_null=is_non_null,
            )
        if isinstance(current, NonNullRef):
            is_non_null = True
            current = current.of_type
        elif isinstance(current, ListRef):
            is_list = True
            current = current.of_type
        else:
            raise SchemaMalformed(
                f"Type reference chain ends without a named type (found {type(current).__name__})"
            )

    raise SchemaMalformed(f"Type reference nests more than {max_depth} wrapper layers")


def render_resolved(resolved: ResolvedType) -> str:
    """Render a compact display string: ``Name``, ``[Name]``, ``Name!`` or ``[Name]!``.

    Inner non-null markers collapse onto the outer one.
    """
    text = f"[{resolved.name}]" if resolved.is_list else resolved.name
    if resolved.is_non_null:
        text += "!"
    return text


def render_type_ref(ref: TypeRef, max_depth: int = MAX_WRAPPER_DEPTH) -> str:
    """Render *ref* in exact GraphQL type syntax, e.g. ``[String!]!``."""
    if max_depth < 0:
        raise SchemaMalformed("Type reference nests too many wrapper layers")
    if isinstance(ref, NamedRef):
        return ref.name
    if isinstance(ref, NonNullRef):
        return render_type_ref(ref.of_type, max_depth - 1) + "!"
    if isinstance(ref, ListRef):
        return "[" + render_type_ref(ref.of_type, max_depth - 1) + "]"
    raise SchemaMalformed(f"Unexpected type reference node {type(ref).__name__}")
