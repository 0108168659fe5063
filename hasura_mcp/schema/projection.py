"""Pick the fields of a type that can be selected without a sub-selection."""

from __future__ import annotations

from hasura_mcp.schema.types import InterfaceType, ObjectType
from hasura_mcp.schema.wrappers import resolve_type_ref

TYPENAME_FIELD = "__typename"


def projectable_fields(type_descriptor: ObjectType | InterfaceType) -> list[str]:
    """Return the scalar and enum field names of *type_descriptor*, in schema order.

    Object, interface and union fields (lists of them included) are skipped.
    When nothing is left, returns ``["__typename"]`` so the selection set is
    still legal.
    """
    names = [
        f.name
        for f in type_descriptor.fields
        if resolve_type_ref(f.type).is_leaf
    ]
    return names or [TYPENAME_FIELD]
