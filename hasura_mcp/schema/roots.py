"""Classify the root operation types of an introspected schema."""

from __future__ import annotations

from dataclasses import dataclass, field

from hasura_mcp.schema.types import IntrospectedSchema, ObjectType

SUSPECT_ROOT_SUFFIX = "_root"
RESERVED_PREFIX = "__"


@dataclass(frozen=True)
class SuspectRootType:
    """An object type that looks like a root but is not bound to a role."""

    name: str
    field_count: int


@dataclass(frozen=True)
class RootTypeSet:
    query: ObjectType | None = None
    mutation: ObjectType | None = None
    subscription: ObjectType | None = None
    suspects: list[SuspectRootType] = field(default_factory=lambda: list[SuspectRootType]())

    @property
    def bound_names(self) -> dict[str, str]:
        """Map role name to type name for every bound root."""
        roles = {
            "query": self.query,
            "mutation": self.mutation,
            "subscription": self.subscription,
        }
        return {role: t.name for role, t in roles.items() if t is not None}


def classify_roots(
    schema: IntrospectedSchema, suspect_suffix: str = SUSPECT_ROOT_SUFFIX
) -> RootTypeSet:
    """Bind the canonical roots and list unbound root-like object types.

    A type is suspect when it is an OBJECT whose name ends with
    *suspect_suffix*, is not one of the three bound roots, and does not
    start with the reserved ``__`` prefix. This is advisory only.
    """
    query = schema.find_object(schema.query_type) if schema.query_type else None
    mutation = schema.find_object(schema.mutation_type) if schema.mutation_type else None
    subscription = (
        schema.find_object(schema.subscription_type) if schema.subscription_type else None
    )

    bound = {t.name for t in (query, mutation, subscription) if t is not None}
    suspects = [
        SuspectRootType(name=t.name, field_count=len(t.fields))
        for t in schema.types.values()
        if isinstance(t, ObjectType)
        and t.name.endswith(suspect_suffix)
        and t.name not in bound
        and not t.name.startswith(RESERVED_PREFIX)
    ]

    return RootTypeSet(
        query=query,
        mutation=mutation,
        subscription=subscription,
        suspects=suspects,
    )
