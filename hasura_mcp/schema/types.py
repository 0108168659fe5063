"""Typed view over a GraphQL introspection result.

Two closed families of types:
1. Type references: ``NamedRef | ListRef | NonNullRef``, the wrapper chain
   attached to every field and argument
2. Type descriptors: one dataclass per type kind (object, interface, union,
   enum, input object, scalar), each with its kind-specific payload

``parse_schema`` converts the raw ``__schema`` JSON into an immutable
``IntrospectedSchema``. Anything that does not fit raises ``SchemaMalformed``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from hasura_mcp.errors import SchemaMalformed

# Upper bound on NON_NULL/LIST layers around a named type
MAX_WRAPPER_DEPTH = 16


class TypeKind(str, Enum):
    SCALAR = "SCALAR"
    OBJECT = "OBJECT"
    INTERFACE = "INTERFACE"
    UNION = "UNION"
    ENUM = "ENUM"
    INPUT_OBJECT = "INPUT_OBJECT"


# -- Type references ----------------------------------------------------------


@dataclass(frozen=True)
class NamedRef:
    """Terminal node of a wrapper chain."""

    kind: TypeKind
    name: str


@dataclass(frozen=True)
class ListRef:
    of_type: TypeRef


@dataclass(frozen=True)
class NonNullRef:
    of_type: TypeRef


TypeRef = Union[NamedRef, ListRef, NonNullRef]


# -- Field-level descriptors --------------------------------------------------


@dataclass(frozen=True)
class InputValue:
    """An argument of a field, or a field of an input object."""

    name: str
    type: TypeRef
    description: str | None = None
    default_value: str | None = None


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    type: TypeRef
    description: str | None = None
    args: tuple[InputValue, ...] = ()


@dataclass(frozen=True)
class EnumValue:
    name: str
    description: str | None = None


# -- Type descriptors ---------------------------------------------------------


@dataclass(frozen=True)
class TypeDescriptor:
    kind: ClassVar[TypeKind]

    name: str
    description: str | None = None


@dataclass(frozen=True)
class ScalarType(TypeDescriptor):
    kind: ClassVar[TypeKind] = TypeKind.SCALAR


@dataclass(frozen=True)
class ObjectType(TypeDescriptor):
    kind: ClassVar[TypeKind] = TypeKind.OBJECT

    fields: tuple[FieldDescriptor, ...] = ()
    interfaces: tuple[str, ...] = ()


@dataclass(frozen=True)
class InterfaceType(TypeDescriptor):
    kind: ClassVar[TypeKind] = TypeKind.INTERFACE

    fields: tuple[FieldDescriptor, ...] = ()
    possible_types: tuple[str, ...] = ()


@dataclass(frozen=True)
class UnionType(TypeDescriptor):
    kind: ClassVar[TypeKind] = TypeKind.UNION

    possible_types: tuple[str, ...] = ()


@dataclass(frozen=True)
class EnumType(TypeDescriptor):
    kind: ClassVar[TypeKind] = TypeKind.ENUM

    enum_values: tuple[EnumValue, ...] = ()


@dataclass(frozen=True)
class InputObjectType(TypeDescriptor):
    kind: ClassVar[TypeKind] = TypeKind.INPUT_OBJECT

    input_fields: tuple[InputValue, ...] = ()


@dataclass(frozen=True)
class IntrospectedSchema:
    """Snapshot of the backend type system.

    ``raw`` keeps the untouched ``__schema`` document so it can be served
    back verbatim as a resource.
    """

    types: dict[str, TypeDescriptor] = field(default_factory=lambda: dict[str, TypeDescriptor]())
    query_type: str | None = None
    mutation_type: str | None = None
    subscription_type: str | None = None
    raw: dict[str, Any] = field(default_factory=lambda: dict[str, Any](), compare=False, repr=False)

    def find(self, name: str) -> TypeDescriptor | None:
        return self.types.get(name)

    def find_object(self, name: str) -> ObjectType | None:
        """Return the OBJECT type named *name*, ignoring other kinds."""
        found = self.types.get(name)
        return found if isinstance(found, ObjectType) else None


# -- Parsing ------------------------------------------------------------------


def parse_type_ref(raw: Any, _depth: int = 0) -> TypeRef:
    """Convert an introspection ``{kind, name, ofType}`` node into a TypeRef.

    Raises SchemaMalformed when the chain is deeper than MAX_WRAPPER_DEPTH
    or does not end in a named type.
    """
    if _depth > MAX_WRAPPER_DEPTH:
        raise SchemaMalformed(
            f"Type reference nests more than {MAX_WRAPPER_DEPTH} wrapper layers"
        )
    if not isinstance(raw, dict):
        raise SchemaMalformed("Type reference chain ends without a named type")

    kind = raw.get("kind")
    if kind in ("NON_NULL", "LIST"):
        inner = parse_type_ref(raw.get("ofType"), _depth + 1)
        return NonNullRef(inner) if kind == "NON_NULL" else ListRef(inner)

    name = raw.get("name")
    if not name or not isinstance(name, str):
        raise SchemaMalformed(f"Named type reference of kind {kind!r} has no name")
    try:
        return NamedRef(kind=TypeKind(kind), name=name)
    except ValueError:
        raise SchemaMalformed(f"Unknown type kind {kind!r} for type {name!r}") from None


def _entries(raw: Any, what: str) -> list[dict[str, Any]]:
    """Return *raw* as a list of objects; ``None`` counts as empty."""
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(v, dict) for v in raw):
        raise SchemaMalformed(f"Expected '{what}' to be a list of objects")
    return raw


def _parse_input_values(raw: Any, what: str = "args") -> tuple[InputValue, ...]:
    return tuple(
        InputValue(
            name=v["name"],
            type=parse_type_ref(v.get("type")),
            description=v.get("description"),
            default_value=v.get("defaultValue"),
        )
        for v in _entries(raw, what)
    )


def _parse_fields(raw: Any) -> tuple[FieldDescriptor, ...]:
    return tuple(
        FieldDescriptor(
            name=f["name"],
            type=parse_type_ref(f.get("type")),
            description=f.get("description"),
            args=_parse_input_values(f.get("args")),
        )
        for f in _entries(raw, "fields")
    )


def _names(raw: Any, what: str) -> tuple[str, ...]:
    return tuple(t["name"] for t in _entries(raw, what))


def parse_type(raw: dict[str, Any]) -> TypeDescriptor:
    """Convert one entry of ``__schema.types`` into its descriptor class."""
    if not isinstance(raw, dict):
        raise SchemaMalformed(f"Schema type entry is not an object: {raw!r}")
    name = raw.get("name")
    if not name or not isinstance(name, str):
        raise SchemaMalformed("Schema contains a type without a name")
    description = raw.get("description")

    try:
        kind = TypeKind(raw.get("kind"))
    except ValueError:
        raise SchemaMalformed(f"Type {name!r} has unsupported kind {raw.get('kind')!r}") from None

    try:
        if kind is TypeKind.OBJECT:
            return ObjectType(
                name=name,
                description=description,
                fields=_parse_fields(raw.get("fields")),
                interfaces=_names(raw.get("interfaces"), "interfaces"),
            )
        if kind is TypeKind.INTERFACE:
            return InterfaceType(
                name=name,
                description=description,
                fields=_parse_fields(raw.get("fields")),
                possible_types=_names(raw.get("possibleTypes"), "possibleTypes"),
            )
        if kind is TypeKind.UNION:
            return UnionType(
                name=name,
                description=description,
                possible_types=_names(raw.get("possibleTypes"), "possibleTypes"),
            )
        if kind is TypeKind.ENUM:
            return EnumType(
                name=name,
                description=description,
                enum_values=tuple(
                    EnumValue(name=v["name"], description=v.get("description"))
                    for v in _entries(raw.get("enumValues"), "enumValues")
                ),
            )
        if kind is TypeKind.INPUT_OBJECT:
            return InputObjectType(
                name=name,
                description=description,
                input_fields=_parse_input_values(raw.get("inputFields"), "inputFields"),
            )
        if kind is TypeKind.SCALAR:
            return ScalarType(name=name, description=description)
    except KeyError as e:
        raise SchemaMalformed(f"Type {name!r} has an entry without {e.args[0]!r}") from None
    except SchemaMalformed as e:
        raise SchemaMalformed(f"Type {name!r}: {e}") from None

    raise SchemaMalformed(f"Type {name!r} has unhandled kind {kind.value}")


def _root_name(raw: Any) -> str | None:
    if isinstance(raw, dict):
        return raw.get("name")
    return None


def parse_schema(raw: dict[str, Any]) -> IntrospectedSchema:
    """Build an IntrospectedSchema from a raw ``__schema`` object."""
    if not isinstance(raw, dict):
        raise SchemaMalformed("Introspection result is not an object")
    raw_types = raw.get("types")
    if not isinstance(raw_types, list):
        raise SchemaMalformed("Introspection result has no 'types' list")

    types: dict[str, TypeDescriptor] = {}
    for raw_type in raw_types:
        descriptor = parse_type(raw_type)
        types[descriptor.name] = descriptor

    schema = IntrospectedSchema(
        types=types,
        query_type=_root_name(raw.get("queryType")),
        mutation_type=_root_name(raw.get("mutationType")),
        subscription_type=_root_name(raw.get("subscriptionType")),
        raw=raw,
    )

    for role, root in (
        ("query", schema.query_type),
        ("mutation", schema.mutation_type),
        ("subscription", schema.subscription_type),
    ):
        if root is not None and schema.find_object(root) is None:
            raise SchemaMalformed(f"Declared {role} root type {root!r} is not an object type in the schema")

    return schema
