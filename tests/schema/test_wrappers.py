"""Tests for type-wrapper resolution and rendering."""

from __future__ import annotations

import pytest

from hasura_mcp.errors import SchemaMalformed
from hasura_mcp.schema.types import ListRef, NamedRef, NonNullRef, TypeKind
from hasura_mcp.schema.wrappers import (
    ResolvedType,
    render_resolved,
    render_type_ref,
    resolve_type_ref,
)

STRING = NamedRef(TypeKind.SCALAR, "String")


class TestResolveTypeRef:
    def test_bare_named_type(self):
        assert resolve_type_ref(STRING) == ResolvedType("String", TypeKind.SCALAR)

    def test_non_null(self):
        r = resolve_type_ref(NonNullRef(STRING))
        assert (r.name, r.is_list, r.is_non_null) == ("String", False, True)

    def test_list(self):
        r = resolve_type_ref(ListRef(STRING))
        assert (r.name, r.is_list, r.is_non_null) == ("String", True, False)

    def test_nesting_order_does_not_matter(self):
        variants = [
            NonNullRef(ListRef(STRING)),
            ListRef(NonNullRef(STRING)),
            NonNullRef(ListRef(NonNullRef(STRING))),
        ]
        resolved = {resolve_type_ref(v) for v in variants}
        assert resolved == {ResolvedType("String", TypeKind.SCALAR, is_list=True, is_non_null=True)}

    def test_leaf_kinds(self):
        assert resolve_type_ref(NamedRef(TypeKind.ENUM, "e")).is_leaf
        assert not resolve_type_ref(ListRef(NamedRef(TypeKind.OBJECT, "o"))).is_leaf
        assert not resolve_type_ref(NamedRef(TypeKind.UNION, "u")).is_leaf

    def test_depth_bound(self):
        ref = STRING
        for _ in range(5):
            ref = ListRef(ref)
        assert resolve_type_ref(ref, max_depth=5).name == "String"
        with pytest.raises(SchemaMalformed, match="wrapper layers"):
            resolve_type_ref(ListRef(ref), max_depth=5)

    def test_nameless_terminal(self):
        with pytest.raises(SchemaMalformed):
            resolve_type_ref(NonNullRef(NamedRef(TypeKind.SCALAR, "")))

    def test_chain_without_named_node(self):
        with pytest.raises(SchemaMalformed):
            resolve_type_ref(NonNullRef(None))  # type: ignore[arg-type]


class TestRender:
    @pytest.mark.parametrize(
        ("ref", "compact"),
        [
            (STRING, "String"),
            (NonNullRef(STRING), "String!"),
            (ListRef(STRING), "[String]"),
            (NonNullRef(ListRef(STRING)), "[String]!"),
            (ListRef(NonNullRef(STRING)), "[String]!"),
        ],
    )
    def test_compact_rendering(self, ref, compact):
        assert render_resolved(resolve_type_ref(ref)) == compact

    def test_exact_rendering(self):
        assert render_type_ref(NonNullRef(ListRef(NonNullRef(STRING)))) == "[String!]!"
        assert render_type_ref(ListRef(ListRef(STRING))) == "[[String]]"
