# -*- coding: utf-8 -*-
"""Tests for the equivalence-class builder."""

import pytest

from complyhub.cross_standard.equivalence import (
    EquivalenceClassBuilder,
    build_equivalence_classes,
)


class TestEquivalenceClassBuilder:
    """Disjoint-set behaviour."""

    def test_add_is_idempotent(self):
        """Registering the same element twice tracks it once."""
        builder = EquivalenceClassBuilder()
        builder.add("a")
        builder.add("a")
        assert len(builder) == 1
        assert "a" in builder

    def test_find_registers_unknown_element(self):
        """find() on an unknown element registers it as a singleton."""
        builder = EquivalenceClassBuilder()
        assert builder.find("x") == "x"
        assert "x" in builder
        assert builder.groups() == {"x": {"x"}}

    def test_union_merges_and_reports(self):
        """union() returns True on merge and False when already joined."""
        builder = EquivalenceClassBuilder()
        assert builder.union("a", "b") is True
        assert builder.union("a", "b") is False
        assert builder.union("b", "a") is False
        assert builder.connected("a", "b")

    def test_union_is_commutative(self):
        """union(a, b) and union(b, a) yield the same partition."""
        left = EquivalenceClassBuilder()
        right = EquivalenceClassBuilder()
        for x in ("a", "b", "c"):
            left.add(x)
            right.add(x)
        left.union("a", "b")
        right.union("b", "a")
        assert sorted(map(sorted, left.groups().values())) == \
            sorted(map(sorted, right.groups().values()))

    def test_transitive_closure(self):
        """a~b and b~c puts a and c in one class."""
        builder = EquivalenceClassBuilder()
        builder.union("a", "b")
        builder.union("b", "c")
        assert builder.connected("a", "c")
        assert len(builder.groups()) == 1

    def test_find_is_stable_without_new_unions(self):
        """Repeated find() returns the same representative."""
        builder = EquivalenceClassBuilder()
        builder.union("a", "b")
        builder.union("c", "d")
        builder.union("a", "c")
        first = builder.find("d")
        assert all(builder.find(x) == first for x in ("a", "b", "c", "d"))

    def test_groups_include_singletons_in_registration_order(self):
        """groups() lists every class ordered by its earliest member."""
        builder = EquivalenceClassBuilder()
        for x in ("s1", "a", "s2", "b"):
            builder.add(x)
        builder.union("b", "a")

        groups = list(builder.groups().values())
        assert groups == [{"s1"}, {"a", "b"}, {"s2"}]

    def test_groups_partition_elements(self):
        """Every element appears in exactly one class."""
        builder = EquivalenceClassBuilder()
        elements = [f"c{i}" for i in range(20)]
        for x in elements:
            builder.add(x)
        for i in range(0, 20, 3):
            builder.union(elements[i], elements[(i + 7) % 20])

        members = [m for group in builder.groups().values() for m in group]
        assert sorted(members) == sorted(elements)

    def test_long_chain_compresses(self):
        """A long chain still resolves to one representative."""
        builder = EquivalenceClassBuilder()
        for i in range(1000):
            builder.union(i, i + 1)
        assert builder.connected(0, 1000)
        assert len(builder.groups()) == 1


class TestBuildEquivalenceClasses:
    """Building classes from cross-references."""

    def test_only_equivalent_edges_merge(self, make_xref):
        """RELATED and SUPPORTING edges never merge clauses."""
        refs = [
            make_xref("a", "b", "EQUIVALENT"),
            make_xref("b", "c", "RELATED"),
            make_xref("c", "d", "SUPPORTING"),
        ]
        builder = build_equivalence_classes(["a", "b", "c", "d"], refs)
        assert builder.connected("a", "b")
        assert not builder.connected("b", "c")
        assert not builder.connected("c", "d")
        assert len(builder.groups()) == 3

    def test_edges_outside_universe_are_skipped(self, make_xref):
        """Edges touching unknown clauses do not register them."""
        refs = [make_xref("a", "ghost", "EQUIVALENT")]
        builder = build_equivalence_classes(["a", "b"], refs)
        assert "ghost" not in builder
        assert len(builder) == 2
        assert len(builder.groups()) == 2

    def test_no_edges_yields_singletons(self):
        """Without edges every clause is its own class."""
        builder = build_equivalence_classes(["a", "b", "c"], [])
        assert [len(g) for g in builder.groups().values()] == [1, 1, 1]

    @pytest.mark.parametrize("order", [0, 1])
    def test_edge_order_does_not_change_partition(self, make_xref, order):
        """The same edge set yields the same partition in any order."""
        refs = [
            make_xref("a", "b", "EQUIVALENT"),
            make_xref("c", "d", "EQUIVALENT"),
            make_xref("b", "d", "EQUIVALENT"),
        ]
        if order:
            refs = list(reversed(refs))
        builder = build_equivalence_classes(["a", "b", "c", "d", "e"], refs)
        partition = sorted(sorted(g) for g in builder.groups().values())
        assert partition == [["a", "b", "c", "d"], ["e"]]
