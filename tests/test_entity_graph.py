# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Tests for the entity graph and focus views over hand-built graphs."""

import pytest

from fode.codebase.graph import EntityGraph, build_focus_view
from fode.errors import EntityNotFoundError
from fode.models import Entity, EntityKind, Package, Relation, RelationKind


def make_entity(name, kind=EntityKind.FUNCTION, package_dir="p", file=None, line=1, **extra):
    file = file or f"{package_dir}/{name.lower()}.go"
    return Entity(
        id=f"{file}::{kind.value}::{name}::{line}",
        kind=kind,
        name=name,
        package=package_dir.rsplit("/", 1)[-1],
        package_dir=package_dir,
        language="go",
        file=file,
        line=line,
        end_line=line + 2,
        signature=f"func {name}()",
        **extra,
    )


def rel(source, target, kind=RelationKind.CALLS, heuristic=False):
    return Relation(from_id=source.id, to_id=target.id, kind=kind, heuristic=heuristic)


class TestEntityGraph:
    def test_duplicate_ids_rejected(self):
        foo = make_entity("Foo")
        with pytest.raises(ValueError):
            EntityGraph([foo, foo])

    def test_lookup(self):
        foo = make_entity("Foo")
        graph = EntityGraph([foo])
        assert graph.get(foo.id) is foo
        assert foo.id in graph
        assert len(graph) == 1
        with pytest.raises(EntityNotFoundError):
            graph.get("missing")

    def test_dangling_relations_dropped(self):
        foo = make_entity("Foo")
        ghost = make_entity("Ghost")
        graph = EntityGraph([foo], [rel(foo, ghost)])
        assert graph.relations == ()
        assert graph.outgoing(foo.id) == ()

    def test_first_relation_of_a_pair_wins(self):
        foo, bar = make_entity("Foo"), make_entity("Bar")
        graph = EntityGraph(
            [foo, bar],
            [rel(foo, bar), rel(foo, bar, RelationKind.REFERENCES), rel(bar, foo)],
        )
        assert [(r.from_id, r.kind) for r in graph.relations] == [
            (foo.id, RelationKind.CALLS),
            (bar.id, RelationKind.CALLS),
        ]
        assert [r.from_id for r in graph.incoming(bar.id)] == [foo.id]

    def test_cycles_and_self_loops(self):
        foo, bar = make_entity("Foo"), make_entity("Bar")
        graph = EntityGraph([foo, bar], [rel(foo, bar), rel(bar, foo), rel(foo, foo)])
        assert len(graph.relations) == 3
        assert {r.to_id for r in graph.outgoing(foo.id)} == {foo.id, bar.id}

    def test_packages_sorted_by_directory(self):
        packages = [
            Package(name="z", dir="z", language="go"),
            Package(name="a", dir="a", language="go"),
        ]
        graph = EntityGraph([], packages=packages)
        assert [p.dir for p in graph.packages] == ["a", "z"]

    def test_external_deps_sorted_and_unique(self):
        foo = make_entity("Foo")
        graph = EntityGraph([foo], external_deps={foo.id: ["os", "fmt", "os"], "ghost": ["x"]})
        assert graph.external_deps(foo.id) == ("fmt", "os")
        assert graph.external_deps("ghost") == ()

    def test_ids_named(self):
        one = make_entity("Init", package_dir="a")
        two = make_entity("Init", package_dir="b")
        graph = EntityGraph([one, two])
        assert graph.ids_named("Init") == (one.id, two.id)
        assert graph.ids_named("Other") == ()

    def test_graph_data(self):
        foo, bar = make_entity("Foo"), make_entity("Bar")
        graph = EntityGraph(
            [foo, bar], [rel(foo, bar)], [Package(name="p", dir="p", language="go")]
        )
        data = graph.to_graph_data()
        assert [n.id for n in data.nodes] == [foo.id, bar.id]
        assert [(e.source, e.target, e.kind) for e in data.edges] == [
            (foo.id, bar.id, RelationKind.CALLS)
        ]
        assert [p.name for p in data.packages] == ["p"]


class TestFocusView:
    @pytest.fixture
    def entities(self):
        center = make_entity("Handle", package_dir="api", line=10)
        sibling = make_entity("validate", package_dir="api", line=3)
        caller = make_entity("main", package_dir=".", file="main.go")
        store_open = make_entity("Open", package_dir="store")
        store_type = make_entity("DB", kind=EntityKind.STRUCT, package_dir="store")
        store_var = make_entity("Default", kind=EntityKind.VARIABLE, package_dir="store")
        log_fn = make_entity("Info", package_dir="log")
        return {
            e.name: e
            for e in (center, sibling, caller, store_open, store_type, store_var, log_fn)
        }

    @pytest.fixture
    def graph(self, entities):
        center, sibling, caller = entities["Handle"], entities["validate"], entities["main"]
        store_open, store_type = entities["Open"], entities["DB"]
        store_var, log_fn = entities["Default"], entities["Info"]
        relations = [
            rel(caller, center),
            rel(center, store_open),
            rel(center, store_type, RelationKind.TYPE_REFERENCE),
            rel(center, store_var, RelationKind.IMPORT_USE),
            rel(center, sibling),
            rel(center, log_fn),
            rel(sibling, center, RelationKind.REFERENCES),
        ]
        return EntityGraph(
            entities.values(), relations, external_deps={center.id: ["net/http"]}
        )

    def test_center_carries_source_fields(self, graph, entities):
        focus = build_focus_view(graph, entities["Handle"].id)
        assert focus.center == entities["Handle"]

    def test_incoming_with_labels(self, graph, entities):
        focus = build_focus_view(graph, entities["Handle"].id)
        assert [(ref.entity.name, ref.relation) for ref in focus.incoming] == [
            ("validate", "referenced by"),
            ("main", "called by"),
        ]

    def test_same_package_listed_individually(self, graph, entities):
        focus = build_focus_view(graph, entities["Handle"].id)
        assert [(e.name, e.signature) for e in focus.same_pkg] == [
            ("validate", "func validate()")
        ]

    def test_other_packages_grouped_largest_first(self, graph, entities):
        focus = build_focus_view(graph, entities["Handle"].id)
        assert [
            (g.pkg_dir, g.fn_count, g.type_count, g.other_count, g.total)
            for g in focus.same_module
        ] == [
            ("store", 1, 1, 1, 3),
            ("log", 1, 0, 0, 1),
        ]

    def test_every_target_in_exactly_one_tier(self, graph, entities):
        focus = build_focus_view(graph, entities["Handle"].id)
        grouped = sum(g.total for g in focus.same_module)
        assert len(focus.same_pkg) + grouped == len(graph.outgoing(entities["Handle"].id))

    def test_external_deps(self, graph, entities):
        focus = build_focus_view(graph, entities["Handle"].id)
        assert focus.external_deps == ["net/http"]

    def test_isolated_entity(self, graph, entities):
        focus = build_focus_view(graph, entities["Info"].id)
        assert focus.same_pkg == []
        assert focus.same_module == []
        assert focus.external_deps == []
        assert [ref.entity.name for ref in focus.incoming] == ["Handle"]

    def test_unknown_id(self, graph, entities):
        with pytest.raises(EntityNotFoundError):
            build_focus_view(graph, "nope")
