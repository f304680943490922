# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Tests for the profile-driven extractor used by generic-tier languages."""

import pytest

from conftest import by_name, reference_keys
from fode.codebase.extractors import GenericEntityExtractor
from fode.models import EntityKind

PYTHON_SOURCE = '''
"""Module docstring."""

MAX_SIZE = 10
registry = {}


def helper(value):
    return value * 2


@decorator
def load(path):
    """Loads things."""
    return helper(path)


class Loader:
    """Loads files."""

    limit = 5

    def run(self):
        return self.prepare()

    def prepare(self):
        return load("x")
'''

RUST_SOURCE = """
/// A point.
#[derive(Debug)]
pub struct Point {
    x: i32,
}

impl Point {
    pub fn new(x: i32) -> Self {
        Point { x }
    }

    fn norm(&self) -> i32 {
        self.x
    }
}

trait Shape {
    fn area(&self) -> f64;
}

mod util {
    pub fn helper() {}
}

fn main() {
    let p = Point::new(1);
    util::helper();
}
"""

JS_SOURCE = """
// Adds numbers.
function add(a, b) {
  return a + b;
}

const sum = (xs) => xs.reduce(add, 0);
const LIMIT = 10;
let counter = 0;

export class Counter {
  increment() {
    counter = add(counter, 1);
    return this.value();
  }

  value() {
    return counter;
  }
}
"""

TS_SOURCE = """
interface Point {
  x: number;
}

type Id = string;

enum Color {
  Red,
}

abstract class Shape {
  abstract area(): number;
}

namespace Geo {
  export function origin(): Point {
    return makePoint(0);
  }
}

function makePoint(x: number): Point {
  return { x };
}
"""

TSX_SOURCE = """
function title(): string {
  return "hi";
}

export function App() {
  return <h1>{title()}</h1>;
}
"""


@pytest.mark.parametrize("language", ["rust", "python", "javascript", "typescript", "tsx"])
def test_registry_selects_generic_extractor(registry, language):
    assert isinstance(registry.get_extractor(language), GenericEntityExtractor)


class TestPythonExtraction:
    @pytest.fixture
    def result(self, extract):
        return extract("python", PYTHON_SOURCE, file="pkg/loader.py", package_dir="pkg")

    def test_entities_in_source_order(self, result):
        assert [(r.entity.name, r.entity.kind) for r in result.entities] == [
            ("MAX_SIZE", EntityKind.CONSTANT),
            ("registry", EntityKind.VARIABLE),
            ("helper", EntityKind.FUNCTION),
            ("load", EntityKind.FUNCTION),
            ("Loader", EntityKind.CLASS),
            ("run", EntityKind.METHOD),
            ("prepare", EntityKind.METHOD),
        ]

    def test_package_defaults_to_directory_name(self, extract):
        result = extract("python", "x = 1\n", package_dir="pkg", default_package="pkg")
        assert result.package == "pkg"
        assert result.entities[0].entity.package == "pkg"

    def test_class_attributes_are_not_entities(self, result):
        assert "limit" not in by_name(result)

    def test_decorated_function_spans_decorator(self, result):
        load = by_name(result)["load"].entity
        assert load.line == 12
        assert load.source.startswith("@decorator")
        assert load.signature == "def load(path)"

    def test_docstrings(self, result):
        entities = by_name(result)
        assert entities["load"].entity.doc_comment == "Loads things."
        assert entities["Loader"].entity.doc_comment == "Loads files."
        assert entities["helper"].entity.doc_comment == ""

    def test_methods_belong_to_class(self, result):
        entities = by_name(result)
        loader_index = result.entities.index(entities["Loader"])
        run = entities["run"]
        assert run.entity.receiver == "Loader"
        assert run.parent == loader_index
        assert run.self_names == frozenset({"self", "cls"})

    def test_references(self, result):
        entities = by_name(result)
        assert ("prepare", "self", "call") in reference_keys(entities["run"])
        assert ("helper", None, "call") in reference_keys(entities["load"])
        assert ("load", None, "call") in reference_keys(entities["prepare"])

    def test_nested_functions_stay_inside_their_parent(self, extract):
        source = "def outer():\n    def inner():\n        pass\n    return inner\n"
        result = extract("python", source)
        assert [r.entity.name for r in result.entities] == ["outer"]


class TestRustExtraction:
    @pytest.fixture
    def result(self, extract):
        return extract("rust", RUST_SOURCE, file="src/lib.rs", package_dir="src")

    def test_kinds(self, result):
        kinds = {r.entity.name: r.entity.kind for r in result.entities}
        assert kinds["Point"] == EntityKind.STRUCT
        assert kinds["new"] == EntityKind.METHOD
        assert kinds["Shape"] == EntityKind.TRAIT
        assert kinds["area"] == EntityKind.METHOD
        assert kinds["util"] == EntityKind.MODULE
        assert kinds["helper"] == EntityKind.FUNCTION
        assert kinds["main"] == EntityKind.FUNCTION

    def test_doc_comment_skips_attributes(self, result):
        assert by_name(result)["Point"].entity.doc_comment == "A point."

    def test_impl_methods_get_receiver(self, result):
        entities = by_name(result)
        assert entities["new"].entity.receiver == "Point"
        assert entities["norm"].entity.receiver == "Point"
        assert entities["new"].entity.signature == "pub fn new(x: i32) -> Self"

    def test_trait_methods_are_contained(self, result):
        entities = by_name(result)
        area = entities["area"]
        assert area.entity.receiver == "Shape"
        assert area.parent == result.entities.index(entities["Shape"])
        assert area.entity.signature == "fn area(&self) -> f64"

    def test_module_members_keep_no_receiver(self, result):
        entities = by_name(result)
        helper = entities["helper"]
        assert helper.entity.receiver is None
        assert helper.parent == result.entities.index(entities["util"])

    def test_path_references(self, result):
        keys = reference_keys(by_name(result)["main"])
        assert ("new", "Point", "call") in keys
        assert ("helper", "util", "call") in keys


class TestJavaScriptExtraction:
    @pytest.fixture
    def result(self, extract):
        return extract("javascript", JS_SOURCE, file="src/app.js", package_dir="src")

    def test_bindings(self, result):
        entities = by_name(result)
        assert entities["sum"].entity.kind == EntityKind.FUNCTION
        assert entities["sum"].entity.signature == "const sum = (xs) =>"
        assert entities["LIMIT"].entity.kind == EntityKind.CONSTANT
        assert entities["counter"].entity.kind == EntityKind.VARIABLE
        assert entities["counter"].entity.signature == "let counter = 0"

    def test_function_doc_comment(self, result):
        add = by_name(result)["add"].entity
        assert add.doc_comment == "Adds numbers."
        assert add.signature == "function add(a, b)"

    def test_exported_class(self, result):
        entities = by_name(result)
        counter_class = entities["Counter"].entity
        assert counter_class.kind == EntityKind.CLASS
        assert counter_class.source.startswith("export class Counter")
        assert entities["increment"].entity.kind == EntityKind.METHOD
        assert entities["increment"].entity.receiver == "Counter"

    def test_method_references(self, result):
        keys = reference_keys(by_name(result)["increment"])
        assert ("add", None, "call") in keys
        assert ("value", "this", "call") in keys
        assert ("counter", None, "value") in keys

    def test_callback_argument_is_a_value_reference(self, result):
        assert ("add", None, "value") in reference_keys(by_name(result)["sum"])


class TestTypeScriptExtraction:
    @pytest.fixture
    def result(self, extract):
        return extract("typescript", TS_SOURCE, file="src/geo.ts", package_dir="src")

    def test_type_declarations(self, result):
        kinds = {r.entity.name: r.entity.kind for r in result.entities}
        assert kinds["Point"] == EntityKind.INTERFACE
        assert kinds["Id"] == EntityKind.TYPE_ALIAS
        assert kinds["Color"] == EntityKind.ENUM
        assert kinds["Shape"] == EntityKind.CLASS
        assert kinds["Geo"] == EntityKind.MODULE

    def test_abstract_method(self, result):
        area = by_name(result)["area"].entity
        assert area.kind == EntityKind.METHOD
        assert area.receiver == "Shape"

    def test_namespace_members(self, result):
        entities = by_name(result)
        origin = entities["origin"]
        assert origin.entity.kind == EntityKind.FUNCTION
        assert origin.parent == result.entities.index(entities["Geo"])

    def test_type_and_call_references(self, result):
        keys = reference_keys(by_name(result)["origin"])
        assert ("Point", None, "type") in keys
        assert ("makePoint", None, "call") in keys

    def test_tsx_grammar(self, extract):
        result = extract("tsx", TSX_SOURCE, file="src/app.tsx", package_dir="src")
        assert ("title", None, "call") in reference_keys(by_name(result)["App"])
