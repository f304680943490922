# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Tests for the boundary operations."""

import asyncio
import logging

import pytest

from fode import commands
from fode.codebase.tree_sitter_manager import parse_source
from fode.config import Settings
from fode.errors import (
    EntityNotFoundError,
    InvalidPathError,
    NoRecognizedSourceError,
    NoRepoOpenError,
)
from fode.repo_state import RepoState, RepoStatus

SEQUENTIAL = Settings(max_workers=1)

GO_REPO = {
    "go.mod": "module example.com/app\n\ngo 1.22\n",
    "main.go": (
        'package main\n\nimport "example.com/app/store"\n\n'
        "// main starts the app.\nfunc main() {\n    store.Open()\n}\n"
    ),
    "store/store.go": "package store\n\ntype DB struct{}\n\nfunc Open() *DB {\n    return nil\n}\n",
}


@pytest.fixture
def state():
    return RepoState()


@pytest.fixture
def go_repo(make_repo):
    return make_repo(GO_REPO, name="app")


class TestOpenRepo:
    def test_go_repo_info(self, state, go_repo):
        info = commands.open_repo(state, go_repo, SEQUENTIAL)
        assert info.name == "app"
        assert info.language == "Go"
        assert info.languages == ["Go"]
        assert info.module_name == "example.com/app"
        assert info.packages == ["main", "store"]
        assert (info.total_files, info.parsed_files, info.skipped_files) == (2, 2, 0)
        assert info.total_entities == 3
        assert info.total_relations == 2
        assert [a.label for a in info.attributes] == ["Module", "Packages", "go.mod"]
        assert info.attributes[2].link.endswith("go.mod")
        assert state.status == RepoStatus.READY

    def test_generic_repo_attributes(self, state, make_repo):
        root = make_repo({"app/main.py": "def run():\n    pass\n", "lib.rs": "fn x() {}\n"})
        info = commands.open_repo(state, root, SEQUENTIAL)
        assert info.language == "Rust"
        assert info.module_name == root.name
        assert [a.label for a in info.attributes] == ["Language", "Files", "Packages"]
        assert info.attributes[1].value == "2"

    def test_broken_file_becomes_diagnostic(self, state, make_repo):
        files = {f"pkg/f{i}.go": f"package pkg\n\nfunc F{i}() {{}}\n" for i in range(9)}
        files["pkg/broken.go"] = "package pkg\n\nfunc Broken( {\n"
        info = commands.open_repo(state, make_repo(files), SEQUENTIAL)
        assert (info.total_files, info.parsed_files, info.skipped_files) == (10, 9, 1)
        assert info.total_entities == 9
        diagnostics = commands.get_diagnostics(state)
        assert [(d.file, d.language) for d in diagnostics] == [("pkg/broken.go", "go")]
        assert diagnostics[0].line is not None

    def test_oversized_and_undecodable_files(self, state, make_repo):
        root = make_repo({"a.go": "package a\n\nfunc A() {}\n", "big.go": "package a\n" * 50})
        (root / "bad.go").write_bytes(b"package a\n\xff\xfe\n")
        commands.open_repo(state, root, Settings(max_workers=1, max_file_bytes=100))
        messages = {d.file: d.message for d in commands.get_diagnostics(state)}
        assert set(messages) == {"bad.go", "big.go"}
        assert messages["big.go"].startswith("File too large")
        assert messages["bad.go"].startswith("Not valid UTF-8")

    def test_unexpected_extractor_failure_is_logged(self, state, make_repo, caplog):
        root = make_repo({"a.go": "package a\n\nfunc A() {}\n", "b.go": "package a\n\nfunc B() {}\n"})

        def parse_fn(source, language):
            if b"func B" in source:
                raise RuntimeError("grammar crashed")
            return parse_source(source, language)

        with caplog.at_level(logging.WARNING, logger="fode.codebase.builder"):
            info = commands.open_repo(state, root, SEQUENTIAL, parse_fn=parse_fn)
        assert info.total_entities == 1
        diagnostics = commands.get_diagnostics(state)
        assert [(d.file, d.message) for d in diagnostics] == [
            ("b.go", "Extraction failed: grammar crashed")
        ]
        assert any(
            r.levelno == logging.WARNING and "b.go" in r.getMessage() for r in caplog.records
        )

    def test_reopen_is_deterministic(self, state, go_repo):
        commands.open_repo(state, go_repo, SEQUENTIAL)
        first = commands.get_graph_data(state)
        commands.open_repo(state, go_repo, Settings(max_workers=4))
        second = commands.get_graph_data(state)
        assert first == second

    def test_missing_path(self, state, tmp_path):
        with pytest.raises(InvalidPathError):
            commands.open_repo(state, tmp_path / "missing")
        assert state.status == RepoStatus.ERROR

    def test_no_supported_files(self, state, make_repo):
        with pytest.raises(NoRecognizedSourceError):
            commands.open_repo(state, make_repo({"README.md": "# hi\n"}))

    def test_failed_open_keeps_previous_graph(self, state, go_repo, tmp_path):
        info = commands.open_repo(state, go_repo, SEQUENTIAL)
        with pytest.raises(InvalidPathError):
            commands.open_repo(state, tmp_path / "missing")
        assert commands.get_repo_info(state) == info
        assert state.status == RepoStatus.READY
        assert isinstance(state.last_error, InvalidPathError)

    def test_superseded_open_is_not_published(self, state, go_repo):
        calls = []

        def parse_fn(source, language):
            if not calls:
                # A newer open starts while this one is still parsing
                state.begin_open()
            calls.append(language)
            return parse_source(source, language)

        info = commands.open_repo(state, go_repo, SEQUENTIAL, parse_fn=parse_fn)
        assert info.total_entities == 3
        assert state.snapshot is None

    def test_async_open(self, state, go_repo):
        info = asyncio.run(commands.open_repo_async(state, go_repo, SEQUENTIAL))
        assert info.total_entities == 3
        assert commands.get_repo_info(state) == info


class TestQueries:
    @pytest.fixture
    def opened(self, state, go_repo):
        commands.open_repo(state, go_repo, SEQUENTIAL)
        return state

    def test_queries_before_open(self, state):
        for query in (commands.get_repo_info, commands.get_all_entities, commands.get_graph_data):
            with pytest.raises(NoRepoOpenError):
                query(state)
        with pytest.raises(NoRepoOpenError):
            commands.search_entities(state, "x")

    def test_all_entities_in_extraction_order(self, opened):
        entities = commands.get_all_entities(opened)
        assert [(e.file, e.name) for e in entities] == [
            ("main.go", "main"),
            ("store/store.go", "DB"),
            ("store/store.go", "Open"),
        ]

    def test_search(self, opened):
        results = commands.search_entities(opened, "open")
        assert [(r.entity.name, r.score) for r in results] == [("Open", 1.0)]

    def test_focus_and_source(self, opened):
        main = commands.search_entities(opened, "main")[0].entity
        focus = commands.get_entity_focus(opened, main.id)
        assert focus.center.doc_comment == "main starts the app."
        assert [(g.pkg_name, g.fn_count) for g in focus.same_module] == [("store", 1)]
        assert commands.get_entity_source(opened, main.id).startswith("func main()")

        open_fn = commands.search_entities(opened, "Open")[0].entity
        open_focus = commands.get_entity_focus(opened, open_fn.id)
        assert [e.name for e in open_focus.same_pkg] == ["DB"]
        assert [(r.entity.name, r.relation) for r in open_focus.incoming] == [
            ("main", "called by")
        ]

    def test_unknown_entity(self, opened):
        with pytest.raises(EntityNotFoundError):
            commands.get_entity_focus(opened, "nope")
        with pytest.raises(EntityNotFoundError):
            commands.get_entity_source(opened, "nope")

    def test_graph_data(self, opened):
        data = commands.get_graph_data(opened)
        assert len(data.nodes) == 3
        assert {e.kind.value for e in data.edges} == {"calls", "type_reference"}
        assert [p.dir for p in data.packages] == [".", "store"]
