# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Tests for module tables and import path resolution."""

from conftest import write_files
from fode.codebase.extractors import FileExtraction, ImportSpec
from fode.codebase.file_walker import ManifestFile
from fode.codebase.import_resolver import (
    ImportResolver,
    ModuleTable,
    guess_package_name,
    parse_module_path,
)


class TestModuleTable:
    def test_parse_module_directive(self):
        assert parse_module_path("// header\nmodule example.com/app // app\n\ngo 1.22\n") == (
            "example.com/app"
        )
        assert parse_module_path('module "example.com/quoted"\n') == "example.com/quoted"
        assert parse_module_path("go 1.22\n") is None

    def test_longest_prefix_wins(self):
        table = ModuleTable({"example.com/app": ".", "example.com/app/tools": "tools"})
        assert table.directory_for("example.com/app/pkg/q") == "pkg/q"
        assert table.directory_for("example.com/app/tools/gen") == "tools/gen"
        assert table.directory_for("example.com/app") == "."
        assert table.directory_for("example.com/application") is None

    def test_primary_module_prefers_root(self):
        table = ModuleTable({"example.com/x/sub": "sub", "example.com/app": "."})
        assert table.primary_module == "example.com/app"
        assert ModuleTable().primary_module is None

    def test_from_manifests(self, tmp_path):
        write_files(
            tmp_path,
            {"go.mod": "module example.com/app\n", "tools/go.mod": "go 1.22\n"},
        )
        manifests = [
            ManifestFile(tmp_path / "go.mod", "go.mod", "go"),
            ManifestFile(tmp_path / "tools/go.mod", "tools/go.mod", "go"),
        ]
        table = ModuleTable.from_manifests(manifests)
        assert table.modules == {"example.com/app": "."}
        assert len(table) == 1


class TestImportResolver:
    def test_in_repo_with_module_table(self):
        resolver = ImportResolver(ModuleTable({"example.com/app": "."}), {"q": "q", ".": "main"})
        resolved = resolver.resolve("example.com/app/q")
        assert resolved.package_dir == "q"
        assert not resolved.is_external

    def test_unknown_directory_is_external(self):
        resolver = ImportResolver(ModuleTable({"example.com/app": "."}), {"q": "q"})
        assert resolver.resolve("example.com/app/missing").is_external
        assert resolver.resolve("github.com/other/q").is_external
        assert resolver.resolve("fmt").is_external

    def test_suffix_match_without_manifest(self):
        resolver = ImportResolver(ModuleTable(), {"internal/store": "store", ".": "main"})
        assert resolver.resolve("example.com/app/internal/store").package_dir == "internal/store"
        assert resolver.resolve("example.com/app").is_external

    def test_default_alias_uses_declared_name(self):
        resolver = ImportResolver(ModuleTable({"example.com/app": "."}), {"lib/v2": "lib"})
        assert resolver.default_alias("example.com/app/lib/v2") == "lib"
        assert resolver.default_alias("github.com/go-chi/chi/v5") == "chi"

    def test_file_imports(self):
        resolver = ImportResolver(ModuleTable(), {})
        extraction = FileExtraction(
            file="main.go",
            language="go",
            package="main",
            package_dir=".",
            imports=[
                ImportSpec("fmt", None, 3),
                ImportSpec("example.com/app/config", "cfg", 4),
                ImportSpec("example.com/app/util", ".", 5),
            ],
        )
        table = resolver.file_imports(extraction)
        assert table.aliases == {"fmt": "fmt", "cfg": "example.com/app/config"}
        assert table.dot_imports == ["example.com/app/util"]
        assert table.path_for("cfg") == "example.com/app/config"
        assert table.path_for("util") is None


def test_guess_package_name():
    assert guess_package_name("gopkg.in/yaml.v3") == "yaml"
    assert guess_package_name("github.com/go-chi/chi/v5") == "chi"
    assert guess_package_name("net/http") == "http"
