# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Shared fixtures: throwaway repositories and one-file extraction."""

import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest

from fode.codebase.extractors import FileExtraction
from fode.languages.registry import LanguageRegistry, get_language_registry


def write_files(root: Path, files: Dict[str, str]) -> None:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")


@pytest.fixture
def registry() -> LanguageRegistry:
    return get_language_registry()


@pytest.fixture
def make_repo(tmp_path) -> Callable[..., Path]:
    """Create a repository directory from {relative path: source}."""

    def _make(files: Dict[str, str], name: str = "repo") -> Path:
        root = tmp_path / name
        root.mkdir()
        write_files(root, files)
        return root

    return _make


@pytest.fixture
def extract(registry) -> Callable[..., FileExtraction]:
    """Extract a dedented snippet as if it were one file of a repository."""

    def _extract(
        language: str,
        source: str,
        file: str = "main.src",
        package_dir: str = ".",
        default_package: str = "repo",
        **options,
    ) -> FileExtraction:
        extractor = registry.get_extractor(language, **options)
        data = textwrap.dedent(source).lstrip("\n").encode("utf-8")
        return extractor.extract(file, data, package_dir, default_package)

    return _extract


def by_name(extraction: FileExtraction):
    """name -> ExtractedEntity (last one wins for duplicate names)."""
    return {record.entity.name: record for record in extraction.entities}


def reference_keys(record):
    return {(r.name, r.qualifier, r.context.value) for r in record.references}
