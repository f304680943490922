# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Tests for language registration, detection and tiers."""

from pathlib import Path

import pytest

from fode.errors import UnsupportedLanguageError
from fode.languages.registry import LanguageRegistry
from fode.languages.plugins import GoPlugin, PythonPlugin
from fode.languages.tiers import LanguageTier, get_tier


class TestLanguageRegistry:
    def test_builtin_languages_in_order(self, registry):
        assert registry.list_languages() == [
            "go",
            "rust",
            "python",
            "javascript",
            "typescript",
            "tsx",
        ]

    @pytest.mark.parametrize(
        "filename,language",
        [
            ("main.go", "go"),
            ("lib.rs", "rust"),
            ("app.py", "python"),
            ("index.mjs", "javascript"),
            ("view.jsx", "javascript"),
            ("api.ts", "typescript"),
            ("page.tsx", "tsx"),
            ("README.md", None),
            ("Makefile", None),
        ],
    )
    def test_detect_language(self, registry, filename, language):
        assert registry.detect_language(Path(filename)) == language

    def test_aliases(self, registry):
        assert registry.get("golang").config.name == "go"
        assert registry.get("py").config.name == "python"
        assert registry.get("TS").config.name == "typescript"

    def test_unknown_language(self, registry):
        with pytest.raises(UnsupportedLanguageError) as exc_info:
            registry.get("cobol")
        assert "go" in str(exc_info.value)

    def test_module_manifests(self, registry):
        assert registry.module_manifests() == {"go.mod": "go"}

    def test_isolated_registry(self):
        registry = LanguageRegistry()
        registry.register("python", PythonPlugin)
        assert registry.list_languages() == ["python"]
        assert registry.detect_language(Path("x.go")) is None
        registry.register("go", GoPlugin)
        assert registry.detect_language(Path("x.go")) == "go"


class TestTiers:
    def test_go_is_high_fidelity(self, registry):
        assert get_tier("go").tier == LanguageTier.HIGH_FIDELITY
        assert registry.get("go").tier == LanguageTier.HIGH_FIDELITY

    @pytest.mark.parametrize("language", ["rust", "python", "javascript", "typescript", "tsx"])
    def test_generic_languages(self, language):
        config = get_tier(language)
        assert config.tier == LanguageTier.GENERIC
        assert config.repo_wide_fallback
