# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Language plugin registry.

Manages registration and discovery of language plugins, providing a central
point for language detection and for choosing the entity extractor of a file.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Type, Union

from fode.errors import UnsupportedLanguageError
from fode.languages.base import LanguagePlugin
from fode.languages.tiers import LanguageTier

if TYPE_CHECKING:
    from fode.codebase.extractors.base import BaseEntityExtractor
    from fode.codebase.tree_sitter_manager import ParseFn

logger = logging.getLogger(__name__)

# Plugin classes double as factories
PluginFactory = Callable[[], LanguagePlugin]


class LanguageRegistry:
    """Registry for language plugins.

    Provides:
    - Plugin registration by name/extension
    - Language detection from file paths
    - Extractor selection per language tier

    Registration order is meaningful: it is the tie-break when two languages
    have the same number of files in a repository.
    """

    def __init__(self):
        self._plugins: Dict[str, PluginFactory] = {}
        self._instances: Dict[str, LanguagePlugin] = {}
        self._extension_map: Dict[str, str] = {}  # .go -> go
        self._alias_map: Dict[str, str] = {}  # golang -> go

    def register(
        self,
        name: str,
        plugin: Union[Type[LanguagePlugin], PluginFactory],
        extensions: Optional[List[str]] = None,
        aliases: Optional[List[str]] = None,
    ) -> None:
        """Register a language plugin.

        Args:
            name: Canonical language name
            plugin: Plugin class or factory function
            extensions: File extensions (taken from the plugin config if None)
            aliases: Alternative names for the language
        """
        name = name.lower()
        self._plugins[name] = plugin  # classes are factories too
        logger.debug(f"Registered language plugin: {name}")

        instance = self._get_or_create_instance(name)

        for ext in extensions or instance.config.extensions:
            ext = ext.lower()
            if not ext.startswith("."):
                ext = "." + ext
            self._extension_map[ext] = name

        for alias in (aliases or []) + instance.config.aliases:
            self._alias_map[alias.lower()] = name

    def get(self, name: str) -> LanguagePlugin:
        """Get a language plugin by name or alias.

        Raises:
            UnsupportedLanguageError: If the language is not registered
        """
        resolved = self._resolve_name(name)
        if resolved is None:
            available = ", ".join(self.list_languages())
            raise UnsupportedLanguageError(name, available=available)
        return self._get_or_create_instance(resolved)

    def detect_language(self, path: Path) -> Optional[str]:
        """Detect language from a file path.

        Returns:
            Language name or None if no plugin claims the file
        """
        ext = path.suffix.lower()
        if ext in self._extension_map:
            return self._extension_map[ext]

        for name in self._plugins:
            if self._get_or_create_instance(name).detect_from_file(path):
                return name
        return None

    def list_languages(self) -> List[str]:
        """List registered language names in registration order."""
        return list(self._plugins.keys())

    def module_manifests(self) -> Dict[str, str]:
        """Manifest file name -> language, for languages that declare one."""
        manifests: Dict[str, str] = {}
        for name in self._plugins:
            manifest = self._get_or_create_instance(name).config.module_manifest
            if manifest:
                manifests[manifest] = name
        return manifests

    def get_extractor(
        self,
        name: str,
        parse_fn: Optional["ParseFn"] = None,
        max_signature_length: int = 240,
        skip_files_with_errors: bool = True,
    ) -> "BaseEntityExtractor":
        """Build the entity extractor for a language.

        High-fidelity languages get their dedicated extractor; every other
        registered language is handled by the generic extractor driven by its
        plugin's syntax profile.
        """
        from fode.codebase.extractors import HIGH_FIDELITY_EXTRACTORS, GenericEntityExtractor

        plugin = self.get(name)
        extractor_class = GenericEntityExtractor
        if plugin.tier == LanguageTier.HIGH_FIDELITY:
            extractor_class = HIGH_FIDELITY_EXTRACTORS.get(
                plugin.config.name, GenericEntityExtractor
            )
        return extractor_class(
            plugin,
            parse_fn=parse_fn,
            max_signature_length=max_signature_length,
            skip_files_with_errors=skip_files_with_errors,
        )

    def _resolve_name(self, name: str) -> Optional[str]:
        """Canonical name for a name or alias, None when unknown."""
        name = name.lower()
        if name in self._alias_map:
            return self._alias_map[name]
        if name in self._plugins:
            return name
        return None

    def _get_or_create_instance(self, name: str) -> LanguagePlugin:
        """Plugins are instantiated once, on first lookup."""
        if name not in self._instances:
            factory = self._plugins[name]
            self._instances[name] = factory()
        return self._instances[name]

    def discover_plugins(self) -> int:
        """Register the built-in plugins.

        Returns:
            Number of plugins registered
        """
        from fode.languages.plugins import (
            GoPlugin,
            JavaScriptPlugin,
            PythonPlugin,
            RustPlugin,
            TsxPlugin,
            TypeScriptPlugin,
        )

        plugins = [
            ("go", GoPlugin),
            ("rust", RustPlugin),
            ("python", PythonPlugin),
            ("javascript", JavaScriptPlugin),
            ("typescript", TypeScriptPlugin),
            ("tsx", TsxPlugin),
        ]

        count = 0
        for name, plugin_class in plugins:
            try:
                self.register(name, plugin_class)
                count += 1
            except Exception as e:
                logger.warning(f"Failed to register {name} plugin: {e}")

        logger.info(f"Discovered {count} language plugins")
        return count


# Global registry instance
_global_registry: Optional[LanguageRegistry] = None
_global_lock = threading.Lock()


def get_language_registry() -> LanguageRegistry:
    """Get the global language registry, discovering built-in plugins on first use."""
    global _global_registry
    with _global_lock:
        if _global_registry is None:
            registry = LanguageRegistry()
            registry.discover_plugins()
            _global_registry = registry
    return _global_registry
