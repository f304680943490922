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

"""Base types for language plugins.

Defines the interfaces and data structures used by language plugins
to describe how their grammar maps onto the entity model.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Protocol, Tuple, runtime_checkable

from fode.languages.tiers import LanguageTier, get_tier
from fode.models import EntityKind


# ---------------------------------------------------------------------------
# Syntax profile
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SyntaxProfile:
    """Tree-sitter node tables for one grammar.

    The generic extractor and the reference scanner are driven entirely by
    these tables, so supporting another grammar means writing a profile, not
    branching the extractor.

    Attributes:
        declarations: node type -> entity kind it declares
        name_fields: node type -> field holding the declared name (default "name")
        body_fields: fields that hold a declaration body (elided from signatures)
        containers: node type -> field naming the owner of nested functions
            (nested functions become methods of that owner)
        namespaces: declarations whose children are walked without changing the owner
        scopes: node types whose interior never declares top-level entities
        wrappers: nodes that widen a declaration's source span (decorators, export)
        doc_skip_types: sibling nodes allowed between a doc comment and its declaration
        comment_types: comment node types
        call_types: call node type -> field holding the callee
        callee_wrappers: node type -> field, unwrapped when found in callee position
        selector_types: node type -> (operand field, member field)
        qualified_type_types: selector types whose member names a type
        qualifier_types: operand node types treated as a plain qualifier name
        identifier_types: value identifiers
        type_identifier_types: type identifiers
        function_values: declarator values that make a variable a function
        binding_parents: statements whose leading keyword (const/let/var)
            belongs to the declarator signature; ``const`` makes a Constant
        top_level_only: declarations only recognized outside any container
        upper_case_constants: UPPER_CASE variables are Constants
        self_names: receiver spellings that name the enclosing type
    """

    declarations: Dict[str, EntityKind] = field(default_factory=dict)
    name_fields: Dict[str, str] = field(default_factory=dict)
    body_fields: Tuple[str, ...] = ("body",)
    containers: Dict[str, str] = field(default_factory=dict)
    namespaces: FrozenSet[str] = frozenset()
    scopes: FrozenSet[str] = frozenset()
    wrappers: FrozenSet[str] = frozenset()
    doc_skip_types: FrozenSet[str] = frozenset()
    comment_types: FrozenSet[str] = frozenset({"comment"})
    call_types: Dict[str, str] = field(default_factory=dict)
    callee_wrappers: Dict[str, str] = field(default_factory=dict)
    selector_types: Dict[str, Tuple[str, str]] = field(default_factory=dict)
    qualified_type_types: FrozenSet[str] = frozenset()
    qualifier_types: FrozenSet[str] = frozenset()
    identifier_types: FrozenSet[str] = frozenset({"identifier"})
    type_identifier_types: FrozenSet[str] = frozenset({"type_identifier"})
    function_values: FrozenSet[str] = frozenset()
    binding_parents: FrozenSet[str] = frozenset()
    top_level_only: FrozenSet[str] = frozenset()
    upper_case_constants: bool = False
    self_names: FrozenSet[str] = frozenset()

    def name_field(self, node_type: str) -> str:
        return self.name_fields.get(node_type, "name")


@dataclass
class DocCommentPattern:
    """How documentation comments look for a language.

    Attributes:
        line_prefixes: Prefixes for doc comment lines (e.g., ["///", "//!"] for Rust)
        block_start: Start marker for block doc comments (e.g., "/**")
        block_end: End marker for block doc comments (e.g., "*/")
        location: Where doc comments appear relative to the symbol:
            "before" (Rust/Go/Java/JS) or "inside" (Python)
    """

    line_prefixes: List[str] = field(default_factory=list)
    block_start: Optional[str] = None
    block_end: Optional[str] = None
    location: str = "before"


@dataclass
class LanguageConfig:
    """Configuration for a programming language."""

    # Identity
    name: str  # Canonical name (e.g., "python")
    display_name: str  # Human-readable name (e.g., "Python")
    aliases: List[str] = field(default_factory=list)

    # File identification
    extensions: List[str] = field(default_factory=list)  # .py, .pyw

    # Syntax
    line_comment: Optional[str] = "#"
    block_comment_start: Optional[str] = None
    block_comment_end: Optional[str] = None

    # Tree-sitter grammar name (key into tree_sitter_manager.LANGUAGE_MODULES)
    tree_sitter_language: Optional[str] = None

    # Module manifest mapping import paths to directories (go.mod)
    module_manifest: Optional[str] = None

    doc_comment_pattern: Optional[DocCommentPattern] = None


@runtime_checkable
class LanguagePlugin(Protocol):
    """Protocol for language plugins."""

    @property
    def config(self) -> LanguageConfig:
        """Get language configuration."""
        ...

    @property
    def tier(self) -> LanguageTier:
        """Extraction fidelity for this language."""
        ...

    @property
    def syntax_profile(self) -> SyntaxProfile:
        """Get the grammar node tables."""
        ...

    def detect_from_file(self, path: Path) -> bool:
        """Check if this language handles the given file."""
        ...


class BaseLanguagePlugin(ABC):
    """Base class for language plugins with common functionality."""

    def __init__(self):
        """Initialize plugin."""
        self._config: Optional[LanguageConfig] = None
        self._syntax_profile: Optional[SyntaxProfile] = None

    @property
    def config(self) -> LanguageConfig:
        """Get language configuration."""
        if self._config is None:
            self._config = self._create_config()
        return self._config

    @property
    def tier(self) -> LanguageTier:
        """Extraction fidelity, looked up in the tier table."""
        return get_tier(self.config.name).tier

    @property
    def syntax_profile(self) -> SyntaxProfile:
        """Get grammar node tables for extraction and reference scanning."""
        if self._syntax_profile is None:
            self._syntax_profile = self._create_syntax_profile()
        return self._syntax_profile

    @abstractmethod
    def _create_config(self) -> LanguageConfig:
        """Create language configuration."""
        ...

    @abstractmethod
    def _create_syntax_profile(self) -> SyntaxProfile:
        """Create the grammar node tables."""
        ...

    def detect_from_file(self, path: Path) -> bool:
        """Check if this language handles the file."""
        return path.suffix.lower() in [e.lower() for e in self.config.extensions]
