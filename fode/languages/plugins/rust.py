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

"""Rust language plugin."""

from fode.languages.base import (
    BaseLanguagePlugin,
    DocCommentPattern,
    LanguageConfig,
    SyntaxProfile,
)
from fode.models import EntityKind


class RustPlugin(BaseLanguagePlugin):
    """Rust language plugin.

    Functions inside ``impl`` and ``trait`` blocks become methods of the
    implemented type; ``mod`` blocks are walked without changing the owner.
    """

    def _create_config(self) -> LanguageConfig:
        return LanguageConfig(
            name="rust",
            display_name="Rust",
            aliases=["rs"],
            extensions=[".rs"],
            line_comment="//",
            block_comment_start="/*",
            block_comment_end="*/",
            tree_sitter_language="rust",
            doc_comment_pattern=DocCommentPattern(
                line_prefixes=["///", "//!"],
                block_start="/**",
                block_end="*/",
            ),
        )

    def _create_syntax_profile(self) -> SyntaxProfile:
        return SyntaxProfile(
            declarations={
                "function_item": EntityKind.FUNCTION,
                "function_signature_item": EntityKind.FUNCTION,
                "struct_item": EntityKind.STRUCT,
                "enum_item": EntityKind.ENUM,
                "union_item": EntityKind.STRUCT,
                "trait_item": EntityKind.TRAIT,
                "type_item": EntityKind.TYPE_ALIAS,
                "const_item": EntityKind.CONSTANT,
                "static_item": EntityKind.VARIABLE,
                "mod_item": EntityKind.MODULE,
            },
            containers={"impl_item": "type", "trait_item": "name"},
            namespaces=frozenset({"mod_item"}),
            scopes=frozenset({"closure_expression"}),
            doc_skip_types=frozenset({"attribute_item"}),
            comment_types=frozenset({"line_comment", "block_comment"}),
            call_types={"call_expression": "function"},
            callee_wrappers={"generic_function": "function"},
            selector_types={
                "field_expression": ("value", "field"),
                "scoped_identifier": ("path", "name"),
                "scoped_type_identifier": ("path", "name"),
            },
            qualified_type_types=frozenset({"scoped_type_identifier"}),
            qualifier_types=frozenset({"identifier", "type_identifier", "self", "crate", "super"}),
            identifier_types=frozenset({"identifier"}),
            type_identifier_types=frozenset({"type_identifier"}),
            self_names=frozenset({"self", "Self"}),
        )
