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

"""Go language plugin."""

from fode.languages.base import (
    BaseLanguagePlugin,
    DocCommentPattern,
    LanguageConfig,
    SyntaxProfile,
)
from fode.models import EntityKind


class GoPlugin(BaseLanguagePlugin):
    """Go language plugin.

    Go is the high-fidelity language: declarations are extracted by the
    dedicated Go extractor and imports resolve through go.mod. The profile
    below only drives doc comments, signatures and the reference scanner.
    """

    def _create_config(self) -> LanguageConfig:
        return LanguageConfig(
            name="go",
            display_name="Go",
            aliases=["golang"],
            extensions=[".go"],
            line_comment="//",
            block_comment_start="/*",
            block_comment_end="*/",
            tree_sitter_language="go",
            module_manifest="go.mod",
            doc_comment_pattern=DocCommentPattern(
                line_prefixes=["//"],
            ),
        )

    def _create_syntax_profile(self) -> SyntaxProfile:
        return SyntaxProfile(
            declarations={
                "function_declaration": EntityKind.FUNCTION,
                "method_declaration": EntityKind.METHOD,
            },
            scopes=frozenset({"func_literal"}),
            call_types={"call_expression": "function"},
            selector_types={
                "selector_expression": ("operand", "field"),
                "qualified_type": ("package", "name"),
            },
            qualified_type_types=frozenset({"qualified_type"}),
            qualifier_types=frozenset({"identifier", "package_identifier"}),
            identifier_types=frozenset({"identifier"}),
            type_identifier_types=frozenset({"type_identifier"}),
        )
