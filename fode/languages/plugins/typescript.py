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

"""TypeScript and TSX language plugins.

Both grammars ship in the same wheel and share one set of node tables;
``.tsx`` files need the JSX-aware grammar.
"""

from fode.languages.base import (
    BaseLanguagePlugin,
    LanguageConfig,
    SyntaxProfile,
)
from fode.languages.plugins.javascript import JS_DECLARATIONS, JS_DOC_COMMENTS, script_profile
from fode.models import EntityKind


def typescript_profile() -> SyntaxProfile:
    declarations = dict(JS_DECLARATIONS)
    declarations.update(
        {
            "abstract_class_declaration": EntityKind.CLASS,
            "interface_declaration": EntityKind.INTERFACE,
            "type_alias_declaration": EntityKind.TYPE_ALIAS,
            "enum_declaration": EntityKind.ENUM,
            "function_signature": EntityKind.FUNCTION,
            "abstract_method_signature": EntityKind.METHOD,
            "internal_module": EntityKind.MODULE,
        }
    )
    return script_profile(
        declarations=declarations,
        containers={
            "class_declaration": "name",
            "abstract_class_declaration": "name",
        },
        namespaces=frozenset({"internal_module"}),
        selector_types={
            "member_expression": ("object", "property"),
            "nested_type_identifier": ("module", "name"),
        },
        qualified_type_types=frozenset({"nested_type_identifier"}),
        type_identifier_types=frozenset({"type_identifier"}),
    )


class TypeScriptPlugin(BaseLanguagePlugin):
    """TypeScript language plugin."""

    def _create_config(self) -> LanguageConfig:
        return LanguageConfig(
            name="typescript",
            display_name="TypeScript",
            aliases=["ts"],
            extensions=[".ts", ".mts", ".cts"],
            line_comment="//",
            block_comment_start="/*",
            block_comment_end="*/",
            tree_sitter_language="typescript",
            doc_comment_pattern=JS_DOC_COMMENTS,
        )

    def _create_syntax_profile(self) -> SyntaxProfile:
        return typescript_profile()


class TsxPlugin(BaseLanguagePlugin):
    """TypeScript with JSX."""

    def _create_config(self) -> LanguageConfig:
        return LanguageConfig(
            name="tsx",
            display_name="TSX",
            extensions=[".tsx"],
            line_comment="//",
            block_comment_start="/*",
            block_comment_end="*/",
            tree_sitter_language="tsx",
            doc_comment_pattern=JS_DOC_COMMENTS,
        )

    def _create_syntax_profile(self) -> SyntaxProfile:
        return typescript_profile()
