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

"""JavaScript language plugin."""

from fode.languages.base import (
    BaseLanguagePlugin,
    DocCommentPattern,
    LanguageConfig,
    SyntaxProfile,
)
from fode.models import EntityKind

JS_DOC_COMMENTS = DocCommentPattern(
    line_prefixes=["//"],
    block_start="/**",
    block_end="*/",
)

JS_DECLARATIONS = {
    "function_declaration": EntityKind.FUNCTION,
    "generator_function_declaration": EntityKind.FUNCTION,
    "class_declaration": EntityKind.CLASS,
    "method_definition": EntityKind.METHOD,
    "variable_declarator": EntityKind.VARIABLE,
}


def script_profile(**overrides) -> SyntaxProfile:
    """Node tables shared by the JavaScript family of grammars."""
    tables = dict(
        declarations=dict(JS_DECLARATIONS),
        containers={"class_declaration": "name"},
        scopes=frozenset(
            {"arrow_function", "function_expression", "function", "generator_function"}
        ),
        wrappers=frozenset({"export_statement", "lexical_declaration", "variable_declaration"}),
        call_types={"call_expression": "function", "new_expression": "constructor"},
        selector_types={"member_expression": ("object", "property")},
        qualifier_types=frozenset({"identifier", "this"}),
        identifier_types=frozenset({"identifier"}),
        type_identifier_types=frozenset(),
        function_values=frozenset(
            {"arrow_function", "function_expression", "function", "generator_function"}
        ),
        binding_parents=frozenset({"lexical_declaration", "variable_declaration"}),
        top_level_only=frozenset({"variable_declarator"}),
        self_names=frozenset({"this"}),
    )
    tables.update(overrides)
    return SyntaxProfile(**tables)


class JavaScriptPlugin(BaseLanguagePlugin):
    """JavaScript language plugin.

    ``const f = () => ...`` counts as a function; other ``const`` bindings
    are constants.
    """

    def _create_config(self) -> LanguageConfig:
        return LanguageConfig(
            name="javascript",
            display_name="JavaScript",
            aliases=["js", "node"],
            extensions=[".js", ".jsx", ".mjs", ".cjs"],
            line_comment="//",
            block_comment_start="/*",
            block_comment_end="*/",
            tree_sitter_language="javascript",
            doc_comment_pattern=JS_DOC_COMMENTS,
        )

    def _create_syntax_profile(self) -> SyntaxProfile:
        return script_profile()
