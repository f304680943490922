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

"""Python language plugin."""

from fode.languages.base import (
    BaseLanguagePlugin,
    DocCommentPattern,
    LanguageConfig,
    SyntaxProfile,
)
from fode.models import EntityKind


class PythonPlugin(BaseLanguagePlugin):
    """Python language plugin.

    Docstrings count as documentation when no comment block precedes the
    definition. Module-level assignments become variables, or constants when
    the name is UPPER_CASE.
    """

    def _create_config(self) -> LanguageConfig:
        return LanguageConfig(
            name="python",
            display_name="Python",
            aliases=["py", "python3"],
            extensions=[".py", ".pyw", ".pyi"],
            line_comment="#",
            block_comment_start='"""',
            block_comment_end='"""',
            tree_sitter_language="python",
            doc_comment_pattern=DocCommentPattern(line_prefixes=["#"], location="inside"),
        )

    def _create_syntax_profile(self) -> SyntaxProfile:
        return SyntaxProfile(
            declarations={
                "function_definition": EntityKind.FUNCTION,
                "class_definition": EntityKind.CLASS,
                "assignment": EntityKind.VARIABLE,
            },
            name_fields={"assignment": "left"},
            containers={"class_definition": "name"},
            scopes=frozenset({"lambda"}),
            wrappers=frozenset({"decorated_definition", "expression_statement"}),
            call_types={"call": "function"},
            selector_types={"attribute": ("object", "attribute")},
            qualifier_types=frozenset({"identifier"}),
            identifier_types=frozenset({"identifier"}),
            type_identifier_types=frozenset(),
            top_level_only=frozenset({"assignment"}),
            upper_case_constants=True,
            self_names=frozenset({"self", "cls"}),
        )
