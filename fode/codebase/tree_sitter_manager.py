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

"""Syntax tree provider backed by tree-sitter grammar wheels.

``Language`` objects are immutable and shared process-wide. ``Parser``
objects are not safe to share between threads, so each worker thread keeps
its own set.
"""

import threading
from typing import TYPE_CHECKING, Callable, Dict, List

from tree_sitter import Language, Parser, Query, QueryCursor

from fode.errors import UnsupportedLanguageError

if TYPE_CHECKING:
    from tree_sitter import Node, Tree


# Language package mapping for tree-sitter 0.25+
# Format: "language_name": ("module_name", "function_name")
LANGUAGE_MODULES: Dict[str, tuple] = {
    "go": ("tree_sitter_go", "language"),
    "rust": ("tree_sitter_rust", "language"),
    "python": ("tree_sitter_python", "language"),
    "javascript": ("tree_sitter_javascript", "language"),
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
}

# (source bytes, language name) -> tree
ParseFn = Callable[[bytes, str], "Tree"]

_language_cache: Dict[str, Language] = {}
_language_lock = threading.Lock()
_local = threading.local()


def get_language(language: str) -> Language:
    """Load a tree-sitter Language from its pre-compiled grammar package."""
    cached = _language_cache.get(language)
    if cached is not None:
        return cached

    module_info = LANGUAGE_MODULES.get(language)
    if not module_info:
        raise UnsupportedLanguageError(language, available=", ".join(sorted(LANGUAGE_MODULES)))

    module_name, func_name = module_info
    with _language_lock:
        if language in _language_cache:
            return _language_cache[language]
        try:
            language_module = __import__(module_name)
            lang_func = getattr(language_module, func_name)
        except ImportError:
            raise ImportError(
                f"Language package '{module_name}' not installed. "
                f"Install it with: pip install {module_name.replace('_', '-')}"
            )
        except AttributeError:
            raise AttributeError(
                f"Language module '{module_name}' does not have function '{func_name}'. "
                f"Check the tree-sitter package version and update LANGUAGE_MODULES."
            )
        lang_obj = lang_func()
        # Grammar wheels return a PyCapsule that must be wrapped
        lang = Language(lang_obj) if not isinstance(lang_obj, Language) else lang_obj
        _language_cache[language] = lang
        return lang


def get_parser(language: str) -> Parser:
    """Return this thread's parser for ``language``, creating it on first use."""
    parsers = getattr(_local, "parsers", None)
    if parsers is None:
        parsers = _local.parsers = {}
    parser = parsers.get(language)
    if parser is None:
        parser = Parser(get_language(language))
        parsers[language] = parser
    return parser


def parse_source(source: bytes, language: str) -> "Tree":
    """Parse ``source`` into a concrete syntax tree.

    This is the only entry point extractors use; they receive it as an
    injectable callable so tests can substitute their own trees.
    """
    return get_parser(language).parse(source)


def run_query(node: "Node", query_src: str, language: str) -> Dict[str, List["Node"]]:
    """Run a tree-sitter query below ``node``.

    Returns:
        Capture name -> matching nodes, e.g. ``{"spec": [<node>, ...]}``.
    """
    query = Query(get_language(language), query_src)
    cursor = QueryCursor(query)
    return cursor.captures(node)
