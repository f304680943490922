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


"""Language support for entity extraction.

Each language plugin describes its file extensions, comment syntax and the
tree-sitter node tables that drive extraction. The registry maps files to
plugins and plugins to extractors:

    File path ──► LanguageRegistry ──► LanguagePlugin ──► entity extractor
                                              │
                                   tier (high fidelity / generic)
"""

from fode.languages.base import (
    BaseLanguagePlugin,
    DocCommentPattern,
    LanguageConfig,
    LanguagePlugin,
    SyntaxProfile,
)
from fode.languages.registry import LanguageRegistry, get_language_registry
from fode.languages.tiers import (
    LANGUAGE_TIERS,
    LanguageTier,
    TierConfig,
    get_tier,
)

__all__ = [
    # Base types
    "BaseLanguagePlugin",
    "DocCommentPattern",
    "LanguageConfig",
    "LanguagePlugin",
    "SyntaxProfile",
    # Registry
    "LanguageRegistry",
    "get_language_registry",
    # Tiers
    "LANGUAGE_TIERS",
    "LanguageTier",
    "TierConfig",
    "get_tier",
]
