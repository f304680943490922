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


"""fode: entity graph engine for source repositories.

Parses a repository with tree-sitter, extracts named entities (functions,
types, packages, ...), resolves references between them and serves search
and focus queries over the resulting graph.

Example:
    from fode import RepoState, commands

    state = RepoState()
    info = commands.open_repo(state, "/path/to/repo")
    results = commands.search_entities(state, "Server")
    focus = commands.get_entity_focus(state, results[0].entity.id)
"""

from fode import commands
from fode.config import Settings
from fode.errors import (
    EntityNotFoundError,
    FodeError,
    InvalidPathError,
    NoRecognizedSourceError,
    NoRepoOpenError,
    ParseError,
    RepoReadError,
    UnsupportedLanguageError,
)
from fode.models import (
    Entity,
    EntityKind,
    FocusView,
    GraphData,
    Package,
    ParseDiagnostic,
    Relation,
    RelationKind,
    RepoInfo,
    SearchResult,
)
from fode.repo_state import RepoSnapshot, RepoState, RepoStatus

__version__ = "0.1.0"

__all__ = [
    "commands",
    "Settings",
    # Errors
    "FodeError",
    "InvalidPathError",
    "RepoReadError",
    "NoRecognizedSourceError",
    "NoRepoOpenError",
    "EntityNotFoundError",
    "ParseError",
    "UnsupportedLanguageError",
    # Models
    "Entity",
    "EntityKind",
    "FocusView",
    "GraphData",
    "Package",
    "ParseDiagnostic",
    "Relation",
    "RelationKind",
    "RepoInfo",
    "SearchResult",
    # State
    "RepoSnapshot",
    "RepoState",
    "RepoStatus",
]
