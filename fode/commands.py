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


"""Boundary operations for the surrounding shell.

Every operation takes the ``RepoState`` it works on as its first argument.
Queries read whatever snapshot is current when they start; ``open_repo``
is the only operation that changes it.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Union

from fode.codebase.builder import GraphBuilder
from fode.codebase.graph import build_focus_view
from fode.codebase.tree_sitter_manager import ParseFn
from fode.config import Settings
from fode.languages.registry import LanguageRegistry
from fode.models import Entity, FocusView, GraphData, ParseDiagnostic, RepoInfo, SearchResult
from fode.repo_state import RepoState

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def open_repo(
    state: RepoState,
    path: PathLike,
    settings: Optional[Settings] = None,
    *,
    registry: Optional[LanguageRegistry] = None,
    parse_fn: Optional[ParseFn] = None,
) -> RepoInfo:
    """Parse a repository and publish its graph.

    The open is all-or-nothing: on failure the previously published graph
    (if any) stays in place. When a newer open started while this one was
    running, this result is returned to the caller but not published.

    Raises:
        InvalidPathError: ``path`` is missing or not a directory
        RepoReadError: ``path`` cannot be read
        NoRecognizedSourceError: no supported source file under ``path``
    """
    token = state.begin_open()
    logger.info(f"Opening repository {path}")
    try:
        snapshot = GraphBuilder(settings, registry, parse_fn).build(path)
    except Exception as e:
        state.fail(token, e)
        logger.info(f"Open of {path} failed: {e}")
        raise
    state.publish(token, snapshot)
    return snapshot.info


async def open_repo_async(
    state: RepoState,
    path: PathLike,
    settings: Optional[Settings] = None,
    *,
    registry: Optional[LanguageRegistry] = None,
    parse_fn: Optional[ParseFn] = None,
) -> RepoInfo:
    """``open_repo`` on a worker thread, for event-loop based shells."""
    return await asyncio.to_thread(
        open_repo, state, path, settings, registry=registry, parse_fn=parse_fn
    )


def get_repo_info(state: RepoState) -> RepoInfo:
    return state.require_snapshot().info


def get_all_entities(state: RepoState) -> List[Entity]:
    """Entities in extraction order."""
    return state.require_snapshot().graph.get_all_entities()


def search_entities(state: RepoState, query: str) -> List[SearchResult]:
    return state.require_snapshot().search_index.search(query)


def get_entity_focus(state: RepoState, entity_id: str) -> FocusView:
    """Center entity (with source and doc) plus its tiered neighborhood.

    Raises:
        NoRepoOpenError: nothing is open
        EntityNotFoundError: ``entity_id`` is not in the current graph
    """
    return build_focus_view(state.require_snapshot().graph, entity_id)


def get_entity_source(state: RepoState, entity_id: str) -> str:
    return state.require_snapshot().graph.get(entity_id).source


def get_graph_data(state: RepoState) -> GraphData:
    return state.require_snapshot().graph.to_graph_data()


def get_diagnostics(state: RepoState) -> List[ParseDiagnostic]:
    """Files skipped during the last successful open."""
    return list(state.require_snapshot().info.diagnostics)
