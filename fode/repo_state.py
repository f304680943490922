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


"""Holder of the currently published repository graph.

The state is an explicit object owned by the caller and passed to every
boundary operation. The only mutation is publishing a complete snapshot,
which is a single reference swap under a lock; readers grab the current
reference and never see a half-built graph.

Lifecycle::

    EMPTY ──open──► PARSING ──ok──► READY ──open──► PARSING ──ok──► READY
                        │                               │
                        └─fail─► ERROR                  └─fail─► READY (previous graph kept)

Overlapping opens are last-caller-wins: each ``begin_open`` hands out a new
generation token and only the newest token may publish.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fode.codebase.graph import EntityGraph
from fode.codebase.search import SearchIndex
from fode.errors import NoRepoOpenError
from fode.models import RepoInfo

logger = logging.getLogger(__name__)


class RepoStatus(str, Enum):
    EMPTY = "empty"
    PARSING = "parsing"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class RepoSnapshot:
    """Everything produced by one successful open."""

    graph: EntityGraph
    info: RepoInfo
    search_index: SearchIndex


class RepoState:
    """Process-wide slot for at most one published snapshot."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: Optional[RepoSnapshot] = None
        self._status = RepoStatus.EMPTY
        self._generation = 0
        self._last_error: Optional[BaseException] = None

    @property
    def status(self) -> RepoStatus:
        return self._status

    @property
    def snapshot(self) -> Optional[RepoSnapshot]:
        return self._snapshot

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._last_error

    @property
    def generation(self) -> int:
        return self._generation

    def begin_open(self) -> int:
        """Enter PARSING and return the token the result must be published with."""
        with self._lock:
            self._generation += 1
            self._status = RepoStatus.PARSING
            return self._generation

    def publish(self, token: int, snapshot: RepoSnapshot) -> bool:
        """Swap in ``snapshot`` unless a newer open has started since ``token``.

        Returns:
            False when the result was stale and discarded
        """
        with self._lock:
            if token != self._generation:
                logger.warning(
                    f"Discarding stale result for {snapshot.info.path} "
                    f"(generation {token}, current {self._generation})"
                )
                return False
            self._snapshot = snapshot
            self._status = RepoStatus.READY
            self._last_error = None
        logger.info(
            f"Published {snapshot.info.name}: {snapshot.info.total_entities} entities, "
            f"{snapshot.info.total_relations} relations"
        )
        return True

    def fail(self, token: int, error: BaseException) -> bool:
        """Record a failed open; a previously published graph stays in place."""
        with self._lock:
            if token != self._generation:
                return False
            self._last_error = error
            self._status = RepoStatus.READY if self._snapshot is not None else RepoStatus.ERROR
            return True

    def require_snapshot(self) -> RepoSnapshot:
        """Current snapshot for a query.

        Raises:
            NoRepoOpenError: nothing has been published yet
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise NoRepoOpenError()
        return snapshot
