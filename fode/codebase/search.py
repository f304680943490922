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


"""Ranked entity lookup.

Score tiers, best first:

    1.0  exact name
    0.9  name prefix
    0.7  name substring
    0.5  signature substring
    0.4  package name substring
    0.3  kind label substring

Matching is case-insensitive. Within a tier shorter names come first, then
ids in lexicographic order.
"""

from typing import Iterable, List, Optional, Tuple

from fode.models import Entity, SearchResult

EXACT_SCORE = 1.0
PREFIX_SCORE = 0.9
NAME_SUBSTRING_SCORE = 0.7
SIGNATURE_SUBSTRING_SCORE = 0.5
PACKAGE_SCORE = 0.4
KIND_SCORE = 0.3

DEFAULT_LIMIT = 50


class SearchIndex:
    """Precomputed lowercase search fields of every entity."""

    def __init__(self, entities: Iterable[Entity], limit: int = DEFAULT_LIMIT):
        self.limit = limit
        self._rows: List[Tuple[Tuple[str, str, str, str], Entity]] = [
            ((e.name.lower(), e.signature.lower(), e.package.lower(), e.kind.label), e)
            for e in entities
        ]

    def __len__(self) -> int:
        return len(self._rows)

    def search(self, query: str, limit: Optional[int] = None) -> List[SearchResult]:
        """Rank entities against ``query``.

        A blank query matches nothing.
        """
        needle = query.strip().lower()
        if not needle:
            return []

        scored: List[Tuple[float, Entity]] = []
        for fields, entity in self._rows:
            score = _score(needle, *fields)
            if score:
                scored.append((score, entity))

        scored.sort(key=lambda item: (-item[0], len(item[1].name), item[1].id))
        cap = limit if limit is not None else self.limit
        return [SearchResult(entity=entity, score=score) for score, entity in scored[:cap]]


def _score(needle: str, name: str, signature: str, package: str, kind: str) -> float:
    if name == needle:
        return EXACT_SCORE
    if name.startswith(needle):
        return PREFIX_SCORE
    if needle in name:
        return NAME_SUBSTRING_SCORE
    if needle in signature:
        return SIGNATURE_SUBSTRING_SCORE
    if needle in package:
        return PACKAGE_SCORE
    if needle in kind:
        return KIND_SCORE
    return 0.0
