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


"""Immutable entity graph.

Entities live in a flat id-keyed table and relations are pairs of ids, so
cycles (recursion, mutually dependent types) need no special handling and a
built graph can be shared between threads as a read-only snapshot.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from fode.errors import EntityNotFoundError
from fode.models import Entity, GraphData, GraphEdge, GraphNode, Package, Relation

logger = logging.getLogger(__name__)


class EntityGraph:
    """Entities, forward and reverse adjacency, packages and a name index.

    Args:
        entities: entities in extraction order (walk order, then declaration order)
        relations: relations in resolution order; the first relation of an
            ordered (from, to) pair wins and relations touching unknown ids
            are dropped
        packages: package table
        external_deps: entity id -> raw external import paths

    Raises:
        ValueError: two entities share an id
    """

    def __init__(
        self,
        entities: Iterable[Entity],
        relations: Iterable[Relation] = (),
        packages: Iterable[Package] = (),
        external_deps: Optional[Mapping[str, Iterable[str]]] = None,
    ):
        by_id: Dict[str, Entity] = {}
        for entity in entities:
            if entity.id in by_id:
                raise ValueError(f"Duplicate entity id: {entity.id}")
            by_id[entity.id] = entity
        self._entities: Tuple[Entity, ...] = tuple(by_id.values())
        self._by_id: Mapping[str, Entity] = MappingProxyType(by_id)

        kept: List[Relation] = []
        pairs: Set[Tuple[str, str]] = set()
        dangling = 0
        forward: Dict[str, List[Relation]] = {}
        reverse: Dict[str, List[Relation]] = {}
        for relation in relations:
            if relation.from_id not in by_id or relation.to_id not in by_id:
                dangling += 1
                continue
            pair = (relation.from_id, relation.to_id)
            if pair in pairs:
                continue
            pairs.add(pair)
            kept.append(relation)
            forward.setdefault(relation.from_id, []).append(relation)
            reverse.setdefault(relation.to_id, []).append(relation)
        if dangling:
            logger.warning(f"Dropped {dangling} relation(s) pointing at unknown entities")

        self._relations: Tuple[Relation, ...] = tuple(kept)
        self._forward = {k: tuple(v) for k, v in forward.items()}
        self._reverse = {k: tuple(v) for k, v in reverse.items()}

        names: Dict[str, List[str]] = {}
        for entity in self._entities:
            names.setdefault(entity.name, []).append(entity.id)
        self._names = {k: tuple(v) for k, v in names.items()}

        self._packages: Tuple[Package, ...] = tuple(
            sorted(packages, key=lambda p: (p.dir, p.language))
        )
        deps = external_deps or {}
        self._external: Dict[str, Tuple[str, ...]] = {
            entity_id: tuple(sorted(set(paths)))
            for entity_id, paths in deps.items()
            if entity_id in by_id and paths
        }

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._by_id

    def get(self, entity_id: str) -> Entity:
        """Look up one entity.

        Raises:
            EntityNotFoundError: ``entity_id`` is not in the graph
        """
        entity = self._by_id.get(entity_id)
        if entity is None:
            raise EntityNotFoundError(entity_id)
        return entity

    @property
    def entities(self) -> Tuple[Entity, ...]:
        return self._entities

    def get_all_entities(self) -> List[Entity]:
        return list(self._entities)

    @property
    def relations(self) -> Tuple[Relation, ...]:
        return self._relations

    @property
    def packages(self) -> Tuple[Package, ...]:
        return self._packages

    def outgoing(self, entity_id: str) -> Tuple[Relation, ...]:
        return self._forward.get(entity_id, ())

    def incoming(self, entity_id: str) -> Tuple[Relation, ...]:
        return self._reverse.get(entity_id, ())

    def external_deps(self, entity_id: str) -> Tuple[str, ...]:
        """Sorted raw import paths of external packages used by an entity."""
        return self._external.get(entity_id, ())

    def ids_named(self, name: str) -> Tuple[str, ...]:
        return self._names.get(name, ())

    def to_graph_data(self) -> GraphData:
        """Nodes and edges export for the graph view."""
        return GraphData(
            nodes=[
                GraphNode(
                    id=e.id,
                    kind=e.kind,
                    name=e.name,
                    package=e.package,
                    file=e.file,
                    line=e.line,
                )
                for e in self._entities
            ],
            edges=[
                GraphEdge(source=r.from_id, target=r.to_id, kind=r.kind) for r in self._relations
            ],
            packages=list(self._packages),
        )
