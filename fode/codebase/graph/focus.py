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


"""Tiered neighborhood of one entity.

Computed on demand from the adjacency of the center:

- incoming: every entity pointing at the center, with the relation label
- same_pkg: outgoing targets in the center's package, listed one by one
- same_module: outgoing targets in other in-repo packages, summarized per
  package as counts so heavily coupled packages stay small
- external_deps: raw import paths, no entity detail

Every distinct outgoing target lands in exactly one of same_pkg and
same_module.
"""

from typing import Dict, List

from fode.codebase.graph.entity_graph import EntityGraph
from fode.models import Entity, FocusView, IncomingRef, ModulePkgGroup, SamePkgEntry


def build_focus_view(graph: EntityGraph, entity_id: str) -> FocusView:
    """Partition the neighborhood of ``entity_id``.

    Raises:
        EntityNotFoundError: the id is not in the graph
    """
    center = graph.get(entity_id)

    incoming = [
        IncomingRef(entity=graph.get(r.from_id), relation=r.kind.incoming_label)
        for r in graph.incoming(entity_id)
    ]
    incoming.sort(key=lambda ref: ref.entity.sort_key)

    targets: Dict[str, Entity] = {}
    for relation in graph.outgoing(entity_id):
        targets.setdefault(relation.to_id, graph.get(relation.to_id))

    same_pkg: List[Entity] = []
    other_pkgs: Dict[str, List[Entity]] = {}
    for target in targets.values():
        if target.package_dir == center.package_dir:
            same_pkg.append(target)
        else:
            other_pkgs.setdefault(target.package_dir, []).append(target)
    same_pkg.sort(key=lambda e: e.sort_key)

    return FocusView(
        center=center,
        incoming=incoming,
        same_pkg=[
            SamePkgEntry(id=e.id, kind=e.kind, name=e.name, signature=e.signature)
            for e in same_pkg
        ],
        same_module=_group_by_package(other_pkgs),
        external_deps=list(graph.external_deps(entity_id)),
    )


def _group_by_package(groups: Dict[str, List[Entity]]) -> List[ModulePkgGroup]:
    summaries = []
    for pkg_dir, members in groups.items():
        fn_count = sum(1 for e in members if e.kind.is_function)
        type_count = sum(1 for e in members if e.kind.is_type)
        summaries.append(
            ModulePkgGroup(
                pkg_name=members[0].package,
                pkg_dir=pkg_dir,
                fn_count=fn_count,
                type_count=type_count,
                other_count=len(members) - fn_count - type_count,
            )
        )
    summaries.sort(key=lambda g: (-g.total, g.pkg_dir))
    return summaries
