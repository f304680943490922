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


"""Profile-driven extraction for the generic tier.

The walk is identical for every generic language; only the
``SyntaxProfile`` tables differ:

- declaration nodes become entities of the mapped kind
- containers (classes, ``impl`` blocks) turn nested functions into methods
- namespaces (``mod``, ``namespace``) are walked without changing the owner
- function bodies and scopes (lambdas, closures) are never searched for
  declarations
- wrappers (decorators, ``export``) widen the source span and doc anchor
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

from fode.codebase.extractors.base import BaseEntityExtractor, ExtractionContext
from fode.models import EntityKind

if TYPE_CHECKING:
    from tree_sitter import Node

# (node, owner, parent entity index, wrapper anchor)
_Frame = Tuple["Node", Optional[str], Optional[int], Optional["Node"]]


class GenericEntityExtractor(BaseEntityExtractor):
    """Extract declarations of any language described by a syntax profile."""

    def _extract_declarations(self, root: "Node", ctx: ExtractionContext) -> None:
        profile = self.profile
        stack: List[_Frame] = [(c, None, None, None) for c in reversed(root.named_children)]

        while stack:
            node, owner, parent, anchor = stack.pop()
            node_type = node.type
            kind = profile.declarations.get(node_type)

            if kind is not None:
                if owner is not None and node_type in profile.top_level_only:
                    continue
                index = self._declare(node, ctx, kind, owner, parent, anchor)
                if index is None:
                    continue
                if node_type in profile.containers:
                    member_owner = self._owner_name(node, profile.containers[node_type], ctx)
                    stack.extend(self._body_frames(node, member_owner, index))
                elif node_type in profile.namespaces:
                    stack.extend(self._body_frames(node, owner, index))
                continue

            if node_type in profile.containers:
                member_owner = self._owner_name(node, profile.containers[node_type], ctx)
                stack.extend(self._body_frames(node, member_owner or owner, parent))
                continue

            if node_type in profile.scopes:
                continue

            child_anchor = (anchor or node) if node_type in profile.wrappers else None
            stack.extend((c, owner, parent, child_anchor) for c in reversed(node.named_children))

    def _declare(
        self,
        node: "Node",
        ctx: ExtractionContext,
        kind: EntityKind,
        owner: Optional[str],
        parent: Optional[int],
        anchor: Optional["Node"],
    ) -> Optional[int]:
        profile = self.profile
        name_node = node.child_by_field_name(profile.name_field(node.type))
        # Destructuring patterns, attribute targets and anonymous declarations
        if name_node is None or name_node.named_child_count > 0:
            return None
        name = ctx.text(name_node)
        if not name:
            return None

        kind = self._refine_kind(node, kind, name, ctx)
        receiver: Optional[str] = None
        self_names = ()
        if owner is not None and kind.is_function:
            kind = EntityKind.METHOD
            receiver = owner
            self_names = profile.self_names
        elif kind == EntityKind.METHOD:
            # A method outside any recognized container
            kind = EntityKind.FUNCTION

        return self._add_entity(
            ctx,
            node,
            kind,
            name,
            anchor=anchor,
            receiver=receiver,
            parent=parent,
            self_names=self_names,
            name_nodes=[name_node],
        )

    def _refine_kind(
        self, node: "Node", kind: EntityKind, name: str, ctx: ExtractionContext
    ) -> EntityKind:
        if kind != EntityKind.VARIABLE:
            return kind
        profile = self.profile
        value = node.child_by_field_name("value")
        if value is not None and value.type in profile.function_values:
            return EntityKind.FUNCTION
        parent = node.parent
        if parent is not None and parent.type in profile.binding_parents and parent.children:
            if ctx.text(parent.children[0]) == "const":
                return EntityKind.CONSTANT
        if profile.upper_case_constants and name.isupper():
            return EntityKind.CONSTANT
        return kind

    def _owner_name(self, node: "Node", field: str, ctx: ExtractionContext) -> Optional[str]:
        """Name of the type owning a container's members, generics stripped."""
        owner = node.child_by_field_name(field)
        if owner is None:
            return None
        text = ctx.text(owner)
        return text.split("<", 1)[0].split("[", 1)[0].strip() or None

    def _body_frames(
        self, node: "Node", owner: Optional[str], parent: Optional[int]
    ) -> List[_Frame]:
        body = self._body_of(node)
        if body is None:
            return []
        return [(c, owner, parent, None) for c in reversed(body.named_children)]
