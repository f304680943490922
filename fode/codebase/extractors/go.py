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


"""High-fidelity extraction for Go.

Understands package clauses, import aliases, receivers and grouped
type/const/var declarations. Everything else (signatures, doc comments,
references) comes from the shared base.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from fode.codebase.extractors.base import BaseEntityExtractor, ExtractionContext, ImportSpec
from fode.codebase.tree_sitter_manager import run_query
from fode.models import EntityKind

if TYPE_CHECKING:
    from tree_sitter import Node

logger = logging.getLogger(__name__)

IMPORT_SPEC_QUERY = "(import_spec) @spec"

_TYPE_KINDS = {
    "struct_type": (EntityKind.STRUCT, "struct"),
    "interface_type": (EntityKind.INTERFACE, "interface"),
}


class GoEntityExtractor(BaseEntityExtractor):
    """Extract Go packages, imports, functions, methods, types, consts and vars."""

    def _extract_declarations(self, root: "Node", ctx: ExtractionContext) -> None:
        ctx.package = self._package_name(root, ctx) or "main"
        ctx.imports.extend(self._imports(root, ctx))

        for node in root.named_children:
            node_type = node.type
            if node_type == "function_declaration":
                name = node.child_by_field_name("name")
                if name is not None:
                    self._add_entity(
                        ctx, node, EntityKind.FUNCTION, ctx.text(name), name_nodes=[name]
                    )
            elif node_type == "method_declaration":
                self._method(node, ctx)
            elif node_type == "type_declaration":
                self._types(node, ctx)
            elif node_type in ("const_declaration", "var_declaration"):
                self._values(node, ctx)

    def _package_name(self, root: "Node", ctx: ExtractionContext) -> Optional[str]:
        for node in root.named_children:
            if node.type == "package_clause":
                for child in node.named_children:
                    if child.type == "package_identifier":
                        return ctx.text(child)
        return None

    def _imports(self, root: "Node", ctx: ExtractionContext) -> List[ImportSpec]:
        """Import specs in source order; blank imports are dropped."""
        captures = run_query(root, IMPORT_SPEC_QUERY, self.grammar)
        specs = sorted(captures.get("spec", []), key=lambda n: n.start_byte)
        imports: List[ImportSpec] = []
        for spec in specs:
            path_node = spec.child_by_field_name("path")
            if path_node is None:
                continue
            path = ctx.text(path_node).strip('"`')
            alias_node = spec.child_by_field_name("name")
            alias: Optional[str] = None
            if alias_node is not None:
                if alias_node.type == "blank_identifier":
                    continue
                alias = "." if alias_node.type == "dot" else ctx.text(alias_node)
            imports.append(ImportSpec(path=path, alias=alias, line=spec.start_point[0] + 1))
        return imports

    def _method(self, node: "Node", ctx: ExtractionContext) -> None:
        name = node.child_by_field_name("name")
        if name is None:
            return
        receiver_type: Optional[str] = None
        receiver_vars: List[str] = []
        receiver = node.child_by_field_name("receiver")
        if receiver is not None:
            for param in receiver.named_children:
                if param.type != "parameter_declaration":
                    continue
                var = param.child_by_field_name("name")
                if var is not None:
                    receiver_vars.append(ctx.text(var))
                type_node = param.child_by_field_name("type")
                if type_node is not None:
                    receiver_type = self._base_type_name(type_node, ctx)
        self._add_entity(
            ctx,
            node,
            EntityKind.METHOD,
            ctx.text(name),
            receiver=receiver_type,
            self_names=receiver_vars,
            name_nodes=[name],
        )

    def _base_type_name(self, type_node: "Node", ctx: ExtractionContext) -> Optional[str]:
        """``*Server[T]`` -> ``Server``."""
        stack = [type_node]
        while stack:
            node = stack.pop()
            if node.type == "type_identifier":
                return ctx.text(node)
            stack.extend(reversed(node.named_children))
        return None

    def _types(self, decl: "Node", ctx: ExtractionContext) -> None:
        specs = [c for c in decl.named_children if c.type in ("type_spec", "type_alias")]
        grouped = len(specs) > 1 or _is_parenthesized(decl)
        for spec in specs:
            name = spec.child_by_field_name("name")
            type_node = spec.child_by_field_name("type")
            if name is None or type_node is None:
                continue
            type_name = ctx.text(name)
            params = spec.child_by_field_name("type_parameters")
            header = type_name + (ctx.text(params) if params is not None else "")
            if spec.type == "type_alias":
                kind = EntityKind.TYPE_ALIAS
                signature = f"type {header} = {_collapse(ctx.text(type_node))}"
            elif type_node.type in _TYPE_KINDS:
                kind, keyword = _TYPE_KINDS[type_node.type]
                signature = f"type {header} {keyword}"
            else:
                kind = EntityKind.TYPE_ALIAS
                signature = f"type {header} {_collapse(ctx.text(type_node))}"
            self._add_entity(
                ctx,
                spec,
                kind,
                type_name,
                anchor=spec if grouped else decl,
                signature=self._truncate(signature),
                name_nodes=[name],
            )

    def _values(self, decl: "Node", ctx: ExtractionContext) -> None:
        is_const = decl.type == "const_declaration"
        kind = EntityKind.CONSTANT if is_const else EntityKind.VARIABLE
        keyword = "const" if is_const else "var"

        specs: List["Node"] = []
        for child in decl.named_children:
            if child.type in ("const_spec", "var_spec"):
                specs.append(child)
            elif child.type == "var_spec_list":
                specs.extend(c for c in child.named_children if c.type == "var_spec")
        grouped = len(specs) > 1 or _is_parenthesized(decl)

        for spec in specs:
            # The name field also yields the commas between names
            name_nodes = [n for n in spec.children_by_field_name("name") if n.type == "identifier"]
            names = [n for n in name_nodes if ctx.text(n) != "_"]
            signature = self._truncate(f"{keyword} {_collapse(ctx.text(spec))}")
            for name in names:
                self._add_entity(
                    ctx,
                    spec,
                    kind,
                    ctx.text(name),
                    anchor=spec if grouped else decl,
                    signature=signature,
                    name_nodes=name_nodes,
                )


def _collapse(text: str) -> str:
    return " ".join(text.split())


def _is_parenthesized(decl: "Node") -> bool:
    return any(child.type == "(" for child in decl.children)
