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


"""Shared machinery for turning one syntax tree into entities.

An extractor walks the declarations of a single file and emits
``ExtractedEntity`` records: the public ``Entity`` plus the raw references
found in its sub-tree. References are only names at this point; the
reference resolver turns them into relations once every file is known.

Extractors keep no per-file state on ``self`` so one instance can serve
several worker threads.
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, List, Optional, Set

from fode.codebase.tree_sitter_manager import ParseFn, parse_source
from fode.errors import ParseError
from fode.models import Entity, EntityKind

if TYPE_CHECKING:
    from tree_sitter import Node

    from fode.languages.base import LanguagePlugin

logger = logging.getLogger(__name__)


class ReferenceContext(str, Enum):
    """Syntactic position a name was found in."""

    CALL = "call"
    TYPE = "type"
    VALUE = "value"


@dataclass(frozen=True)
class ExtractedReference:
    """A name used inside an entity's declaration.

    ``qualifier`` is ``None`` for a bare name, the operand text for
    ``q.name`` shapes where the operand is a plain identifier, and ``""``
    when the operand is a more complex expression.
    """

    name: str
    qualifier: Optional[str]
    context: ReferenceContext
    line: int


@dataclass
class ExtractedEntity:
    """An entity plus the raw material the resolver needs."""

    entity: Entity
    references: List[ExtractedReference] = field(default_factory=list)
    parent: Optional[int] = None  # index of the enclosing entity in the same file
    self_names: FrozenSet[str] = frozenset()  # receiver variable spellings


@dataclass(frozen=True)
class ImportSpec:
    """One import statement.

    ``alias`` is the explicit local name, ``"."`` for a dot import and
    ``None`` when the default package name applies.
    """

    path: str
    alias: Optional[str]
    line: int


@dataclass
class FileExtraction:
    """Result of extracting one file."""

    file: str
    language: str
    package: str
    package_dir: str
    entities: List[ExtractedEntity] = field(default_factory=list)
    imports: List[ImportSpec] = field(default_factory=list)


def make_entity_id(file: str, kind: EntityKind, name: str, line: int) -> str:
    """Stable id: ``{file}::{kind}::{name}::{line}``."""
    return f"{file}::{kind.value}::{name}::{line}"


@dataclass
class _PendingScan:
    index: int
    node: "Node"
    skip: Set[int]


class ExtractionContext:
    """Per-file state of one extraction run."""

    def __init__(self, file: str, source: bytes, package: str, package_dir: str):
        self.file = file
        self.source = source
        self.package = package
        self.package_dir = package_dir
        self.records: List[ExtractedEntity] = []
        self.imports: List[ImportSpec] = []
        self._ids: Dict[str, int] = {}
        self.pending: List[_PendingScan] = []
        self.declaration_nodes: Set[int] = set()

    def text(self, node: "Node") -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def text_between(self, start: int, end: int) -> str:
        return self.source[start:end].decode("utf-8", errors="replace")

    def unique_id(self, kind: EntityKind, name: str, line: int) -> str:
        base = make_entity_id(self.file, kind, name, line)
        seen = self._ids.get(base, 0) + 1
        self._ids[base] = seen
        if seen == 1:
            return base
        logger.warning(f"Entity id collision for {base}, using ordinal #{seen}")
        return f"{base}#{seen}"


class BaseEntityExtractor(ABC):
    """Common extraction steps for every language.

    Subclasses implement ``_extract_declarations`` and call ``_add_entity``
    for every declaration they recognize. Signature rendering, doc comments,
    source spans and reference collection are shared.
    """

    def __init__(
        self,
        plugin: "LanguagePlugin",
        parse_fn: Optional[ParseFn] = None,
        max_signature_length: int = 240,
        skip_files_with_errors: bool = True,
    ):
        self.plugin = plugin
        self.profile = plugin.syntax_profile
        self.language = plugin.config.name
        self.grammar = plugin.config.tree_sitter_language or self.language
        self.max_signature_length = max_signature_length
        self.skip_files_with_errors = skip_files_with_errors
        self._parse: ParseFn = parse_fn or parse_source

    def extract(
        self, file: str, source: bytes, package_dir: str, default_package: str
    ) -> FileExtraction:
        """Extract every entity of one file.

        Args:
            file: repo-relative POSIX path, used in entity ids
            source: raw file bytes
            package_dir: repo-relative directory of the file (``.`` for the root)
            default_package: package name when the language declares none

        Raises:
            ParseError: the tree contains syntax errors
        """
        tree = self._parse(source, self.grammar)
        root = tree.root_node
        if root.has_error and self.skip_files_with_errors:
            raise ParseError(file, "Syntax error", line=_first_error_line(root))

        ctx = ExtractionContext(file, source, default_package, package_dir)
        self._extract_declarations(root, ctx)
        self._collect_references(ctx)
        return FileExtraction(
            file=file,
            language=self.language,
            package=ctx.package,
            package_dir=package_dir,
            entities=ctx.records,
            imports=ctx.imports,
        )

    @abstractmethod
    def _extract_declarations(self, root: "Node", ctx: ExtractionContext) -> None:
        """Walk ``root`` and register entities and imports on ``ctx``."""
        ...

    # ------------------------------------------------------------------
    # Entity construction
    # ------------------------------------------------------------------

    def _add_entity(
        self,
        ctx: ExtractionContext,
        node: "Node",
        kind: EntityKind,
        name: str,
        *,
        anchor: Optional["Node"] = None,
        signature: Optional[str] = None,
        receiver: Optional[str] = None,
        parent: Optional[int] = None,
        self_names: Iterable[str] = (),
        name_nodes: Iterable["Node"] = (),
        scan_node: Optional["Node"] = None,
    ) -> int:
        """Register one entity and return its index in the file.

        ``node`` is the declaration itself; ``anchor`` is the outermost
        wrapper (decorators, ``export``) that owns the doc comment and
        source span. ``scan_node`` is the sub-tree searched for references
        when it differs from ``node``.
        """
        anchor = anchor or node
        line = node.start_point[0] + 1
        entity = Entity(
            id=ctx.unique_id(kind, name, line),
            kind=kind,
            name=name,
            package=ctx.package,
            package_dir=ctx.package_dir,
            language=self.language,
            file=ctx.file,
            line=line,
            end_line=anchor.end_point[0] + 1,
            signature=signature if signature is not None else self._signature(node, ctx),
            doc_comment=self._doc_comment(anchor, node, ctx),
            source=ctx.text(anchor),
            receiver=receiver,
        )
        ctx.records.append(
            ExtractedEntity(entity=entity, parent=parent, self_names=frozenset(self_names))
        )
        index = len(ctx.records) - 1
        scan = scan_node or node
        ctx.declaration_nodes.add(scan.id)
        ctx.pending.append(_PendingScan(index, scan, {n.id for n in name_nodes}))
        return index

    def _signature(self, node: "Node", ctx: ExtractionContext) -> str:
        """One-line header: text up to the body, whitespace collapsed."""
        body = self._body_of(node)
        if body is None:
            value = node.child_by_field_name("value")
            if value is not None and value.type in self.profile.function_values:
                body = self._body_of(value)
        end = body.start_byte if body is not None else node.end_byte
        text = " ".join(ctx.text_between(node.start_byte, end).split())
        text = text.rstrip(" {:;")

        parent = node.parent
        if parent is not None and parent.type in self.profile.binding_parents:
            keyword = parent.children[0] if parent.children else None
            if keyword is not None and not keyword.is_named:
                text = f"{ctx.text(keyword)} {text}"
        return self._truncate(text)

    def _truncate(self, text: str) -> str:
        limit = self.max_signature_length
        if len(text) <= limit:
            return text
        return text[: limit - 3].rstrip() + "..."

    def _body_of(self, node: "Node") -> Optional["Node"]:
        for name in self.profile.body_fields:
            body = node.child_by_field_name(name)
            if body is not None:
                return body
        return None

    # ------------------------------------------------------------------
    # Doc comments
    # ------------------------------------------------------------------

    def _doc_comment(self, anchor: "Node", node: "Node", ctx: ExtractionContext) -> str:
        comments = self._leading_comments(anchor)
        if comments:
            return self._strip_comment_markers([ctx.text(c) for c in comments])
        pattern = self.plugin.config.doc_comment_pattern
        if pattern is not None and pattern.location == "inside":
            return self._docstring(node, ctx)
        return ""

    def _leading_comments(self, anchor: "Node") -> List["Node"]:
        """Comment block directly above ``anchor`` with no blank line in between."""
        profile = self.profile
        comments: List["Node"] = []
        boundary = anchor.start_point[0]
        current = anchor.prev_sibling
        while current is not None:
            if current.end_point[0] < boundary - 1:
                break
            if current.type in profile.comment_types:
                previous = current.prev_sibling
                if previous is not None and previous.end_point[0] == current.start_point[0]:
                    break  # trailing comment of the previous statement
                comments.append(current)
            elif current.type not in profile.doc_skip_types:
                break
            boundary = current.start_point[0]
            current = current.prev_sibling
        comments.reverse()
        return comments

    def _strip_comment_markers(self, texts: List[str]) -> str:
        config = self.plugin.config
        pattern = config.doc_comment_pattern
        prefixes = list(pattern.line_prefixes) if pattern else []
        if config.line_comment and config.line_comment not in prefixes:
            prefixes.append(config.line_comment)
        prefixes.sort(key=len, reverse=True)
        candidates = (pattern.block_start if pattern else None, config.block_comment_start)
        block_starts = sorted(
            {s for s in candidates if s},
            key=len,
            reverse=True,
        )
        block_end = config.block_comment_end

        lines: List[str] = []
        for text in texts:
            text = text.strip()
            opener = next((s for s in block_starts if text.startswith(s)), None)
            if opener is not None and block_end and text.endswith(block_end):
                inner = text[len(opener) : len(text) - len(block_end)]
                for raw in inner.splitlines():
                    raw = raw.strip()
                    if raw.startswith("*"):
                        raw = raw[1:]
                    lines.append(raw.strip())
                continue
            prefix = next((p for p in prefixes if text.startswith(p)), "")
            lines.append(text[len(prefix) :].strip())
        return "\n".join(lines).strip()

    def _docstring(self, node: "Node", ctx: ExtractionContext) -> str:
        body = self._body_of(node)
        if body is None or body.named_child_count == 0:
            return ""
        first = body.named_children[0]
        if first.type != "expression_statement" or first.named_child_count == 0:
            return ""
        string = first.named_children[0]
        if string.type != "string":
            return ""
        text = ctx.text(string).lstrip("rRbBuUfF")
        for quote in ('"""', "'''", '"', "'"):
            if text.startswith(quote) and text.endswith(quote) and len(text) >= 2 * len(quote):
                text = text[len(quote) : len(text) - len(quote)]
                break
        return inspect.cleandoc(text)

    # ------------------------------------------------------------------
    # Reference collection
    # ------------------------------------------------------------------

    def _collect_references(self, ctx: ExtractionContext) -> None:
        """Scan every registered entity once all declaration nodes are known."""
        for pending in ctx.pending:
            skip = (ctx.declaration_nodes - {pending.node.id}) | pending.skip
            ctx.records[pending.index].references = self._scan_references(pending.node, ctx, skip)
        ctx.pending.clear()

    def _scan_references(
        self, root: "Node", ctx: ExtractionContext, skip: Set[int]
    ) -> List[ExtractedReference]:
        """Collect deduplicated name references below ``root`` in pre-order."""
        profile = self.profile
        references: List[ExtractedReference] = []
        seen: Set[tuple] = set()

        def add(name: str, qualifier: Optional[str], context: ReferenceContext, node: "Node"):
            key = (name, qualifier, context)
            if name and key not in seen:
                seen.add(key)
                references.append(
                    ExtractedReference(name, qualifier, context, node.start_point[0] + 1)
                )

        stack: List[tuple] = [(root, None)]
        while stack:
            node, hint = stack.pop()
            if node.id in skip:
                continue
            node_type = node.type

            if node_type in profile.call_types:
                callee = node.child_by_field_name(profile.call_types[node_type])
                for child in reversed(node.named_children):
                    if callee is None or child.id != callee.id:
                        stack.append((child, None))
                if callee is not None:
                    stack.append((self._unwrap_callee(callee), ReferenceContext.CALL))
                continue

            if node_type in profile.selector_types:
                operand_field, member_field = profile.selector_types[node_type]
                operand = node.child_by_field_name(operand_field)
                member = node.child_by_field_name(member_field)
                if member is None or member.id in skip:
                    stack.extend((c, None) for c in reversed(node.named_children))
                    continue
                if hint is not None:
                    context = hint
                elif node_type in profile.qualified_type_types:
                    context = ReferenceContext.TYPE
                else:
                    context = ReferenceContext.VALUE
                if operand is None:
                    qualifier = None
                elif operand.type in profile.qualifier_types:
                    qualifier = ctx.text(operand)
                else:
                    qualifier = ""
                    stack.append((operand, None))
                add(ctx.text(member), qualifier, context, member)
                continue

            if node_type in profile.identifier_types:
                add(ctx.text(node), None, hint or ReferenceContext.VALUE, node)
            elif node_type in profile.type_identifier_types:
                add(ctx.text(node), None, hint or ReferenceContext.TYPE, node)
            else:
                stack.extend((c, None) for c in reversed(node.named_children))
        return references

    def _unwrap_callee(self, callee: "Node") -> "Node":
        wrappers = self.profile.callee_wrappers
        while callee.type in wrappers:
            inner = callee.child_by_field_name(wrappers[callee.type])
            if inner is None:
                break
            callee = inner
        return callee


def _first_error_line(root: "Node") -> Optional[int]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return None
