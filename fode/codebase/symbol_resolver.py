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


"""Name index and reference resolution.

``SymbolIndex`` is built after extraction finishes and never changes
afterwards, so resolution can run on several threads at once.
``ReferenceResolver`` turns the raw references of one file into relations.

Resolution order for one reference:

1. qualified (``alias.Name``, high-fidelity only): the alias goes through the
   file's import table; in-repo targets fan out to every same-named
   candidate, external imports are recorded as dependencies
2. unqualified: same package first; then dot imports (high fidelity) or the
   repository-wide index of the same language (generic, heuristic)
3. member (``obj.name``): same-package methods, narrowed by receiver type
   when possible (heuristic)

Ambiguity always fans out; candidates are ordered by (file, line).
Unresolvable names are dropped.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from fode.codebase.extractors.base import (
    ExtractedEntity,
    ExtractedReference,
    FileExtraction,
    ReferenceContext,
)
from fode.codebase.import_resolver import FileImports, ImportResolver
from fode.languages.tiers import LanguageTier, get_tier
from fode.models import NON_REFERENCEABLE_KINDS, Entity, EntityKind, Relation, RelationKind

logger = logging.getLogger(__name__)

_UNQUALIFIED_KINDS = {
    ReferenceContext.CALL: RelationKind.CALLS,
    ReferenceContext.TYPE: RelationKind.TYPE_REFERENCE,
    ReferenceContext.VALUE: RelationKind.REFERENCES,
}
_QUALIFIED_KINDS = {
    ReferenceContext.CALL: RelationKind.CALLS,
    ReferenceContext.TYPE: RelationKind.TYPE_REFERENCE,
    ReferenceContext.VALUE: RelationKind.IMPORT_USE,
}


class SymbolIndex:
    """Frozen name lookups over every extracted entity.

    Candidate lists never contain imports or packages and are ordered by
    (file, line).
    """

    def __init__(self, extractions: Iterable[FileExtraction]):
        self._by_id: Dict[str, Entity] = {}
        self._in_package: Dict[Tuple[str, str, str], List[Entity]] = {}
        self._methods: Dict[Tuple[str, str, str], List[Entity]] = {}
        self._repo_wide: Dict[Tuple[str, str], List[Entity]] = {}

        for extraction in extractions:
            for record in extraction.entities:
                self.ingest(record.entity)
        for table in (self._in_package, self._methods, self._repo_wide):
            for candidates in table.values():
                candidates.sort(key=lambda e: e.sort_key)

    def ingest(self, entity: Entity) -> None:
        self._by_id[entity.id] = entity
        if entity.kind in NON_REFERENCEABLE_KINDS:
            return
        if entity.kind == EntityKind.METHOD:
            key = (entity.package_dir, entity.language, entity.name)
            self._methods.setdefault(key, []).append(entity)
            return
        self._in_package.setdefault(
            (entity.package_dir, entity.language, entity.name), []
        ).append(entity)
        self._repo_wide.setdefault((entity.language, entity.name), []).append(entity)

    def get(self, entity_id: str) -> Optional[Entity]:
        return self._by_id.get(entity_id)

    def __len__(self) -> int:
        return len(self._by_id)

    def in_package(self, package_dir: str, language: str, name: str) -> List[Entity]:
        """Non-method entities named ``name`` declared in one package."""
        return self._in_package.get((package_dir, language, name), [])

    def methods(self, package_dir: str, language: str, name: str) -> List[Entity]:
        return self._methods.get((package_dir, language, name), [])

    def repo_wide(self, language: str, name: str) -> List[Entity]:
        """Non-method entities named ``name`` anywhere in the repository.

        Lower precision: unrelated entities that share a name all match.
        """
        return self._repo_wide.get((language, name), [])


@dataclass
class FileResolution:
    """Relations and external dependencies produced by one file."""

    file: str
    relations: List[Relation] = field(default_factory=list)
    external_deps: Dict[str, List[str]] = field(default_factory=dict)


class _Emitter:
    """Collects relations for one file, first relation per pair wins."""

    def __init__(self, result: FileResolution):
        self.result = result
        self._pairs: Set[Tuple[str, str]] = set()

    def emit(
        self, source: Entity, targets: Iterable[Entity], kind: RelationKind, heuristic: bool = False
    ) -> int:
        count = 0
        for target in targets:
            pair = (source.id, target.id)
            if pair in self._pairs:
                continue
            self._pairs.add(pair)
            self.result.relations.append(
                Relation(from_id=source.id, to_id=target.id, kind=kind, heuristic=heuristic)
            )
            count += 1
        return count

    def external(self, source: Entity, import_path: str) -> None:
        deps = self.result.external_deps.setdefault(source.id, [])
        if import_path not in deps:
            deps.append(import_path)


class ReferenceResolver:
    """Resolve the references of extracted files against the symbol index.

    Args:
        index: frozen symbol index of the whole repository
        import_resolver: resolver for high-fidelity import paths
        file_imports: per-file alias tables, keyed by repo-relative path
    """

    def __init__(
        self,
        index: SymbolIndex,
        import_resolver: ImportResolver,
        file_imports: Optional[Mapping[str, FileImports]] = None,
    ):
        self.index = index
        self.import_resolver = import_resolver
        self.file_imports: Mapping[str, FileImports] = file_imports or {}

    def resolve_file(self, extraction: FileExtraction) -> FileResolution:
        result = FileResolution(file=extraction.file)
        emitter = _Emitter(result)
        imports = self.file_imports.get(extraction.file) or FileImports()
        tier = get_tier(extraction.language)
        high_fidelity = tier.tier == LanguageTier.HIGH_FIDELITY

        children: Dict[int, List[Entity]] = {}
        for record in extraction.entities:
            if record.parent is not None:
                children.setdefault(record.parent, []).append(record.entity)

        for position, record in enumerate(extraction.entities):
            emitter.emit(record.entity, children.get(position, []), RelationKind.CONTAINS)
            for reference in record.references:
                if high_fidelity:
                    self._resolve_high_fidelity(record, reference, imports, emitter)
                else:
                    self._resolve_generic(record, reference, emitter, tier.repo_wide_fallback)
        return result

    # ------------------------------------------------------------------
    # High fidelity
    # ------------------------------------------------------------------

    def _resolve_high_fidelity(
        self,
        record: ExtractedEntity,
        reference: ExtractedReference,
        imports: FileImports,
        emitter: _Emitter,
    ) -> None:
        qualifier = reference.qualifier
        if qualifier is None:
            self._unqualified(record.entity, reference, emitter, dot_imports=imports.dot_imports)
            return
        if qualifier and qualifier not in record.self_names:
            import_path = imports.path_for(qualifier)
            if import_path is not None:
                self._qualified(record.entity, reference, import_path, emitter)
                return
        self._member(record, reference, emitter)

    def _qualified(
        self, entity: Entity, reference: ExtractedReference, import_path: str, emitter: _Emitter
    ) -> None:
        resolved = self.import_resolver.resolve(import_path)
        if resolved.is_external:
            emitter.external(entity, import_path)
            return
        candidates = self.index.in_package(resolved.package_dir, entity.language, reference.name)
        emitter.emit(entity, candidates, _QUALIFIED_KINDS[reference.context])

    # ------------------------------------------------------------------
    # Generic
    # ------------------------------------------------------------------

    def _resolve_generic(
        self,
        record: ExtractedEntity,
        reference: ExtractedReference,
        emitter: _Emitter,
        repo_wide: bool,
    ) -> None:
        if reference.qualifier is None:
            self._unqualified(record.entity, reference, emitter, repo_wide=repo_wide)
            return
        matched = self._member(record, reference, emitter, repo_wide=repo_wide)
        if not matched and reference.qualifier not in record.self_names:
            # Module-qualified use such as utils.helper()
            self._unqualified(record.entity, reference, emitter, repo_wide=repo_wide)

    # ------------------------------------------------------------------
    # Shared steps
    # ------------------------------------------------------------------

    def _unqualified(
        self,
        entity: Entity,
        reference: ExtractedReference,
        emitter: _Emitter,
        dot_imports: Iterable[str] = (),
        repo_wide: bool = False,
    ) -> int:
        kind = _UNQUALIFIED_KINDS[reference.context]
        candidates = self.index.in_package(entity.package_dir, entity.language, reference.name)
        if candidates:
            return emitter.emit(entity, candidates, kind)

        for import_path in dot_imports:
            resolved = self.import_resolver.resolve(import_path)
            if resolved.is_external:
                emitter.external(entity, import_path)
                continue
            candidates = self.index.in_package(
                resolved.package_dir, entity.language, reference.name
            )
            if candidates:
                return emitter.emit(entity, candidates, kind)

        if repo_wide:
            candidates = self.index.repo_wide(entity.language, reference.name)
            return emitter.emit(entity, candidates, kind, heuristic=True)
        return 0

    def _member(
        self,
        record: ExtractedEntity,
        reference: ExtractedReference,
        emitter: _Emitter,
        repo_wide: bool = False,
    ) -> bool:
        """Resolve ``qualifier.name`` as a method call on some receiver.

        Returns True when at least one method matched.
        """
        entity = record.entity
        qualifier = reference.qualifier
        is_self = bool(qualifier) and qualifier in record.self_names

        methods = self.index.methods(entity.package_dir, entity.language, reference.name)
        if methods:
            receiver_type = entity.receiver if is_self else qualifier
            if receiver_type:
                narrowed = [m for m in methods if m.receiver == receiver_type]
                if narrowed:
                    methods = narrowed
            emitter.emit(entity, methods, RelationKind.PACKAGE_SIBLING, heuristic=True)

        if qualifier and not is_self:
            # The operand may itself be a package-level variable
            operand = ExtractedReference(
                qualifier, None, ReferenceContext.VALUE, reference.line
            )
            self._unqualified(entity, operand, emitter, repo_wide=repo_wide)
        return bool(methods)
