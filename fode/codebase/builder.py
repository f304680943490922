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


"""Repository build pipeline.

    walk ──► extract (thread pool, per file) ──► barrier
         ──► module table + import tables + symbol index
         ──► resolve (thread pool, per file) ──► merge in file order
         ──► EntityGraph + SearchIndex + RepoInfo

Extraction failures are per file: the file is skipped, a diagnostic is
recorded and the build goes on. Only a missing or unreadable root, or a
repository without a single supported source file, fails the build.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple, TypeVar

from fode.codebase.extractors.base import BaseEntityExtractor, FileExtraction
from fode.codebase.file_walker import SourceFile, WalkResult, walk_repository
from fode.codebase.graph import EntityGraph
from fode.codebase.import_resolver import FileImports, ImportResolver, ModuleTable
from fode.codebase.search import SearchIndex
from fode.codebase.symbol_resolver import FileResolution, ReferenceResolver, SymbolIndex
from fode.codebase.tree_sitter_manager import ParseFn
from fode.config import Settings
from fode.errors import NoRecognizedSourceError, ParseError
from fode.languages.registry import LanguageRegistry, get_language_registry
from fode.languages.tiers import get_tier
from fode.models import Package, ParseDiagnostic, RepoAttribute, RepoInfo, Relation
from fode.repo_state import RepoSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# (extraction, diagnostic): exactly one of the two is set
_Outcome = Tuple[Optional[FileExtraction], Optional[ParseDiagnostic]]


class GraphBuilder:
    """Build a complete snapshot of one repository.

    Args:
        settings: walk, extraction and search knobs
        registry: language registry (the global one by default)
        parse_fn: syntax tree provider handed to every extractor
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[LanguageRegistry] = None,
        parse_fn: Optional[ParseFn] = None,
    ):
        self.settings = settings or Settings()
        self.registry = registry or get_language_registry()
        self.parse_fn = parse_fn

    def build(self, path) -> RepoSnapshot:
        """Walk, extract, resolve and assemble.

        Raises:
            InvalidPathError: the path is missing or not a directory
            RepoReadError: the root cannot be listed
            NoRecognizedSourceError: no supported source file was found
        """
        start = time.time()
        walk = walk_repository(Path(path), self.settings.extra_skip_dirs, self.registry)
        if not walk.files:
            raise NoRecognizedSourceError(str(walk.root))

        extractors = {
            language: self.registry.get_extractor(
                language,
                parse_fn=self.parse_fn,
                max_signature_length=self.settings.max_signature_length,
                skip_files_with_errors=self.settings.skip_files_with_errors,
            )
            for language in walk.language_counts()
        }

        def extract(source_file: SourceFile) -> _Outcome:
            return self._extract_file(source_file, walk.root, extractors[source_file.language])

        with self._pool() as run:
            outcomes = run(extract, walk.files)

            # Barrier: resolution needs every file's entities
            extractions = [e for e, _ in outcomes if e is not None]
            diagnostics = list(walk.diagnostics) + [d for _, d in outcomes if d is not None]
            packages = _package_table(extractions)
            module_table = ModuleTable.from_manifests(walk.manifests)
            resolver = self._reference_resolver(extractions, packages, module_table)

            resolutions = run(resolver.resolve_file, extractions)

        relations, external_deps = _merge(resolutions)
        entities = [record.entity for e in extractions for record in e.entities]
        graph = EntityGraph(entities, relations, packages, external_deps)
        info = self._repo_info(walk, graph, extractions, diagnostics, module_table)
        logger.info(
            f"Built graph for {info.name} in {time.time() - start:.2f}s: "
            f"{info.parsed_files}/{info.total_files} files, {len(graph)} entities, "
            f"{len(graph.relations)} relations, {len(diagnostics)} diagnostics"
        )
        return RepoSnapshot(
            graph=graph,
            info=info,
            search_index=SearchIndex(graph.entities, limit=self.settings.search_limit),
        )

    @contextmanager
    def _pool(self) -> Iterator[Callable[[Callable[[T], R], Iterable[T]], List[R]]]:
        """Order-preserving map, threaded unless a single worker is configured."""
        workers = self.settings.effective_workers()
        if workers <= 1:
            yield lambda fn, items: [fn(item) for item in items]
            return
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fode") as executor:
            yield lambda fn, items: list(executor.map(fn, items))

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    def _extract_file(
        self, source_file: SourceFile, root: Path, extractor: BaseEntityExtractor
    ) -> _Outcome:
        rel = source_file.relative_path
        try:
            size = source_file.path.stat().st_size
            if size > self.settings.max_file_bytes:
                raise ParseError(rel, f"File too large ({size} bytes)")
            data = source_file.path.read_bytes()
            try:
                data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(rel, f"Not valid UTF-8: {e.reason}")
            package_dir = source_file.package_dir
            default_package = PurePosixPath(package_dir).name if package_dir != "." else root.name
            return extractor.extract(rel, data, package_dir, default_package), None
        except ParseError as e:
            logger.debug(f"Skipping {rel}: {e}")
            return None, _diagnostic(source_file, e.reason, e.line)
        except OSError as e:
            logger.debug(f"Cannot read {rel}: {e}")
            return None, _diagnostic(source_file, f"Cannot read file: {e.strerror or e}")
        except Exception as e:
            logger.warning(f"Extraction failed for {rel}: {e}", exc_info=True)
            return None, _diagnostic(source_file, f"Extraction failed: {e}")

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _reference_resolver(
        self,
        extractions: List[FileExtraction],
        packages: List[Package],
        module_table: ModuleTable,
    ) -> ReferenceResolver:
        manifest_languages = {
            name for name in self.registry.list_languages() if get_tier(name).has_module_manifest
        }
        package_names = {p.dir: p.name for p in packages if p.language in manifest_languages}
        import_resolver = ImportResolver(module_table, package_names)

        file_imports: Dict[str, FileImports] = {
            e.file: import_resolver.file_imports(e)
            for e in extractions
            if e.language in manifest_languages and e.imports
        }
        index = SymbolIndex(extractions)
        logger.debug(f"Symbol index: {len(index)} entities, {len(file_imports)} import tables")
        return ReferenceResolver(index, import_resolver, file_imports)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def _repo_info(
        self,
        walk: WalkResult,
        graph: EntityGraph,
        extractions: List[FileExtraction],
        diagnostics: List[ParseDiagnostic],
        module_table: ModuleTable,
    ) -> RepoInfo:
        root = walk.root
        counts = walk.language_counts()
        dominant = walk.dominant_language(self.registry)
        order = {name: i for i, name in enumerate(self.registry.list_languages())}
        languages = sorted(counts, key=lambda lang: (-counts[lang], order.get(lang, len(order))))
        plugin = self.registry.get(dominant)
        package_names = sorted({p.name for p in graph.packages})

        attributes: List[RepoAttribute] = []
        if plugin.config.module_manifest:
            module_name = module_table.primary_module or root.name
            attributes.append(RepoAttribute(label="Module", value=module_name))
            attributes.append(RepoAttribute(label="Packages", value=str(len(package_names))))
            manifest = root / plugin.config.module_manifest
            if manifest.exists():
                attributes.append(
                    RepoAttribute(
                        label=plugin.config.module_manifest,
                        value=plugin.config.module_manifest,
                        link=str(manifest),
                    )
                )
        else:
            module_name = root.name
            attributes.append(RepoAttribute(label="Language", value=plugin.config.display_name))
            attributes.append(RepoAttribute(label="Files", value=str(len(walk.files))))
            attributes.append(RepoAttribute(label="Packages", value=str(len(package_names))))

        return RepoInfo(
            path=str(root),
            name=root.name,
            language=plugin.config.display_name,
            languages=[self.registry.get(lang).config.display_name for lang in languages],
            total_files=len(walk.files),
            parsed_files=len(extractions),
            skipped_files=len(walk.files) - len(extractions),
            total_entities=len(graph),
            total_relations=len(graph.relations),
            packages=package_names,
            module_name=module_name,
            attributes=attributes,
            diagnostics=diagnostics,
        )


def _diagnostic(
    source_file: SourceFile, message: str, line: Optional[int] = None
) -> ParseDiagnostic:
    return ParseDiagnostic(
        file=source_file.relative_path,
        language=source_file.language,
        message=message,
        line=line,
    )


def _package_table(extractions: Iterable[FileExtraction]) -> List[Package]:
    """One package per (directory, language), named after its first file.

    Go ``_test`` packages only name a directory when no other package does.
    """
    names: Dict[Tuple[str, str], str] = {}
    counts: Dict[Tuple[str, str], int] = {}
    for extraction in extractions:
        key = (extraction.package_dir, extraction.language)
        current = names.get(key)
        if current is None or (
            current.endswith("_test") and not extraction.package.endswith("_test")
        ):
            names[key] = extraction.package
        counts[key] = counts.get(key, 0) + len(extraction.entities)
    return [
        Package(name=names[key], dir=key[0], language=key[1], entity_count=counts[key])
        for key in sorted(names)
    ]


def _merge(resolutions: Iterable[FileResolution]) -> Tuple[List[Relation], Dict[str, List[str]]]:
    relations: List[Relation] = []
    external_deps: Dict[str, List[str]] = {}
    for resolution in resolutions:
        relations.extend(resolution.relations)
        for entity_id, paths in resolution.external_deps.items():
            external_deps.setdefault(entity_id, []).extend(paths)
    return relations, external_deps
