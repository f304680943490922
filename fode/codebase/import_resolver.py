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


"""Import path resolution for the high-fidelity language.

Two tables are built once per open, after every file has been extracted:

1. ``ModuleTable``: module path -> repo-relative directory, read from every
   ``go.mod`` in the repository.
2. ``FileImports``: per file, local alias -> import path.

An import path resolves to an in-repo package only if it lands on a known
package directory; anything else is external and kept as the raw string.
"""

import logging
import re
import threading
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Dict, Iterable, List, Mapping, Optional

from fode.codebase.extractors.base import FileExtraction

logger = logging.getLogger(__name__)

_MODULE_DIRECTIVE = re.compile(r"""^\s*module\s+["`]?([^\s"`]+)["`]?\s*$""")
_MAJOR_VERSION_SEGMENT = re.compile(r"^v\d+$")
_MAJOR_VERSION_SUFFIX = re.compile(r"\.v\d+$")


def parse_module_path(text: str) -> Optional[str]:
    """Read the ``module`` directive of a go.mod file."""
    for raw in text.splitlines():
        line = raw.split("//", 1)[0]
        match = _MODULE_DIRECTIVE.match(line)
        if match:
            return match.group(1)
    return None


class ModuleTable:
    """Module path -> repo-relative directory; longest module prefix wins."""

    def __init__(self, modules: Optional[Mapping[str, str]] = None):
        self._modules: Dict[str, str] = dict(modules or {})
        self._by_length = sorted(self._modules, key=len, reverse=True)

    @classmethod
    def from_manifests(cls, manifests: Iterable) -> "ModuleTable":
        """Build from walked manifest files (``path`` and ``relative_path``).

        Unreadable or module-less manifests are skipped.
        """
        modules: Dict[str, str] = {}
        for manifest in manifests:
            try:
                text = manifest.path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.warning(f"Cannot read {manifest.relative_path}: {e}")
                continue
            module = parse_module_path(text)
            if not module:
                logger.debug(f"No module directive in {manifest.relative_path}")
                continue
            directory = str(PurePosixPath(manifest.relative_path).parent)
            modules.setdefault(module, directory or ".")
        logger.info(f"Module table: {len(modules)} module(s)")
        return cls(modules)

    def __bool__(self) -> bool:
        return bool(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    @property
    def modules(self) -> Dict[str, str]:
        return dict(self._modules)

    @property
    def primary_module(self) -> Optional[str]:
        """Module rooted at the repository root, else the shortest path."""
        for module, directory in self._modules.items():
            if directory == ".":
                return module
        return min(self._modules, key=lambda m: (len(m), m)) if self._modules else None

    def directory_for(self, import_path: str) -> Optional[str]:
        """Map an import path to the directory it would live in, if under a module."""
        for module in self._by_length:
            if import_path == module:
                rest = ""
            elif import_path.startswith(module + "/"):
                rest = import_path[len(module) + 1 :]
            else:
                continue
            return _join(self._modules[module], rest)
        return None


@dataclass(frozen=True)
class ResolvedImport:
    path: str
    package_dir: Optional[str] = None  # None when external

    @property
    def is_external(self) -> bool:
        return self.package_dir is None


@dataclass
class FileImports:
    """Alias table of one file."""

    aliases: Dict[str, str] = field(default_factory=dict)  # alias -> import path
    dot_imports: List[str] = field(default_factory=list)

    def path_for(self, alias: str) -> Optional[str]:
        return self.aliases.get(alias)


class ImportResolver:
    """Resolve import paths against the module table and known packages.

    Args:
        module_table: module path -> directory
        package_names: known package directory -> declared package name
    """

    def __init__(self, module_table: ModuleTable, package_names: Mapping[str, str]):
        self.module_table = module_table
        self._package_names = dict(package_names)
        self._dirs_by_length = sorted(self._package_names, key=len, reverse=True)
        self._cache: Dict[str, ResolvedImport] = {}
        self._lock = threading.Lock()

    def resolve(self, import_path: str) -> ResolvedImport:
        cached = self._cache.get(import_path)
        if cached is not None:
            return cached
        resolved = ResolvedImport(import_path, self._find_package_dir(import_path))
        with self._lock:
            self._cache.setdefault(import_path, resolved)
        return resolved

    def _find_package_dir(self, import_path: str) -> Optional[str]:
        if self.module_table:
            directory = self.module_table.directory_for(import_path)
            if directory is not None and directory in self._package_names:
                return directory
            return None
        # No manifest: the longest known directory that is a suffix of the path
        for directory in self._dirs_by_length:
            if directory == ".":
                continue
            if import_path == directory or import_path.endswith("/" + directory):
                return directory
        return None

    def default_alias(self, import_path: str) -> str:
        """Local name of an unaliased import."""
        resolved = self.resolve(import_path)
        if resolved.package_dir is not None:
            declared = self._package_names.get(resolved.package_dir)
            if declared:
                return declared
        return guess_package_name(import_path)

    def file_imports(self, extraction: FileExtraction) -> FileImports:
        table = FileImports()
        for spec in extraction.imports:
            if spec.alias == ".":
                table.dot_imports.append(spec.path)
                continue
            alias = spec.alias or self.default_alias(spec.path)
            table.aliases.setdefault(alias, spec.path)
        return table


def guess_package_name(import_path: str) -> str:
    """Package name implied by an import path.

    Example:
        >>> guess_package_name("github.com/go-chi/chi/v5")
        'chi'
        >>> guess_package_name("gopkg.in/yaml.v3")
        'yaml'
    """
    segments = [s for s in import_path.split("/") if s]
    while len(segments) > 1 and _MAJOR_VERSION_SEGMENT.match(segments[-1]):
        segments.pop()
    name = segments[-1] if segments else import_path
    name = _MAJOR_VERSION_SUFFIX.sub("", name)
    if name.startswith("go-") and len(name) > 3:
        name = name[3:]
    return name


def _join(directory: str, rest: str) -> str:
    if not rest:
        return directory
    if directory == ".":
        return rest
    return f"{directory}/{rest}"
