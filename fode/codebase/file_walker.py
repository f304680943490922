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


"""Source file discovery.

Walks a repository root, prunes ignored directories, detects each file's
language by extension and collects module manifests (``go.mod``). Output is
sorted by repo-relative POSIX path so entity ids and every ordering built on
top of them are reproducible.
"""

import logging
import os
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Optional

from fode.codebase.ignore_patterns import get_effective_skip_dirs, should_skip_dir
from fode.errors import InvalidPathError, RepoReadError
from fode.languages.registry import LanguageRegistry, get_language_registry
from fode.models import ParseDiagnostic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceFile:
    """One file handed to extraction."""

    path: Path  # absolute
    relative_path: str  # repo-relative, POSIX separators
    language: str

    @property
    def package_dir(self) -> str:
        parent = str(PurePosixPath(self.relative_path).parent)
        return parent if parent else "."


@dataclass(frozen=True)
class ManifestFile:
    path: Path
    relative_path: str
    language: str


@dataclass
class WalkResult:
    """Everything the walk found under one root."""

    root: Path
    files: List[SourceFile] = field(default_factory=list)
    manifests: List[ManifestFile] = field(default_factory=list)
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)

    def language_counts(self) -> Dict[str, int]:
        return dict(Counter(f.language for f in self.files))

    def dominant_language(self, registry: Optional[LanguageRegistry] = None) -> Optional[str]:
        """Language with the most files.

        Ties go to the language registered first, so the high-fidelity
        language wins a tie.
        """
        counts = self.language_counts()
        if not counts:
            return None
        order = (registry or get_language_registry()).list_languages()
        rank = {name: i for i, name in enumerate(order)}
        return min(counts, key=lambda lang: (-counts[lang], rank.get(lang, len(rank)), lang))


def _check_root(root: Path) -> Path:
    if not root.exists():
        raise InvalidPathError(str(root))
    if not root.is_dir():
        raise InvalidPathError(str(root), reason="Not a directory")
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise RepoReadError(str(root), cause=e)
    return root.resolve()


def walk_repository(
    root: Path,
    extra_skip_dirs: Optional[Iterable[str]] = None,
    registry: Optional[LanguageRegistry] = None,
) -> WalkResult:
    """Enumerate supported source files under ``root``.

    Symlinks are not followed. Unreadable sub-directories are reported as
    diagnostics; an unreadable root is fatal.

    Raises:
        InvalidPathError: ``root`` is missing or not a directory
        RepoReadError: ``root`` cannot be listed
    """
    registry = registry or get_language_registry()
    root = _check_root(Path(root))
    skip_dirs = get_effective_skip_dirs(extra_skip_dirs)
    manifest_names = registry.module_manifests()
    result = WalkResult(root=root)

    def on_error(error: OSError) -> None:
        rel = _relative(root, Path(error.filename)) if error.filename else "."
        logger.debug(f"Cannot read directory {rel}: {error}")
        result.diagnostics.append(
            ParseDiagnostic(file=rel, message=f"Cannot read directory: {error.strerror or error}")
        )

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=False):
        dirnames[:] = sorted(d for d in dirnames if not should_skip_dir(d, skip_dirs))
        current = Path(dirpath)
        for filename in sorted(filenames):
            path = current / filename
            if path.is_symlink():
                continue
            rel = _relative(root, path)
            if filename in manifest_names:
                result.manifests.append(ManifestFile(path, rel, manifest_names[filename]))
                continue
            language = registry.detect_language(path)
            if language is None:
                continue
            result.files.append(SourceFile(path=path, relative_path=rel, language=language))

    result.files.sort(key=lambda f: f.relative_path)
    result.manifests.sort(key=lambda m: m.relative_path)
    logger.info(
        f"Walked {root}: {len(result.files)} source files, {len(result.manifests)} manifests"
    )
    return result


def _relative(root: Path, path: Path) -> str:
    return path.relative_to(root).as_posix()
