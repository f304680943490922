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


"""Directory pruning rules for the file walker.

- Hidden directories (starting with '.') are always pruned
- Dependency, vendor and build output directories are listed below
- Callers add their own names through ``Settings.extra_skip_dirs``
"""

from pathlib import PurePath
from typing import FrozenSet, Iterable, Optional

# Non-hidden directory names never walked. Hidden ones are handled by is_hidden_name().
DEFAULT_SKIP_DIRS: FrozenSet[str] = frozenset(
    {
        # Go
        "vendor",
        "testdata",
        # Rust
        "target",
        # Python
        "__pycache__",
        "venv",
        "env",
        "site-packages",
        # JavaScript / TypeScript
        "node_modules",
        "bower_components",
        # Build outputs
        "build",
        "dist",
        "out",
        # Coverage
        "coverage",
        "htmlcov",
        "third_party",
    }
)


def is_hidden_name(name: str) -> bool:
    """Unix convention: a leading dot hides the entry (``.`` and ``..`` excepted)."""
    return name.startswith(".") and name not in (".", "..")


def get_effective_skip_dirs(
    extra_skip_dirs: Optional[Iterable[str]] = None,
    base_skip_dirs: Optional[FrozenSet[str]] = None,
) -> FrozenSet[str]:
    """Combine the default skip set with caller supplied names."""
    effective = base_skip_dirs if base_skip_dirs is not None else DEFAULT_SKIP_DIRS
    if extra_skip_dirs:
        effective = effective | frozenset(extra_skip_dirs)
    return effective


def should_skip_dir(name: str, skip_dirs: FrozenSet[str] = DEFAULT_SKIP_DIRS) -> bool:
    """Check a single directory name while walking.

    Example:
        >>> should_skip_dir(".git")
        True
        >>> should_skip_dir("node_modules")
        True
        >>> should_skip_dir("internal")
        False
    """
    return is_hidden_name(name) or name in skip_dirs


def should_ignore_path(path: PurePath, skip_dirs: FrozenSet[str] = DEFAULT_SKIP_DIRS) -> bool:
    """Check a repo-relative file path against the same rules.

    Only directory components are considered; a hidden file name in a
    regular directory is not ignored by this check.
    """
    return any(should_skip_dir(part, skip_dirs) for part in path.parts[:-1])
