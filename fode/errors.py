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

"""Exception classes for repository parsing and graph queries.

Only a handful of these ever reach the caller of a boundary operation:

- ``InvalidPathError``, ``RepoReadError`` and ``NoRecognizedSourceError`` are
  fatal to ``open_repo``.
- ``NoRepoOpenError`` and ``EntityNotFoundError`` are scoped to the query that
  triggered them.

``ParseError`` is raised inside the extraction phase and always converted into
a diagnostic; it never escapes ``open_repo``.
"""

from typing import Any, Optional


class FodeError(Exception):
    """Base exception for all fode errors.

    Carries a human readable message plus optional context that is appended
    to ``str(error)``.
    """

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.context:
            return self.message
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} [{context_str}]"


class InvalidPathError(FodeError):
    """Raised when the repository root does not exist or is not a directory."""

    def __init__(self, path: str, reason: str = "Path does not exist"):
        self.path = path
        super().__init__(f"{reason}: {path}")


class RepoReadError(FodeError):
    """Raised when the repository root exists but cannot be read."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Cannot read repository {path}{detail}")


class NoRecognizedSourceError(FodeError):
    """Raised when a repository contains no file in a supported language."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No supported language files found in {path}")


class NoRepoOpenError(FodeError):
    """Raised by queries issued before any repository was opened."""

    def __init__(self) -> None:
        super().__init__("No repo loaded")


class EntityNotFoundError(FodeError):
    """Raised when an entity id is not part of the current graph."""

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"Entity not found: {entity_id}")


class UnsupportedLanguageError(FodeError):
    """Raised by registry lookups for a language nobody registered."""

    def __init__(self, language: str, available: Optional[str] = None):
        self.language = language
        if available is None:
            super().__init__(f"Unknown language: {language}")
        else:
            super().__init__(f"Language '{language}' not registered", available=available)


class ParseError(FodeError):
    """A single source file could not be turned into entities."""

    def __init__(self, file: str, message: str, line: Optional[int] = None):
        self.file = file
        self.line = line
        self.reason = message
        if line is None:
            super().__init__(message, file=file)
        else:
            super().__init__(message, file=file, line=line)
