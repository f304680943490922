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

"""Records shared by the graph engine and the boundary operations.

Everything handed across the boundary is a frozen pydantic model so a
published graph can be shared between threads without copying.

Note: ``Entity.source`` holds the declaration text verbatim. Bodies are kept in
memory because nothing is persisted; each open is a fresh parse.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EntityKind(str, Enum):
    """Kinds of named code constructs. Values double as display labels."""

    FUNCTION = "function"
    METHOD = "method"
    STRUCT = "struct"
    INTERFACE = "interface"
    TYPE_ALIAS = "type"
    CONSTANT = "const"
    VARIABLE = "var"
    IMPORT = "import"
    PACKAGE = "package"
    CLASS = "class"
    ENUM = "enum"
    TRAIT = "trait"
    MODULE = "module"

    @property
    def label(self) -> str:
        return self.value

    @property
    def is_function(self) -> bool:
        return self in FUNCTION_KINDS

    @property
    def is_type(self) -> bool:
        return self in TYPE_KINDS


FUNCTION_KINDS = frozenset({EntityKind.FUNCTION, EntityKind.METHOD})
TYPE_KINDS = frozenset(
    {
        EntityKind.STRUCT,
        EntityKind.INTERFACE,
        EntityKind.TYPE_ALIAS,
        EntityKind.CLASS,
        EntityKind.ENUM,
        EntityKind.TRAIT,
    }
)
# Kinds that never take part in name resolution
NON_REFERENCEABLE_KINDS = frozenset({EntityKind.IMPORT, EntityKind.PACKAGE})


class RelationKind(str, Enum):
    """Syntactic reason for an edge between two entities."""

    CALLS = "calls"
    TYPE_REFERENCE = "type_reference"
    IMPORT_USE = "import_use"
    REFERENCES = "references"
    PACKAGE_SIBLING = "package_sibling"
    CONTAINS = "contains"

    @property
    def incoming_label(self) -> str:
        return _INCOMING_LABELS[self]


_INCOMING_LABELS = {
    RelationKind.CALLS: "called by",
    RelationKind.TYPE_REFERENCE: "type used by",
    RelationKind.IMPORT_USE: "used via import by",
    RelationKind.REFERENCES: "referenced by",
    RelationKind.PACKAGE_SIBLING: "called on receiver by",
    RelationKind.CONTAINS: "contained in",
}


class Entity(BaseModel):
    """A named, located code declaration."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: EntityKind
    name: str
    package: str
    package_dir: str
    language: str
    file: str
    line: int
    end_line: int
    signature: str
    doc_comment: str = ""
    source: str = ""
    receiver: Optional[str] = None  # owning type for methods

    @property
    def qualified_name(self) -> str:
        if self.receiver:
            return f"{self.receiver}.{self.name}"
        return self.name

    @property
    def sort_key(self) -> tuple:
        return (self.file, self.line, self.id)


class Relation(BaseModel):
    """Directed edge ``from_id -> to_id``.

    ``heuristic`` marks name-only matches (repo-wide or receiver guesses) that
    may link entities which merely share a name.
    """

    model_config = ConfigDict(frozen=True)

    from_id: str
    to_id: str
    kind: RelationKind
    heuristic: bool = False


class Package(BaseModel):
    """A logical grouping of entities identified by its directory."""

    model_config = ConfigDict(frozen=True)

    name: str
    dir: str
    language: str
    entity_count: int = 0


class ParseDiagnostic(BaseModel):
    """A file that was skipped during an open, and why."""

    model_config = ConfigDict(frozen=True)

    file: str
    language: Optional[str] = None
    message: str
    line: Optional[int] = None


class RepoAttribute(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: str
    link: Optional[str] = None


class RepoInfo(BaseModel):
    """Metadata returned by ``open_repo``."""

    model_config = ConfigDict(frozen=True)

    path: str
    name: str
    language: str
    languages: List[str] = Field(default_factory=list)
    total_files: int
    parsed_files: int
    skipped_files: int = 0
    total_entities: int
    total_relations: int = 0
    packages: List[str] = Field(default_factory=list)
    module_name: str
    attributes: List[RepoAttribute] = Field(default_factory=list)
    diagnostics: List[ParseDiagnostic] = Field(default_factory=list)


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    entity: Entity
    score: float


class IncomingRef(BaseModel):
    """An entity that references the focus center."""

    model_config = ConfigDict(frozen=True)

    entity: Entity
    relation: str


class SamePkgEntry(BaseModel):
    """Compact same-package reference: just enough to render and click."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: EntityKind
    name: str
    signature: str


class ModulePkgGroup(BaseModel):
    """Summary of the references into one other in-repo package."""

    model_config = ConfigDict(frozen=True)

    pkg_name: str
    pkg_dir: str
    fn_count: int
    type_count: int
    other_count: int = 0

    @property
    def total(self) -> int:
        return self.fn_count + self.type_count + self.other_count


class FocusView(BaseModel):
    """Tiered neighborhood of one entity."""

    model_config = ConfigDict(frozen=True)

    center: Entity
    incoming: List[IncomingRef] = Field(default_factory=list)
    same_pkg: List[SamePkgEntry] = Field(default_factory=list)
    same_module: List[ModulePkgGroup] = Field(default_factory=list)
    external_deps: List[str] = Field(default_factory=list)


class GraphNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    kind: EntityKind
    name: str
    package: str
    file: str
    line: int


class GraphEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    kind: RelationKind


class GraphData(BaseModel):
    """Nodes and edges export consumed by the graph view."""

    model_config = ConfigDict(frozen=True)

    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)
    packages: List[Package] = Field(default_factory=list)
