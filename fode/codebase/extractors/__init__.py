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


"""Entity extractors.

The set of extractors is closed: one dedicated extractor per high-fidelity
language plus the generic extractor for everything else.
"""

from typing import Dict, Type

from fode.codebase.extractors.base import (
    BaseEntityExtractor,
    ExtractedEntity,
    ExtractedReference,
    ExtractionContext,
    FileExtraction,
    ImportSpec,
    ReferenceContext,
    make_entity_id,
)
from fode.codebase.extractors.generic import GenericEntityExtractor
from fode.codebase.extractors.go import GoEntityExtractor

HIGH_FIDELITY_EXTRACTORS: Dict[str, Type[BaseEntityExtractor]] = {
    "go": GoEntityExtractor,
}

__all__ = [
    "BaseEntityExtractor",
    "ExtractedEntity",
    "ExtractedReference",
    "ExtractionContext",
    "FileExtraction",
    "GenericEntityExtractor",
    "GoEntityExtractor",
    "HIGH_FIDELITY_EXTRACTORS",
    "ImportSpec",
    "ReferenceContext",
    "make_entity_id",
]
