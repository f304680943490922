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

"""Language tier definitions for extraction strategy selection.

Tier System:
    - High fidelity: package declarations, import aliases and a module
      manifest are understood, so qualified references resolve precisely (Go).
    - Generic: declarations are recognized from tree patterns and references
      resolve by name within the directory, then repository-wide (Rust,
      Python, JavaScript, TypeScript).

Usage:
    from fode.languages.tiers import get_tier, LanguageTier

    if get_tier("go").tier == LanguageTier.HIGH_FIDELITY:
        ...
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class LanguageTier(Enum):
    """Extraction tiers, best first."""

    HIGH_FIDELITY = 1
    GENERIC = 2


@dataclass(frozen=True)
class TierConfig:
    """Configuration for a language tier.

    Attributes:
        tier: The tier level
        has_module_manifest: Whether import paths map to directories via a manifest
        repo_wide_fallback: Whether unresolved bare names may match repository-wide
    """

    tier: LanguageTier
    has_module_manifest: bool
    repo_wide_fallback: bool


_HIGH_FIDELITY = TierConfig(
    tier=LanguageTier.HIGH_FIDELITY,
    has_module_manifest=True,
    repo_wide_fallback=False,
)

_GENERIC = TierConfig(
    tier=LanguageTier.GENERIC,
    has_module_manifest=False,
    repo_wide_fallback=True,
)

LANGUAGE_TIERS: Dict[str, TierConfig] = {
    "go": _HIGH_FIDELITY,
    "rust": _GENERIC,
    "python": _GENERIC,
    "javascript": _GENERIC,
    "typescript": _GENERIC,
    "tsx": _GENERIC,
}


def get_tier(language: str) -> TierConfig:
    """Get tier configuration for a language.

    Unknown languages degrade to the generic tier.
    """
    return LANGUAGE_TIERS.get(language.lower(), _GENERIC)
