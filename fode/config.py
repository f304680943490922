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

"""Runtime settings for repository parsing.

Settings are handed to ``open_repo`` by the surrounding shell; nothing is
read from disk.
"""

import multiprocessing
from typing import List

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Knobs for walking, extraction and search."""

    extra_skip_dirs: List[str] = Field(
        default_factory=list,
        description="Directory names skipped in addition to the defaults",
    )
    max_workers: int = Field(
        default=0,
        ge=0,
        description="Extraction threads (0 = auto, min(cpu_count, 4); 1 = sequential)",
    )
    search_limit: int = Field(default=50, ge=1, description="Maximum search results returned")
    max_file_bytes: int = Field(
        default=2 * 1024 * 1024,
        ge=1,
        description="Files larger than this are skipped with a diagnostic",
    )
    skip_files_with_errors: bool = Field(
        default=True,
        description="Treat a syntax tree containing ERROR nodes as a parse failure",
    )
    max_signature_length: int = Field(
        default=240, ge=16, description="Rendered signatures are truncated to this length"
    )

    def effective_workers(self) -> int:
        if self.max_workers == 0:
            # Parsing is mostly GIL-bound; more threads than this buys nothing
            return min(multiprocessing.cpu_count(), 4)
        return self.max_workers
