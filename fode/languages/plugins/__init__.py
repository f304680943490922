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


"""Built-in language plugins.

Provides language support for:
- Go (high fidelity: package clauses, import aliases, go.mod)
- Rust, Python, JavaScript, TypeScript and TSX (generic extraction)
"""

from fode.languages.plugins.go import GoPlugin
from fode.languages.plugins.javascript import JavaScriptPlugin
from fode.languages.plugins.python import PythonPlugin
from fode.languages.plugins.rust import RustPlugin
from fode.languages.plugins.typescript import TsxPlugin, TypeScriptPlugin

__all__ = [
    "GoPlugin",
    "RustPlugin",
    "PythonPlugin",
    "JavaScriptPlugin",
    "TypeScriptPlugin",
    "TsxPlugin",
]
