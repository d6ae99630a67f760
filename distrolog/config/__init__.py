# Copyright 2025 Roger Cibrian
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

"""Configuration loading for distrolog.

Built-in defaults are deep-merged with an optional YAML file: dicts are
merged recursively and lists/scalars are replaced (last wins). "${VAR}"
strings are expanded from the environment.

Public API:

- load_config: Load the effective configuration
- DEFAULT_CONFIG: The built-in defaults

Example:
    Basic usage:

        from pathlib import Path
        from distrolog.config import load_config

        config = load_config(Path("distrolog.yaml"))
        print(config["products"]["k3s"]["organization"])  # "k3s-io"

"""

from .loader import DEFAULT_CONFIG, load_config

__all__ = ["DEFAULT_CONFIG", "load_config"]
