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

"""Library profile loading for relseq.

Profiles are loaded in two layers:

  - Organization-wide defaults (defaults/org.yaml, optional)
  - The library profile itself (YAML or JSON)

Dicts are merged recursively and lists/scalars are replaced (last wins).
Relative paths are resolved against the profile file location.

Public API:

- load_effective_config: Load and merge the raw configuration
- load_profile: Load a profile into a LibraryProfile
- LibraryProfile: Loaded profile (name, comparison options, raw config)

Example:
    Basic usage:

        from pathlib import Path
        from relseq.config import load_profile

        profile = load_profile(Path("profiles/zlib.yaml"))
        print(profile.name, profile.comparison.skip_odd)

"""

from .loader import LibraryProfile, load_effective_config, load_profile

__all__ = ["LibraryProfile", "load_effective_config", "load_profile"]
