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

"""Exception hierarchy for relseq.

The version engine in relseq.versioning never raises on malformed version
strings; a bad version degrades to the "unknown" release type instead. The
exceptions below belong to the layers around it (profile loading, source
downloads, state persistence). All of them inherit from RelseqError, so callers
can catch every relseq error with a single except clause.

Example:
    Catching specific error types:
        ```python
        from pathlib import Path
        from relseq.core import plan_builds
        from relseq.exceptions import ConfigError, StateError

        try:
            result = plan_builds(Path("profiles/zlib.json"))
        except ConfigError as e:
            print(f"Profile error: {e}")
        except StateError as e:
            print(f"State error: {e}")
        ```

    Catching all relseq errors:
        ```python
        from relseq.exceptions import RelseqError

        try:
            result = plan_builds(Path("profiles/zlib.json"))
        except RelseqError as e:
            print(f"relseq error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "RelseqError",
    "ConfigError",
    "NetworkError",
    "StateError",
]


class RelseqError(Exception):
    """Base exception for all relseq errors."""

    pass


class ConfigError(RelseqError):
    """Raised for profile and configuration errors.

    This exception is raised when there are problems with:

    - YAML/JSON parse errors or an empty profile file
    - A profile whose top level is not a mapping
    - A missing library name
    - Invalid comparison options (a ReleasePattern that does not compile or
        has no capture group, a non-integer ExtendVersion, a SkipVersions
        pattern that does not compile)
    - A SourceDir that does not exist

    Example:
        Catching configuration errors:
            ```python
            from relseq.config import load_profile
            from relseq.exceptions import ConfigError

            try:
                profile = load_profile(Path("profiles/broken.yaml"))
            except ConfigError as e:
                print(f"Config error: {e}")
            ```
    """

    pass


class StateError(RelseqError):
    """Raised for state file errors.

    The only case today is a state file that is not valid JSON. The tracker
    moves the broken file aside (``*.json.backup``) and writes a fresh state
    before raising, so the next run starts clean.
    """

    pass


class NetworkError(RelseqError):
    """Raised for network/download-related errors.

    This exception is raised when there are problems with:

    - Reading a source index page (HTTP errors, connection timeouts)
    - Downloading a release archive
    - A download that turns out to be an HTML page or an empty file

    Example:
        Catching network errors:
            ```python
            from relseq.core import discover_remote
            from relseq.exceptions import NetworkError

            try:
                result = discover_remote(Path("profiles/zlib.yaml"))
            except NetworkError as e:
                print(f"Network error: {e}")
            ```
    """

    pass
