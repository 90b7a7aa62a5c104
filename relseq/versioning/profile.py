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

"""Per-library comparison options.

A ComparisonProfile carries the handful of heuristics that change how a
library's versions are classified, ordered, and filtered. It is built once
per library from plain key/value data (the library profile) and is never
mutated afterwards.

Profile keys (CamelCase, as written in library profiles):

- LetterReleases: trailing lowercase letters are point releases
    (OpenSSL style, "0.9.8k" > "0.9.8").
- StringReleases: compare versions as plain strings.
- ExtendVersion: right-pad both versions with "0" to this length first.
- ReleasePattern: regex whose first group is the canonical release id.
- SkipVersions: versions to exclude (literals or regex patterns).
- SkipOdd: exclude versions with an odd second segment (1.3.x).
- MinimalVersion: exclude versions older than this one.
- LatestMicro / LatestNano: keep only the newest micro/nano release of
    each series in the timeline.
- KeepOldBeta: keep superseded pre-releases in the timeline.

Any other key is ignored here.

Example:
    ```python
    from relseq.versioning import ComparisonProfile

    profile = ComparisonProfile.from_mapping(
        {"Name": "openssl", "LetterReleases": "On", "SkipVersions": ["0.9.8zh"]}
    )
    profile.letter_releases  # True
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import re
from typing import Any

from relseq.exceptions import ConfigError

# Profile key -> ComparisonProfile field
PROFILE_KEYS: dict[str, str] = {
    "LetterReleases": "letter_releases",
    "StringReleases": "string_releases",
    "ExtendVersion": "extend_version",
    "ReleasePattern": "release_pattern",
    "SkipVersions": "skip_versions",
    "SkipOdd": "skip_odd",
    "MinimalVersion": "minimal_version",
    "LatestMicro": "latest_micro",
    "LatestNano": "latest_nano",
    "KeepOldBeta": "keep_old_beta",
}

_TRUE_WORDS = {"on", "yes", "true", "1"}

# A SkipVersions entry containing one of these is a regex, otherwise a literal.
PATTERN_CHARS = frozenset("*+(|\\[?{")


def is_pattern(entry: str) -> bool:
    """Return True if a SkipVersions entry should be read as a regex."""
    return any(ch in PATTERN_CHARS for ch in entry)


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_WORDS
    return False


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class ComparisonProfile:
    """Options that alter version classification and comparison.

    Attributes:
        letter_releases: Treat trailing lowercase letters as point releases.
        string_releases: Compare versions lexicographically.
        extend_version: Minimum length both versions are padded to with "0".
        release_pattern: Regex; its first group is the canonical version.
        skip_versions: Versions to exclude (literals or regex patterns).
        skip_odd: Exclude versions whose second dot-segment is odd.
        minimal_version: Exclude versions that compare below this one.
        latest_micro: Keep only the newest release of each X.Y series.
        latest_nano: Keep only the newest release of each X.Y.Z series.
        keep_old_beta: Keep superseded pre-releases in the timeline.
    """

    letter_releases: bool = False
    string_releases: bool = False
    extend_version: int | None = None
    release_pattern: str | None = None
    skip_versions: tuple[str, ...] = ()
    skip_odd: bool = False
    minimal_version: str | None = None
    latest_micro: bool = False
    latest_nano: bool = False
    keep_old_beta: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ComparisonProfile:
        """Build a profile from library profile data.

        Args:
            data: Key/value data using the profile keys listed in the module
                docstring. Unknown keys are ignored.

        Returns:
            A validated, immutable ComparisonProfile.

        Raises:
            ConfigError: If ExtendVersion is not an integer, ReleasePattern
                does not compile or has no capture group, or a SkipVersions
                pattern does not compile.

        """
        extend = data.get("ExtendVersion")
        extend_version: int | None = None
        if extend is not None and extend != "":
            if isinstance(extend, bool):
                raise ConfigError(f"ExtendVersion must be an integer, got {extend!r}")
            try:
                extend_version = int(extend)
            except (TypeError, ValueError) as err:
                raise ConfigError(
                    f"ExtendVersion must be an integer, got {extend!r}"
                ) from err
            if extend_version <= 0:
                extend_version = None

        release_pattern = _text(data.get("ReleasePattern"))
        if release_pattern is not None:
            try:
                compiled = re.compile(release_pattern)
            except re.error as err:
                raise ConfigError(
                    f"ReleasePattern is not a valid regex: {release_pattern!r}: {err}"
                ) from err
            if compiled.groups < 1:
                raise ConfigError(
                    f"ReleasePattern needs a capture group: {release_pattern!r}"
                )

        raw_skip = data.get("SkipVersions") or ()
        if isinstance(raw_skip, str):
            raw_skip = [raw_skip]
        skip_versions = tuple(s for s in (_text(v) for v in raw_skip) if s)
        for entry in skip_versions:
            if is_pattern(entry):
                try:
                    re.compile(entry)
                except re.error as err:
                    raise ConfigError(
                        f"SkipVersions entry is not a valid regex: {entry!r}: {err}"
                    ) from err

        return cls(
            letter_releases=_flag(data.get("LetterReleases")),
            string_releases=_flag(data.get("StringReleases")),
            extend_version=extend_version,
            release_pattern=release_pattern,
            skip_versions=skip_versions,
            skip_odd=_flag(data.get("SkipOdd")),
            minimal_version=_text(data.get("MinimalVersion")),
            latest_micro=_flag(data.get("LatestMicro")),
            latest_nano=_flag(data.get("LatestNano")),
            keep_old_beta=_flag(data.get("KeepOldBeta")),
        )


DEFAULT_PROFILE = ComparisonProfile()
