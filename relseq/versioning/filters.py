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

"""Profile-driven exclusion of versions.

A profile can rule versions out in three ways: SkipVersions (literals or
regex patterns), SkipOdd (odd second segment, the unstable series of
projects such as GLib) and MinimalVersion.
"""

from __future__ import annotations

import re

from relseq.versioning.compare import compare
from relseq.versioning.profile import DEFAULT_PROFILE, ComparisonProfile, is_pattern


def _second_segment_is_odd(version: str) -> bool:
    parts = version.split(".")
    if len(parts) < 2:
        return False
    m = re.match(r"[0-9]+", parts[1])
    return bool(m) and int(m.group(0)) % 2 == 1


def skip_version(version: str, profile: ComparisonProfile | None = None) -> bool:
    """Decide whether a version is excluded by the profile.

    A version is skipped when it equals a literal SkipVersions entry or fully
    matches a pattern entry, when SkipOdd is set and its second dot-segment
    is odd (1.3.0), or when it compares below MinimalVersion.

    Args:
        version: Raw version token.
        profile: Comparison options.

    Returns:
        True if the version must not be tracked.

    """
    profile = profile or DEFAULT_PROFILE

    for entry in profile.skip_versions:
        if is_pattern(entry):
            if re.fullmatch(entry, version):
                return True
        elif entry == version:
            return True

    if profile.skip_odd and _second_segment_is_odd(version):
        return True

    if profile.minimal_version and compare(
        version, profile.minimal_version, profile
    ) < 0:
        return True

    return False
