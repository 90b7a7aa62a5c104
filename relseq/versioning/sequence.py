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

"""Natural sequence: the versions of a library worth tracking.

The natural sequence is every stable release, plus the newest pre-release
only while it is ahead of the newest release, plus "current" (the repository
tip) when it is known. Unknown and skipped versions never appear.

Example:
    ```python
    from relseq.versioning import natural_sequence

    natural_sequence({"1.0", "1.1", "2.0-rc1", "2.0-rc2", "current"})
    # ['1.0', '1.1', '2.0-rc2', 'current']

    natural_sequence({"1.0", "1.1", "0.9-beta1"})
    # ['1.0', '1.1']
    ```
"""

from __future__ import annotations

from collections.abc import Iterable

from relseq.versioning.classify import ReleaseType, classify
from relseq.versioning.compare import CURRENT, compare, sort_versions
from relseq.versioning.filters import skip_version
from relseq.versioning.profile import ComparisonProfile


def natural_sequence(
    versions: Iterable[str], profile: ComparisonProfile | None = None
) -> list[str]:
    """Reduce a set of versions to the ordered natural sequence.

    Args:
        versions: Known version strings, in any order. Duplicates are ignored.
        profile: Comparison options.

    Returns:
        Versions oldest first: all releases, then at most one newer
        pre-release (rc, beta, alpha, devel, snapshot, pre-release; a
        technology preview only if there is no other pre-release), then
        "current" if it was given.

    """
    candidates = set(versions)
    has_current = CURRENT in candidates
    candidates.discard(CURRENT)

    releases: list[str] = []
    previews: list[str] = []
    unstables: list[str] = []

    for version in candidates:
        release_type = classify(version, profile)
        if release_type is ReleaseType.UNKNOWN:
            continue
        if skip_version(version, profile):
            continue
        if release_type is ReleaseType.RELEASE:
            releases.append(version)
        elif release_type is ReleaseType.TECHNOLOGY_PREVIEW:
            previews.append(version)
        else:
            unstables.append(version)

    releases = sort_versions(releases, profile)
    previews = sort_versions(previews, profile)
    unstables = sort_versions(unstables, profile)

    last_release = releases[-1] if releases else None
    candidate = unstables[-1] if unstables else None
    if candidate is None and previews:
        candidate = previews[-1]

    sequence = list(releases)
    if candidate is not None and (
        last_release is None or compare(candidate, last_release, profile) > 0
    ):
        sequence.append(candidate)

    if has_current:
        sequence.append(CURRENT)
    return sequence
