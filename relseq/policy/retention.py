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

"""Timeline retention: version ordering and "deleted" marks.

The timeline lists a library's installed versions. Two profile-driven
adjustments apply before it is shown:

1. A manually edited order (profile key "Versions") is preserved; versions
   that are not in it yet are slotted in by comparison.
2. Superseded versions are marked deleted: pre-releases once a newer
   release or pre-release exists (unless KeepOldBeta), and all but the
   newest release of each X.Y series (LatestMicro) or X.Y.Z series
   (LatestNano). An explicit per-version override always wins.

Example:
    ```python
    from relseq.policy.retention import deleted_versions

    deleted_versions(["1.0", "1.1-rc1", "1.1"])
    # {'1.1-rc1'}
    ```
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from relseq.policy.updates import major
from relseq.versioning import ComparisonProfile, ReleaseType, classify, compare
from relseq.versioning.compare import CURRENT


def merge_version_order(
    existing: Sequence[str],
    versions: Sequence[str],
    profile: ComparisonProfile | None = None,
) -> list[str]:
    """Merge versions into a previously saved order.

    Args:
        existing: Saved order, oldest first. Entries not in versions are
            dropped.
        versions: Current versions, oldest first (e.g., a natural sequence).
        profile: Comparison options.

    Returns:
        The saved order with every other version inserted before the first
        saved entry it is older than; versions newer than all saved entries
        go at the end, in their original order.

    """
    present = set(versions)
    saved = [v for v in existing if v in present]
    if not saved:
        return list(versions)

    added = set(saved)
    merged: list[str] = []
    for anchor in saved:
        for version in versions:
            if version not in added and compare(version, anchor, profile) < 0:
                merged.append(version)
                added.add(version)
        merged.append(anchor)

    merged.extend(v for v in versions if v not in added)
    return merged


def _mark_stale_unstable(
    ordered: Sequence[str], profile: ComparisonProfile | None, marked: set[str]
) -> None:
    newer_seen = False
    for version in reversed(ordered):
        if version == CURRENT:
            continue
        if classify(version, profile) is ReleaseType.RELEASE:
            newer_seen = True
            continue
        if newer_seen:
            marked.add(version)
        newer_seen = True


def _mark_old_series(ordered: Sequence[str], level: int, marked: set[str]) -> None:
    newest: set[str] = set()
    for version in reversed(ordered):
        if version == CURRENT:
            continue
        series = major(version, level)
        if series in newest:
            marked.add(version)
        else:
            newest.add(series)


def deleted_versions(
    versions: Sequence[str],
    profile: ComparisonProfile | None = None,
    overrides: Mapping[str, bool] | None = None,
) -> set[str]:
    """Return the versions of a timeline that should be marked deleted.

    Args:
        versions: Timeline versions, oldest first.
        profile: Comparison options (KeepOldBeta, LatestMicro, LatestNano).
        overrides: Explicit per-version deleted flags. An override of False
            keeps a version that would otherwise be deleted, True deletes it.

    Returns:
        The deleted versions. "current" is only ever deleted by override.

    """
    profile = profile or ComparisonProfile()
    overrides = overrides or {}
    marked: set[str] = set()

    if not profile.keep_old_beta:
        _mark_stale_unstable(versions, profile, marked)
    if profile.latest_micro:
        _mark_old_series(versions, 2, marked)
    if profile.latest_nano:
        _mark_old_series(versions, 3, marked)

    return {v for v in versions if overrides.get(v, v in marked)}
