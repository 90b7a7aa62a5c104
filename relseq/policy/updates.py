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

"""Acquisition policy for newly seen upstream versions.

Decides whether a version found upstream (or in the local source mirror) is
worth taking, given the versions already known for the library.

A version is declined when:

- it is already known,
- it is a pre-release older than the newest known release,
- LatestMicro is set and a same-X.Y version at least as new is known,
- LatestNano is set and a same-X.Y.Z version at least as new is known.

Example:
    Check a newly found version:

        from relseq.policy.updates import should_download

        decision = should_download("2.0-rc1", {"1.9", "2.0"})
        decision.download  # False
        decision.reason    # "stale-prerelease"

"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass
from typing import Literal

from relseq.logging import get_global_logger
from relseq.versioning import (
    ComparisonProfile,
    ReleaseType,
    classify,
    compare,
    natural_sequence,
)
from relseq.versioning.compare import normalize

Reason = Literal["known", "stale-prerelease", "old-micro", "old-nano", "new"]


@dataclass(frozen=True)
class Decision:
    download: bool
    reason: Reason


def high_release(
    versions: Iterable[str], profile: ComparisonProfile | None = None
) -> str | None:
    """Return the newest stable release among versions, or None."""
    for version in reversed(natural_sequence(versions, profile)):
        if classify(version, profile) is ReleaseType.RELEASE:
            return version
    return None


def major(version: str, level: int) -> str:
    """Return the first level segments of a version ("1.2.3", 2 -> "1.2").

    Separators are normalized first, so "1_2-3" and "1.2.3" share a major.
    """
    return ".".join(normalize(version).split(".")[:level])


def is_old_micro(
    version: str,
    known: Iterable[str],
    level: int,
    profile: ComparisonProfile | None = None,
) -> bool:
    """True if a known version of the same series is at least as new."""
    series = major(version, level)
    for other in sorted(known):
        if major(other, level) == series and compare(other, version, profile) >= 0:
            return True
    return False


def should_download(
    version: str,
    known: Collection[str],
    profile: ComparisonProfile | None = None,
) -> Decision:
    """Decide whether a newly found version should be acquired.

    Args:
        version: The version found upstream.
        known: Versions whose sources are already held.
        profile: Comparison options (LatestMicro, LatestNano are honored).

    Returns:
        Decision with download flag and one of the reasons "known",
        "stale-prerelease", "old-micro", "old-nano" or "new".

    """
    logger = get_global_logger()
    profile = profile or ComparisonProfile()

    if version in known:
        return Decision(False, "known")

    if classify(version, profile) is not ReleaseType.RELEASE:
        newest = high_release(known, profile)
        if newest is not None and compare(version, newest, profile) < 0:
            logger.verbose(
                "POLICY", f"Skipping {version}: older than release {newest}"
            )
            return Decision(False, "stale-prerelease")

    if profile.latest_micro and is_old_micro(version, known, 2, profile):
        logger.verbose("POLICY", f"Skipping {version}: not the latest micro release")
        return Decision(False, "old-micro")

    if profile.latest_nano and is_old_micro(version, known, 3, profile):
        logger.verbose("POLICY", f"Skipping {version}: not the latest nano release")
        return Decision(False, "old-nano")

    return Decision(True, "new")
