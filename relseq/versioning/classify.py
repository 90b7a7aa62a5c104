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

"""Release-type classification of raw version strings.

Upstream projects mark stability in wildly different ways ("2.0-rc1",
"1.0beta2", "3.1-tp", "0.9.8k", "1.4.2-r3"). classify() reduces a version to
one ReleaseType by looking at the alphabetic words it contains. Anything it
cannot read with confidence becomes UNKNOWN, and UNKNOWN versions are never
tracked: a dropped version is cheaper than a mis-ordered one.

Classification order:

1. LetterReleases profiles: "1.0.2k"-shaped versions without "beta" are
   releases.
2. ReleasePattern profiles: a matching version is a release (the first group
   is its canonical id, see release_identifier()).
3. No letters at all, or a revision suffix ("1.2-r3", "1.2.v20"): release.
4. Every word must map through WORD_TYPES, and all words must agree on a
   single type; otherwise the version is UNKNOWN.

Example:
    ```python
    from relseq.versioning import ReleaseType, classify

    classify("1.2.3")        # ReleaseType.RELEASE
    classify("2.0-rc1")      # ReleaseType.RELEASE_CANDIDATE
    classify("1.0-beta2")    # ReleaseType.BETA
    classify("1.0-foobar")   # ReleaseType.UNKNOWN
    classify("1.0-alpha-rc") # ReleaseType.UNKNOWN (conflicting words)
    ```
"""

from __future__ import annotations

from enum import StrEnum
import re

from relseq.versioning.profile import DEFAULT_PROFILE, ComparisonProfile


class ReleaseType(StrEnum):
    """Stability tier of a version. Values match the profile vocabulary."""

    RELEASE = "release"
    RELEASE_CANDIDATE = "release-candidate"
    BETA = "beta"
    ALFA = "alfa"
    DEVEL = "devel"
    SNAPSHOT = "snapshot"
    PRE_RELEASE = "pre-release"
    TECHNOLOGY_PREVIEW = "technology-preview"
    CURRENT = "current"
    UNKNOWN = "unknown"


# Words that only mean "release" when a digit follows them ("r3", "rel2").
_RELEASE_PREFIXES = frozenset({"r", "rel", "release"})

WORD_TYPES: tuple[tuple[frozenset[str], ReleaseType], ...] = (
    (frozenset({"final"}), ReleaseType.RELEASE),
    (_RELEASE_PREFIXES, ReleaseType.RELEASE),
    (frozenset({"devel", "dev", "exp"}), ReleaseType.DEVEL),
    (frozenset({"snapshot", "snap", "master"}), ReleaseType.SNAPSHOT),
    (frozenset({"alfa", "alpha", "a"}), ReleaseType.ALFA),
    (frozenset({"tp", "preview"}), ReleaseType.TECHNOLOGY_PREVIEW),
    (frozenset({"beta", "b"}), ReleaseType.BETA),
    (frozenset({"pre"}), ReleaseType.PRE_RELEASE),
    (frozenset({"rc", "cr"}), ReleaseType.RELEASE_CANDIDATE),
    (frozenset({"current"}), ReleaseType.CURRENT),
)

_LETTER_RELEASE = re.compile(r"[0-9.\-]+[a-z]*")
_REVISION_SUFFIX = re.compile(r"[0-9]+(?:\.[0-9]+)*(?:[-_]r[0-9]+|\.v[0-9]+)")
_HAS_LETTER = re.compile(r"[A-Za-z]")
_WORD = re.compile(r"[A-Za-z]+")


def _word_type(word: str, version: str) -> ReleaseType:
    lowered = word.lower()
    for words, release_type in WORD_TYPES:
        if lowered not in words:
            continue
        if words is _RELEASE_PREFIXES:
            followed_by_digit = re.compile(
                rf"(?<![A-Za-z]){re.escape(word)}(?=[0-9])", re.IGNORECASE
            )
            if not followed_by_digit.search(version):
                continue
        return release_type
    return ReleaseType.UNKNOWN


def classify(
    version: str, profile: ComparisonProfile | None = None
) -> ReleaseType:
    """Classify a raw version string into a ReleaseType.

    Args:
        version: Raw version token (e.g., "2.1.0-rc2").
        profile: Comparison options; defaults to an empty profile.

    Returns:
        The single ReleaseType of the version. UNKNOWN when a word is not
        recognized or the words disagree.

    """
    profile = profile or DEFAULT_PROFILE

    if (
        profile.letter_releases
        and _LETTER_RELEASE.fullmatch(version)
        and "beta" not in version
    ):
        return ReleaseType.RELEASE

    if profile.release_pattern and re.search(profile.release_pattern, version):
        return ReleaseType.RELEASE

    if not _HAS_LETTER.search(version) or _REVISION_SUFFIX.fullmatch(version):
        return ReleaseType.RELEASE

    found: set[ReleaseType] = set()
    for word in sorted(_WORD.findall(version)):
        word_type = _word_type(word, version)
        if word_type is ReleaseType.UNKNOWN:
            return ReleaseType.UNKNOWN
        found.add(word_type)

    if len(found) == 1:
        return found.pop()
    return ReleaseType.UNKNOWN


def release_identifier(
    version: str, profile: ComparisonProfile | None = None
) -> str | None:
    """Return the canonical release id captured by the profile's ReleasePattern.

    Callers that keep a version for later (state keys, build directories)
    must use this value instead of the raw token when it is not None.

    Args:
        version: Raw version token.
        profile: Comparison options.

    Returns:
        The first capture group of ReleasePattern, or None when the profile
        has no pattern, the pattern does not match, or the group is empty.

    Example:
        ```python
        profile = ComparisonProfile(release_pattern=r"\\A(\\d+\\.\\d+)-stable\\Z")
        release_identifier("4.2-stable", profile)  # "4.2"
        ```
    """
    profile = profile or DEFAULT_PROFILE
    if not profile.release_pattern:
        return None
    m = re.search(profile.release_pattern, version)
    if not m:
        return None
    return m.group(1) or None
