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

"""Ordering of raw version strings.

compare() works directly on the text of two versions; there is no parsed
intermediate form. Versions are walked one dot-segment at a time and each
pair of segments is compared token by token, where a token is a maximal run
of digits, of ASCII letters, or of anything else.

Boundary values:
  - "" sorts below everything.
  - "current" (the unreleased repository tip) sorts above everything.

Profile switches (checked in this order, first one wins):
  - LetterReleases: of two versions with the same release type, a version
    that extends the other ("0.9.8k" vs "0.9.8") is newer.
  - StringReleases: plain string comparison.
  - ExtendVersion: both versions are right-padded with "0" first.

Token rules inside a segment:
  - letters vs letters: case-insensitive string order ("alpha" < "beta")
  - digits vs digits: numeric order ("9" < "10")
  - letters vs digits: letters first ("1.0a" < "1.0", "rc1" < "0")
  - punctuation vs punctuation: equal
  - any other pairing: the two segments are considered equal
  - running out of tokens first: older ("rc" < "rc1")

Example:
    ```python
    from relseq.versioning import compare, sort_versions

    compare("1.2.10", "1.2.9")   # 1
    compare("1.2", "1.2.0")      # 0
    compare("2.0rc1", "2.0")     # -1
    sort_versions(["2.0", "1.10", "1.9", "2.0-rc1"])
    # ['1.9', '1.10', '2.0-rc1', '2.0']
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from functools import cmp_to_key
from itertools import zip_longest
import re
from typing import Any

from relseq.versioning.classify import classify
from relseq.versioning.profile import DEFAULT_PROFILE, ComparisonProfile

CURRENT = "current"

DIGITS = "digits"
LETTERS = "letters"
OTHER = "other"

_LEADING_INT = re.compile(r"([0-9]+)\.")
_NUMERIC_DOTTED = re.compile(r"[0-9.]+")
_VERSION_RELEASE = re.compile(r"([0-9]+(?:\.[0-9]+)*)-([0-9]+(?:\.[0-9]+)*)")
_DIGIT_LETTER = re.compile(r"([0-9])([A-Za-z])")
_SEPARATORS = re.compile(r"[_~\-]")
_TOKEN = re.compile(r"[0-9]+|[A-Za-z]+|[^0-9A-Za-z]+")


def _sign(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _cmp_digits(a: str, b: str) -> int:
    # Compare digit strings without int(): very long runs must not raise.
    a, b = a.lstrip("0"), b.lstrip("0")
    if len(a) != len(b):
        return _sign(len(a), len(b))
    return _sign(a, b)


def tokenize(segment: str) -> Iterator[tuple[str, str]]:
    """Yield (kind, text) tokens of a segment, left to right.

    kind is DIGITS, LETTERS or OTHER. Every token is non-empty, so a walk
    over two token streams always terminates.
    """
    for m in _TOKEN.finditer(segment):
        text = m.group(0)
        if text[0].isascii() and text[0].isdigit():
            yield DIGITS, text
        elif text[0].isascii() and text[0].isalpha():
            yield LETTERS, text
        else:
            yield OTHER, text


def _compare_tokens(a: tuple[str, str], b: tuple[str, str]) -> int | None:
    kind_a, text_a = a
    kind_b, text_b = b
    if text_a == text_b:
        return 0
    if kind_a == kind_b == OTHER:
        return 0
    if kind_a == kind_b == LETTERS:
        return _sign(text_a.lower(), text_b.lower())
    if kind_a == kind_b == DIGITS:
        return _cmp_digits(text_a, text_b)
    if kind_a == LETTERS and kind_b == DIGITS:
        return -1
    if kind_a == DIGITS and kind_b == LETTERS:
        return 1
    return None


def compare_segments(a: str, b: str) -> int:
    """Compare two dot-free segments token by token.

    Returns:
        -1, 0 or 1. A token pairing with no rule (punctuation against a
        letter or digit run) makes the segments compare equal.

    """
    if a == b:
        return 0
    for token_a, token_b in zip_longest(tokenize(a), tokenize(b)):
        if token_a is None:
            return -1
        if token_b is None:
            return 1
        result = _compare_tokens(token_a, token_b)
        if result is None:
            return 0
        if result:
            return result
    return 0


def _compare_numeric(a: str, b: str) -> int:
    parts_a = a.split(".")
    parts_b = b.split(".")
    for pa, pb in zip_longest(parts_a, parts_b, fillvalue="0"):
        result = _cmp_digits(pa, pb)
        if result:
            return result
    return 0


def _strip_zeros(segment: str) -> str:
    if segment.isascii() and segment.isdigit():
        return segment.lstrip("0") or "0"
    return segment


def normalize(version: str) -> str:
    """Rewrite a version into plain dot-separated segments.

    "1.2a" becomes "1.2.a", "_", "~" and "-" become ".", leading dots go
    away, and purely numeric segments lose their leading zeros.
    """
    version = _DIGIT_LETTER.sub(r"\1.\2", version)
    version = _SEPARATORS.sub(".", version)
    version = version.lstrip(".")
    return ".".join(_strip_zeros(s) for s in version.split("."))


def _compare_dotted(a: str, b: str) -> int:
    while True:
        if a == b:
            return 0
        if not a:
            return -1
        if not b:
            return 1

        lead_a = _LEADING_INT.match(a)
        lead_b = _LEADING_INT.match(b)
        if lead_a and lead_b:
            result = _cmp_digits(lead_a.group(1), lead_b.group(1))
            if result:
                return result

        if _NUMERIC_DOTTED.fullmatch(a) and _NUMERIC_DOTTED.fullmatch(b):
            return _compare_numeric(a, b)

        a = normalize(a)
        b = normalize(b)

        if "." not in a and "." not in b:
            return compare_segments(a, b)

        # A missing segment reads as "0"; each pass consumes one segment.
        head_a, _, a = (a if "." in a else a + ".0").partition(".")
        head_b, _, b = (b if "." in b else b + ".0").partition(".")

        result = compare_segments(head_a, head_b)
        if result:
            return result


def _compare_generic(a: str, b: str) -> int:
    release_a = _VERSION_RELEASE.fullmatch(a)
    release_b = _VERSION_RELEASE.fullmatch(b)
    if release_a and release_b:
        return _compare_dotted(release_a.group(1), release_b.group(1)) or (
            _compare_dotted(release_a.group(2), release_b.group(2))
        )
    return _compare_dotted(a, b)


def compare(a: str, b: str, profile: ComparisonProfile | None = None) -> int:
    """Compare two raw version strings.

    Args:
        a: First version.
        b: Second version.
        profile: Comparison options; defaults to an empty profile.

    Returns:
        -1 if a is older than b, 0 if they are equivalent, 1 if a is newer.
        Never raises for malformed input.

    """
    profile = profile or DEFAULT_PROFILE

    if a == b:
        return 0
    if a == "":
        return -1
    if b == "":
        return 1
    if a == CURRENT:
        return 1
    if b == CURRENT:
        return -1

    if profile.letter_releases:
        if classify(a, profile) == classify(b, profile):
            if b.startswith(a):
                return -1
            if a.startswith(b):
                return 1
    elif profile.string_releases:
        return _sign(a, b)
    elif profile.extend_version:
        a = a.ljust(profile.extend_version, "0")
        b = b.ljust(profile.extend_version, "0")

    return _compare_generic(a, b)


def version_key(profile: ComparisonProfile | None = None) -> Callable[[str], Any]:
    """Return a sort key implementing compare() under the given profile.

    Example:
        ```python
        sorted(["1.10", "1.9"], key=version_key())  # ['1.9', '1.10']
        ```
    """
    return cmp_to_key(lambda a, b: compare(a, b, profile))


def sort_versions(
    versions: Iterable[str],
    profile: ComparisonProfile | None = None,
    reverse: bool = False,
) -> list[str]:
    """Sort versions oldest first (newest first with reverse=True).

    Versions that compare equal ("1.2" and "1.2.0") keep their plain string
    order, so the result does not depend on the input order.
    """
    return sorted(sorted(versions), key=version_key(profile), reverse=reverse)
