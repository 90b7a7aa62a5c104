"""
Tests for relseq.versioning.compare module.

Tests version comparison including:
- Boundary values ("" and "current")
- Numeric segments and implicit zeros
- Mixed letter/digit tokens
- Version-release form (0.12-20140410)
- LetterReleases, StringReleases and ExtendVersion profiles
- Ordering properties over a sample of real-world versions
- Sorting helpers
"""

from __future__ import annotations

from itertools import combinations, permutations

from relseq.versioning import ComparisonProfile, compare, sort_versions, version_key
from relseq.versioning.compare import (
    DIGITS,
    LETTERS,
    OTHER,
    compare_segments,
    normalize,
    tokenize,
)

# Oldest to newest; versions in one group compare equal.
ORDERED_SAMPLE = [
    [""],
    ["0.9"],
    ["1.0a"],
    ["1.0b2"],
    ["1.0-rc1"],
    ["1.0", "1.0.0"],
    ["1.0.1"],
    ["1.2"],
    ["1.2.9"],
    ["1.2.10"],
    ["2.0-beta"],
    ["2.0rc1"],
    ["2.0"],
    ["10.0"],
    ["current"],
]


def _rank(version: str) -> int:
    for idx, group in enumerate(ORDERED_SAMPLE):
        if version in group:
            return idx
    raise KeyError(version)


SAMPLE = [v for group in ORDERED_SAMPLE for v in group]


class TestBoundaries:
    """Tests for the empty string and "current"."""

    def test_empty_string(self):
        """Test that "" sorts below everything."""
        assert compare("", "") == 0
        assert compare("", "1.0") == -1
        assert compare("1.0", "") == 1
        assert compare("", "current") == -1

    def test_current(self):
        """Test that "current" sorts above everything."""
        assert compare("current", "99.99.99") == 1
        assert compare("1.0", "current") == -1
        assert compare("current", "current") == 0

    def test_current_wins_under_any_profile(self):
        """Test that profiles do not change the "current" boundary."""
        profile = ComparisonProfile(string_releases=True)

        assert compare("current", "zzz", profile) == 1


class TestNumericComparison:
    """Tests for purely numeric versions."""

    def test_numeric_segments(self):
        """Test that segments compare as integers."""
        assert compare("1.2.10", "1.2.9") == 1
        assert compare("1.10", "1.9") == 1
        assert compare("10.0", "9.9") == 1

    def test_implicit_zero_segments(self):
        """Test that missing segments count as zero."""
        assert compare("1.2", "1.2.0") == 0
        assert compare("1.2.0", "1.2") == 0
        assert compare("1.2", "1.2.1") == -1
        assert compare("1.2.1", "1.2") == 1

    def test_leading_zeros(self):
        """Test that leading zeros do not change the value."""
        assert compare("1.02", "1.2") == 0
        assert compare("1.000", "1.0") == 0

    def test_very_long_digit_runs(self):
        """Test that huge numeric segments compare without error."""
        big = "9" * 5000
        assert compare(f"1.{big}", f"1.{big}8") == -1
        assert compare(f"{big}.1", f"{big}.0") == 1


class TestMixedTokens:
    """Tests for versions with letters."""

    def test_letter_suffix_is_older(self):
        """Test that a letter suffix sorts before the plain release."""
        assert compare("1.0a", "1.0") == -1
        assert compare("2.0rc1", "2.0") == -1
        assert compare("2.0-rc1", "2.0") == -1

    def test_prerelease_ordering(self):
        """Test alphabetic ordering of pre-release words."""
        assert compare("1.0-alpha", "1.0-beta") == -1
        assert compare("1.0-beta", "1.0-rc") == -1
        assert compare("1.0-rc1", "1.0-rc2") == -1
        assert compare("1.0-rc", "1.0-rc1") == -1

    def test_case_insensitive_letters(self):
        """Test that letter runs compare without case."""
        assert compare("1.0-RC1", "1.0-rc1") == 0

    def test_separators_are_equivalent(self):
        """Test that _ ~ - behave like dots."""
        assert compare("1_2_3", "1.2.3") == 0
        assert compare("1.2~rc1", "1.2-rc1") == 0

    def test_extra_segment_is_newer(self):
        """Test that 2.0.1 follows 2.0."""
        assert compare("2.0", "2.0.1") == -1

    def test_version_release_form(self):
        """Test version-release pairs compare part by part."""
        assert compare("0.12-20140410", "0.12-20140301") == 1
        assert compare("0.12-1", "0.11-5") == 1
        assert compare("1.0-2", "1.0-2") == 0


class TestTokenHelpers:
    """Tests for the segment tokenizer and normalizer."""

    def test_tokenize(self):
        """Test splitting a segment into typed runs."""
        assert list(tokenize("rc10+b")) == [
            (LETTERS, "rc"),
            (DIGITS, "10"),
            (OTHER, "+"),
            (LETTERS, "b"),
        ]
        assert list(tokenize("")) == []

    def test_compare_segments(self):
        """Test the token-by-token segment comparison."""
        assert compare_segments("rc1", "rc2") == -1
        assert compare_segments("rc", "rc1") == -1
        assert compare_segments("a", "1") == -1
        assert compare_segments("1", "a") == 1
        assert compare_segments("+x", "+y") == -1

    def test_unmatched_tokens_compare_equal(self):
        """Test that punctuation against letters or digits is a tie."""
        assert compare_segments("+1", "a") == 0
        assert compare_segments("1", "+") == 0

    def test_normalize(self):
        """Test separator and zero normalization."""
        assert normalize("1.2a") == "1.2.a"
        assert normalize("1_2-3~4") == "1.2.3.4"
        assert normalize(".1.0") == "1.0"
        assert normalize("1.000.07") == "1.0.7"


class TestProfiles:
    """Tests for profile-driven comparison."""

    def test_letter_releases(self):
        """Test that a letter suffix is a newer point release."""
        profile = ComparisonProfile(letter_releases=True)

        assert compare("0.9.8k", "0.9.8", profile) == 1
        assert compare("0.9.8", "0.9.8k", profile) == -1
        assert compare("0.9.8k", "0.9.8l", profile) == -1
        assert compare("1.0.0", "0.9.8zh", profile) == 1

    def test_letter_releases_keeps_beta_older(self):
        """Test that prefixes of a different type fall back to the generic rule."""
        profile = ComparisonProfile(letter_releases=True)

        assert compare("1.0.0-beta1", "1.0.0", profile) == -1

    def test_string_releases(self):
        """Test plain string comparison."""
        profile = ComparisonProfile(string_releases=True)

        assert compare("10", "9", profile) == -1
        assert compare("b", "a", profile) == 1

    def test_extend_version(self):
        """Test right-padding before comparison."""
        profile = ComparisonProfile(extend_version=8)

        assert compare("2014041", "20140409") == -1
        assert compare("2014041", "20140409", profile) == 1
        assert compare("2014041", "20140410", profile) == 0


class TestOrderingProperties:
    """Tests for reflexivity, antisymmetry and transitivity."""

    def test_matches_expected_order(self):
        """Test every pair against the expected ordering."""
        for a in SAMPLE:
            for b in SAMPLE:
                expected = (_rank(a) > _rank(b)) - (_rank(a) < _rank(b))
                assert compare(a, b) == expected, (a, b)

    def test_reflexive(self):
        """Test that every version equals itself."""
        for v in SAMPLE:
            assert compare(v, v) == 0

    def test_antisymmetric(self):
        """Test that swapping the operands flips the sign."""
        for a, b in combinations(SAMPLE, 2):
            assert compare(a, b) == -compare(b, a), (a, b)

    def test_transitive(self):
        """Test transitivity over all triples of the sample."""
        for a, b, c in permutations(SAMPLE, 3):
            if compare(a, b) <= 0 and compare(b, c) <= 0:
                assert compare(a, c) <= 0, (a, b, c)


class TestSorting:
    """Tests for version_key and sort_versions."""

    def test_version_key(self):
        """Test version_key with sorted()."""
        assert sorted(["1.10", "1.9", "1.2"], key=version_key()) == [
            "1.2",
            "1.9",
            "1.10",
        ]

    def test_sort_versions(self):
        """Test oldest-first and newest-first sorting."""
        versions = ["2.0", "1.10", "1.9", "2.0-rc1"]

        assert sort_versions(versions) == ["1.9", "1.10", "2.0-rc1", "2.0"]
        assert sort_versions(versions, reverse=True) == [
            "2.0",
            "2.0-rc1",
            "1.10",
            "1.9",
        ]

    def test_sort_is_deterministic_for_ties(self):
        """Test that equal versions keep string order."""
        assert sort_versions(["1.2.0", "1.2"]) == ["1.2", "1.2.0"]
        assert sort_versions(["1.2", "1.2.0"]) == ["1.2", "1.2.0"]

    def test_sort_with_profile(self):
        """Test sorting with LetterReleases."""
        profile = ComparisonProfile(letter_releases=True)

        assert sort_versions(["0.9.8k", "0.9.8", "0.9.8a"], profile) == [
            "0.9.8",
            "0.9.8a",
            "0.9.8k",
        ]
