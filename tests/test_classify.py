"""
Tests for relseq.versioning.classify, .filters and .profile.

Tests release-type classification including:
- Plain numeric and revision-suffixed releases
- Word table lookups (rc, beta, alpha, ...)
- Unknown and conflicting words
- LetterReleases and ReleasePattern profiles
- skip_version (SkipVersions, SkipOdd, MinimalVersion)
- ComparisonProfile.from_mapping validation
"""

from __future__ import annotations

import pytest

from relseq.exceptions import ConfigError
from relseq.versioning import (
    ComparisonProfile,
    ReleaseType,
    classify,
    release_identifier,
)
from relseq.versioning.filters import skip_version
from relseq.versioning.profile import is_pattern


class TestClassifyDefaults:
    """Tests for classify() with the default profile."""

    def test_numeric_versions_are_releases(self):
        """Test that versions without letters are releases."""
        assert classify("1.2.3") is ReleaseType.RELEASE
        assert classify("20140410") is ReleaseType.RELEASE
        assert classify("1_2_3") is ReleaseType.RELEASE

    def test_revision_suffix_is_release(self):
        """Test that -rN and .vN suffixes count as releases."""
        assert classify("1.4.2-r3") is ReleaseType.RELEASE
        assert classify("1.4.2_r3") is ReleaseType.RELEASE
        assert classify("1.2.v20") is ReleaseType.RELEASE

    def test_release_candidate(self):
        """Test rc and cr words."""
        assert classify("2.0-rc1") is ReleaseType.RELEASE_CANDIDATE
        assert classify("2.0RC2") is ReleaseType.RELEASE_CANDIDATE
        assert classify("2.0-cr1") is ReleaseType.RELEASE_CANDIDATE

    def test_beta_and_alpha(self):
        """Test beta and alpha spellings."""
        assert classify("1.0-beta2") is ReleaseType.BETA
        assert classify("1.0b2") is ReleaseType.BETA
        assert classify("1.0-alpha") is ReleaseType.ALFA
        assert classify("1.0a1") is ReleaseType.ALFA
        assert classify("1.0-alfa3") is ReleaseType.ALFA

    def test_other_unstable_types(self):
        """Test devel, snapshot, pre-release and preview words."""
        assert classify("2.0-dev") is ReleaseType.DEVEL
        assert classify("2.0-exp1") is ReleaseType.DEVEL
        assert classify("snapshot-20200101") is ReleaseType.SNAPSHOT
        assert classify("1.0-pre1") is ReleaseType.PRE_RELEASE
        assert classify("3.1-tp") is ReleaseType.TECHNOLOGY_PREVIEW
        assert classify("3.1-preview2") is ReleaseType.TECHNOLOGY_PREVIEW

    def test_final_and_release_words(self):
        """Test words that mark a stable release."""
        assert classify("1.0-final") is ReleaseType.RELEASE
        assert classify("1.0-rel2") is ReleaseType.RELEASE
        assert classify("1.0-release3") is ReleaseType.RELEASE

    def test_release_word_needs_following_digit(self):
        """Test that r/rel/release without a digit is not understood."""
        assert classify("1.0-rel") is ReleaseType.UNKNOWN
        assert classify("1.0-release") is ReleaseType.UNKNOWN

    def test_current(self):
        """Test the repository tip marker."""
        assert classify("current") is ReleaseType.CURRENT

    def test_unknown_word(self):
        """Test that an unrecognized word makes the version unknown."""
        assert classify("1.0-foobar") is ReleaseType.UNKNOWN
        assert classify("0.9.8k") is ReleaseType.UNKNOWN

    def test_conflicting_words(self):
        """Test that words of different types make the version unknown."""
        assert classify("1.0-alpha-rc") is ReleaseType.UNKNOWN
        assert classify("2.0-beta-dev") is ReleaseType.UNKNOWN

    def test_repeated_words_of_one_type(self):
        """Test that several words of the same type agree."""
        assert classify("1.0-b-beta") is ReleaseType.BETA

    def test_classification_is_stable(self):
        """Test that classifying twice gives the same answer."""
        for v in ["1.2.3", "2.0-rc1", "1.0-foobar", "current", ""]:
            assert classify(v) is classify(v)

    def test_release_type_values(self):
        """Test that enum values match the profile vocabulary."""
        assert str(ReleaseType.RELEASE_CANDIDATE) == "release-candidate"
        assert ReleaseType("technology-preview") is ReleaseType.TECHNOLOGY_PREVIEW


class TestClassifyProfiles:
    """Tests for classify() with profile options."""

    def test_letter_releases(self):
        """Test OpenSSL-style letter suffixes."""
        profile = ComparisonProfile(letter_releases=True)

        assert classify("0.9.8k", profile) is ReleaseType.RELEASE
        assert classify("1.0.2", profile) is ReleaseType.RELEASE

    def test_letter_releases_excludes_beta(self):
        """Test that beta is still a beta under LetterReleases."""
        profile = ComparisonProfile(letter_releases=True)

        assert classify("1.0.0beta", profile) is ReleaseType.BETA
        assert classify("1.0.0-beta2", profile) is ReleaseType.BETA

    def test_release_pattern(self):
        """Test that a ReleasePattern match is a release."""
        profile = ComparisonProfile(release_pattern=r"\A(\d+\.\d+)-stable\Z")

        assert classify("4.2-stable", profile) is ReleaseType.RELEASE
        assert classify("4.2-nightly", profile) is ReleaseType.UNKNOWN

    def test_release_identifier(self):
        """Test extraction of the canonical release id."""
        profile = ComparisonProfile(release_pattern=r"\A(\d+\.\d+)-stable\Z")

        assert release_identifier("4.2-stable", profile) == "4.2"
        assert release_identifier("4.2-nightly", profile) is None
        assert release_identifier("4.2-stable") is None


class TestSkipVersion:
    """Tests for skip_version()."""

    def test_no_options_skips_nothing(self):
        """Test that the default profile keeps every version."""
        assert not skip_version("1.3.0")
        assert not skip_version("anything")

    def test_literal_entries(self):
        """Test that literal entries match exactly."""
        profile = ComparisonProfile(skip_versions=("1.2.0.1",))

        assert skip_version("1.2.0.1", profile)
        assert not skip_version("1.2.0.10", profile)
        assert not skip_version("1x2x0x1", profile)

    def test_pattern_entries(self):
        """Test that pattern entries must match the whole version."""
        profile = ComparisonProfile(skip_versions=(r"1\.5\..*",))

        assert skip_version("1.5.3", profile)
        assert not skip_version("11.5.3", profile)

    def test_skip_odd(self):
        """Test that odd second segments are skipped."""
        profile = ComparisonProfile(skip_odd=True)

        assert skip_version("1.3.0", profile)
        assert skip_version("2.11rc1", profile)
        assert not skip_version("1.4.0", profile)
        assert not skip_version("1", profile)
        assert not skip_version("1.x", profile)

    def test_minimal_version(self):
        """Test that versions below MinimalVersion are skipped."""
        profile = ComparisonProfile(minimal_version="1.2.0")

        assert skip_version("1.1.9", profile)
        assert not skip_version("1.2.0", profile)
        assert not skip_version("1.2", profile)
        assert not skip_version("2.0", profile)


class TestComparisonProfile:
    """Tests for ComparisonProfile.from_mapping()."""

    def test_defaults(self):
        """Test that an empty mapping gives the default profile."""
        profile = ComparisonProfile.from_mapping({})

        assert profile == ComparisonProfile()

    def test_on_off_flags(self):
        """Test that flags accept On/Off and booleans."""
        profile = ComparisonProfile.from_mapping(
            {
                "LetterReleases": "On",
                "SkipOdd": True,
                "LatestMicro": 1,
                "KeepOldBeta": "Off",
            }
        )

        assert profile.letter_releases is True
        assert profile.skip_odd is True
        assert profile.latest_micro is True
        assert profile.keep_old_beta is False
        assert profile.string_releases is False

    def test_unknown_keys_ignored(self):
        """Test that unrelated profile keys do not matter."""
        profile = ComparisonProfile.from_mapping({"Name": "zlib", "Git": "x"})

        assert profile == ComparisonProfile()

    def test_skip_versions_string(self):
        """Test that a single SkipVersions string becomes a tuple."""
        profile = ComparisonProfile.from_mapping({"SkipVersions": "1.0"})

        assert profile.skip_versions == ("1.0",)

    def test_extend_version(self):
        """Test ExtendVersion parsing."""
        assert ComparisonProfile.from_mapping({"ExtendVersion": "8"}).extend_version == 8
        assert ComparisonProfile.from_mapping({"ExtendVersion": 0}).extend_version is None

    def test_extend_version_must_be_integer(self):
        """Test that a non-integer ExtendVersion raises ConfigError."""
        with pytest.raises(ConfigError, match="ExtendVersion"):
            ComparisonProfile.from_mapping({"ExtendVersion": "eight"})
        with pytest.raises(ConfigError, match="ExtendVersion"):
            ComparisonProfile.from_mapping({"ExtendVersion": True})

    def test_release_pattern_must_compile(self):
        """Test that a broken ReleasePattern raises ConfigError."""
        with pytest.raises(ConfigError, match="ReleasePattern"):
            ComparisonProfile.from_mapping({"ReleasePattern": "(unclosed"})

    def test_release_pattern_needs_group(self):
        """Test that a ReleasePattern without a group raises ConfigError."""
        with pytest.raises(ConfigError, match="capture group"):
            ComparisonProfile.from_mapping({"ReleasePattern": r"\d+-stable"})

    def test_skip_versions_pattern_must_compile(self):
        """Test that a broken SkipVersions pattern raises ConfigError."""
        with pytest.raises(ConfigError, match="SkipVersions"):
            ComparisonProfile.from_mapping({"SkipVersions": ["1.0[", "2.0"]})

    def test_is_pattern(self):
        """Test literal/pattern detection of SkipVersions entries."""
        assert is_pattern(r"1\.5\..*")
        assert is_pattern("1.(2|3)")
        assert not is_pattern("1.2.0.1")
        assert not is_pattern("1.0-rc1")
