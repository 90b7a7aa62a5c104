"""
Tests for relseq.versioning.packages and relseq.io.scan modules.

Tests archive name parsing including:
- Plain archive names, paths and download links
- GitHub-style archive links
- Name cleanup (leading "v", "-src" suffix)
- Filtering and de-duplication in collect_packages
- Local source directory scanning
"""

from __future__ import annotations

import pytest

from relseq.exceptions import ConfigError
from relseq.io import scan_source_dir
from relseq.versioning import ComparisonProfile
from relseq.versioning.packages import collect_packages, parse_package_name


class TestParsePackageName:
    """Tests for parse_package_name()."""

    def test_download_link(self):
        """Test a plain download link."""
        link = parse_package_name("https://zlib.net/zlib-1.2.13.tar.gz", "zlib")

        assert link is not None
        assert link.version == "1.2.13"
        assert link.filename == "zlib-1.2.13.tar.gz"
        assert link.extension == "tar.gz"
        assert link.url == "https://zlib.net/zlib-1.2.13.tar.gz"

    def test_bare_file_name_with_underscore(self):
        """Test a bare name using an underscore separator."""
        link = parse_package_name("libpng_1.6.40.tar.xz", "libpng")

        assert link is not None
        assert link.version == "1.6.40"
        assert link.extension == "tar.xz"

    def test_case_insensitive_package(self):
        """Test that the package name matches without case."""
        link = parse_package_name("ZLIB-1.0.zip", "zlib")

        assert link is not None
        assert link.version == "1.0"

    def test_query_string(self):
        """Test a link with a query string."""
        link = parse_package_name("https://x.org/zlib-1.0.tar.bz2?download", "zlib")

        assert link is not None
        assert link.version == "1.0"
        assert link.extension == "tar.bz2"

    def test_github_archive_link(self):
        """Test GitHub-style archive links."""
        link = parse_package_name(
            "https://github.com/x/y/archive/v2.1.0.tar.gz", "y"
        )

        assert link is not None
        assert link.version == "2.1.0"
        assert link.filename == "y-2.1.0.tar.gz"

    def test_leading_v_and_source_suffix(self):
        """Test name cleanup."""
        assert parse_package_name("foo-v1.1.tar.gz", "foo").version == "1.1"
        assert parse_package_name("foo-1.0-src.tar.gz", "foo").version == "1.0"
        assert parse_package_name("foo-1.0-sources.zip", "foo").version == "1.0"

    def test_directory_link_ignored(self):
        """Test that links ending with a slash are ignored."""
        assert parse_package_name("https://zlib.net/zlib-1.2.13.tar.gz/", "zlib") is None

    def test_other_package_ignored(self):
        """Test that archives of other packages do not match."""
        assert parse_package_name("libpng-1.6.40.tar.gz", "zlib") is None

    def test_non_archive_ignored(self):
        """Test that signatures and other files do not match."""
        assert parse_package_name("zlib-1.2.13.tar.gz.asc", "zlib") is None
        assert parse_package_name("zlib-1.2.13.txt", "zlib") is None


class TestCollectPackages:
    """Tests for collect_packages()."""

    def test_prefers_non_zip_archive(self):
        """Test that a tarball wins over a zip of the same version."""
        found = collect_packages(
            [
                "https://x.org/zlib-1.2.13.tar.gz",
                "https://x.org/zlib-1.2.13.zip",
                "https://x.org/zlib-1.2.12.zip",
            ],
            "zlib",
        )

        assert set(found) == {"1.2.13", "1.2.12"}
        assert found["1.2.13"].extension == "tar.gz"
        assert found["1.2.12"].extension == "zip"

    def test_first_non_zip_archive_wins(self):
        """Test that links are visited in reverse order."""
        found = collect_packages(["zlib-1.0.tar.gz", "zlib-1.0.tar.xz"], "zlib")

        assert found["1.0"].extension == "tar.xz"

    def test_drops_platform_builds_and_unknown(self):
        """Test that binaries, snapshots and unknown versions are dropped."""
        found = collect_packages(
            [
                "foo-1.0.tar.gz",
                "foo-1.0-mingw.zip",
                "foo-1.1-msvc.zip",
                "foo-snapshot.tar.gz",
                "foo-1.2-weird.tar.gz",
            ],
            "foo",
        )

        assert list(found) == ["1.0"]

    def test_applies_skip_options(self):
        """Test that profile skip options filter versions."""
        profile = ComparisonProfile(skip_odd=True)

        found = collect_packages(["foo-1.2.0.tar.gz", "foo-1.3.0.tar.gz"], "foo", profile)

        assert list(found) == ["1.2.0"]

    def test_release_pattern_substitution(self):
        """Test that canonical release ids become the keys."""
        profile = ComparisonProfile(release_pattern=r"\A(\d+\.\d+)-stable\Z")

        found = collect_packages(["lib-4.2-stable.tar.gz"], "lib", profile)

        assert list(found) == ["4.2"]
        assert found["4.2"].version == "4.2"
        assert found["4.2"].filename == "lib-4.2-stable.tar.gz"


class TestScanSourceDir:
    """Tests for scan_source_dir()."""

    def test_finds_archives_recursively(self, create_archives):
        """Test walking nested directories."""
        mirror = create_archives(
            "mirror",
            ["zlib-1.2.13.tar.gz", "old/zlib-1.2.12.tar.gz", "README", "notes.txt"],
        )

        found = scan_source_dir(mirror, "zlib")

        assert set(found) == {"1.2.13", "1.2.12"}
        assert found["1.2.12"] == mirror / "old" / "zlib-1.2.12.tar.gz"

    def test_greatest_path_wins(self, create_archives):
        """Test the tie-break between archives of the same version."""
        mirror = create_archives("mirror", ["zlib-1.2.13.tar.gz", "zlib-1.2.13.zip"])

        found = scan_source_dir(mirror, "zlib")

        assert found["1.2.13"].name == "zlib-1.2.13.zip"

    def test_empty_directory(self, tmp_test_dir):
        """Test that an empty directory gives no versions."""
        assert scan_source_dir(tmp_test_dir, "zlib") == {}

    def test_missing_directory_raises(self, tmp_test_dir):
        """Test that a missing directory raises ConfigError."""
        with pytest.raises(ConfigError, match="source directory"):
            scan_source_dir(tmp_test_dir / "nope", "zlib")
