"""
Version extraction from package archive names for relseq.

Upstream projects publish releases as archives whose names carry the version:
``zlib-1.2.13.tar.gz``, ``libpng_1.6.40.tar.xz``, or GitHub/Bitbucket style
``.../archive/v2.1.0.tar.gz``. This module turns such names (bare file names,
paths, or full download links) into version strings, and filters a batch of
them down to the versions a profile wants tracked.

Functions
---------
parse_package_name : function
    Extract a PackageLink from one link or file name.
collect_packages : function
    Parse many links and keep one usable archive per version.

Recognized Archives
-------------------
tar.bz2, tar.gz, tar.xz, tar.lzma, tar.lz, tar.Z, tbz2, tgz, tar, zip

Name Cleanup
------------
- A leading "v" before a digit is dropped ("v1.1" -> "1.1").
- A trailing "-src", "-source" or "-sources" is dropped.

Examples
--------
    >>> from relseq.versioning.packages import parse_package_name
    >>> parse_package_name("https://zlib.net/zlib-1.2.13.tar.gz", "zlib").version
    '1.2.13'
    >>> parse_package_name("https://github.com/x/y/archive/v2.1.0.tar.gz", "y").filename
    'y-2.1.0.tar.gz'

Notes
-----
- This is pure string processing; no network calls are made and the links
  are never fetched.
- Reading links out of HTML pages is the caller's job.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
import re

from relseq.versioning.classify import ReleaseType, classify, release_identifier
from relseq.versioning.filters import skip_version
from relseq.versioning.profile import ComparisonProfile

PACKAGE_EXTENSIONS: tuple[str, ...] = (
    "tar.bz2",
    "tar.gz",
    "tar.xz",
    "tar.lzma",
    "tar.lz",
    "tar.Z",
    "tbz2",
    "tgz",
    "tar",
    "zip",
)

_EXT_ALTERNATION = "|".join(re.escape(ext) for ext in PACKAGE_EXTENSIONS)

_ARCHIVE_LINK = re.compile(
    r"(archive|get)/v?([0-9.\-_]+([ab][0-9]*|alpha[0-9]*|beta[0-9]*|rc[0-9]*|))"
    r"\.(tar\.gz)",
    re.IGNORECASE,
)
_LEADING_V = re.compile(r"\Av([0-9])", re.IGNORECASE)
_SOURCE_SUFFIX = re.compile(r"[\-_](src|source|sources)\Z", re.IGNORECASE)

# Platform builds and snapshots are never source releases.
_NOT_SOURCE = re.compile(r"mingw|msvc|snapshot", re.IGNORECASE)


@dataclass(frozen=True)
class PackageLink:
    """A package archive found for one version.

    Attributes:
        version: Version string extracted from the name (e.g., "1.2.13").
        url: The link or path the archive was found at.
        filename: Archive file name (e.g., "zlib-1.2.13.tar.gz").
        extension: Archive extension (e.g., "tar.gz").

    """

    version: str
    url: str
    filename: str
    extension: str


def _package_pattern(package: str) -> re.Pattern[str]:
    return re.compile(
        rf"(?:\A|/)({re.escape(package)}[_\-]*([^/\"'<>+%]+?)\.({_EXT_ALTERNATION}))"
        r"(?:[/?]|\Z)",
        re.IGNORECASE,
    )


def parse_package_name(link: str, package: str) -> PackageLink | None:
    """
    Extract the version of a package archive from a link or file name.

    Parameters
    ----------
    link : str
        Download link, filesystem path, or bare archive file name.
    package : str
        Package name the archive must start with (case-insensitive).

    Returns
    -------
    PackageLink or None
        The parsed archive, or None when the link is a directory (ends with
        "/") or does not name an archive of this package.
    """
    if link.endswith("/"):
        return None

    m = _package_pattern(package).search(link)
    if m:
        filename, version, extension = m.group(1), m.group(2), m.group(3)
    else:
        m = _ARCHIVE_LINK.search(link)
        if not m:
            return None
        version, extension = m.group(2), m.group(4)
        filename = f"{package}-{version}.{extension}"

    version = _LEADING_V.sub(r"\1", version)
    version = _SOURCE_SUFFIX.sub("", version)
    if not version:
        return None

    return PackageLink(
        version=version, url=link, filename=filename, extension=extension
    )


def collect_packages(
    links: Iterable[str],
    package: str,
    profile: ComparisonProfile | None = None,
) -> dict[str, PackageLink]:
    """Parse links and keep one trackable archive per version.

    Links are visited in reverse string order. A version is dropped when it
    names a platform build or snapshot, classifies as UNKNOWN, or is skipped
    by the profile. A version captured by the profile's ReleasePattern is
    stored under its canonical id. When several archives share a version, the
    first non-zip archive wins.

    Args:
        links: Download links, paths, or archive file names.
        package: Package name the archives start with.
        profile: Comparison options.

    Returns:
        Mapping of version to the archive chosen for it.

    """
    found: dict[str, PackageLink] = {}

    for link in sorted(set(links), reverse=True):
        parsed = parse_package_name(link, package)
        if parsed is None:
            continue

        version = parsed.version
        if _NOT_SOURCE.search(version):
            continue
        if classify(version, profile) is ReleaseType.UNKNOWN:
            continue

        canonical = release_identifier(version, profile)
        if canonical is not None and canonical != version:
            version = canonical
            parsed = replace(parsed, version=canonical)

        if skip_version(version, profile):
            continue

        existing = found.get(version)
        if existing is not None and (
            existing.extension.lower() != "zip" or parsed.extension.lower() == "zip"
        ):
            continue

        found[version] = parsed

    return found
