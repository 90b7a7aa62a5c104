"""
Version classification and ordering for relseq.

This package is the pure core of relseq: it takes raw upstream version
strings ("1.2.3", "0.9.8k", "2.0-rc1", "v3.4_beta2") and answers two
questions about them. Is this version usable, and how does it order against
the others? Nothing here touches the network, the filesystem, or the logger.

Modules
-------
profile : module
    ComparisonProfile, the per-library options bag.
classify : module
    Release-type classification and ReleasePattern ids.
compare : module
    Segment and token based comparison of raw version strings.
filters : module
    Profile-driven skipping (SkipVersions, SkipOdd, MinimalVersion).
sequence : module
    The natural sequence (all releases plus one trailing pre-release).
packages : module
    Versions from archive file names and download links.

Public API
----------
ComparisonProfile : dataclass
    Per-library comparison options, built with from_mapping().
ReleaseType : enum
    Stability tier of a version (release, beta, ..., unknown).
classify : function
    Classify a version into a ReleaseType.
skip_version : function
    True if the profile excludes a version.
release_identifier : function
    Canonical version captured by the profile's ReleasePattern.
compare : function
    Compare two versions, returning -1, 0, or 1.
version_key : function
    Sort key wrapping compare().
sort_versions : function
    Deterministic oldest-first sort.
natural_sequence : function
    Ordered list of versions worth tracking.

Examples
--------
    >>> from relseq.versioning import classify, compare, natural_sequence
    >>> classify("2.0-rc1")
    <ReleaseType.RELEASE_CANDIDATE: 'release-candidate'>
    >>> compare("1.2.10", "1.2.9")
    1
    >>> natural_sequence(["1.0", "1.1", "2.0-rc1", "2.0-rc2"])
    ['1.0', '1.1', '2.0-rc2']

Notes
-----
- Malformed versions never raise; at worst they classify as UNKNOWN and
  drop out of every sequence.
- All functions are pure and safe to call from any thread.
"""

from .classify import ReleaseType, classify, release_identifier
from .compare import compare, sort_versions, version_key
from .filters import skip_version
from .profile import ComparisonProfile
from .sequence import natural_sequence

__all__ = [
    "ComparisonProfile",
    "ReleaseType",
    "classify",
    "compare",
    "natural_sequence",
    "release_identifier",
    "skip_version",
    "sort_versions",
    "version_key",
]
