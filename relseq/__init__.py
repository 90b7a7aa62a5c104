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

"""
relseq: release sequencing for upstream C/C++ libraries.

relseq classifies raw upstream version strings by stability, orders them,
and reduces them to the "natural sequence" of versions worth building and
comparing: every stable release plus the newest pre-release while it is
still ahead. Around that core it tracks a library's source archives and
installed builds between runs.

Features
--------
  - Release-type classification (release, rc, beta, alpha, devel, ...)
  - Version comparison over raw strings, tolerant of any upstream scheme
  - Per-library comparison options (LetterReleases, SkipOdd, ...)
  - Archive name parsing (zlib-1.2.13.tar.gz -> 1.2.13)
  - Release index crawling and archive downloads
  - Local source scanning with a JSON state file
  - Build planning and version timelines with retention marks

Quick Start
-----------
Order some versions:

    $ relseq sequence 1.0 1.1 2.0-rc1 2.0-rc2

Validate a library profile:

    $ relseq validate profiles/zlib.yaml

For full CLI documentation:

    $ relseq --help

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    High-level orchestration functions.
config : package
    Library profile loading and merging.
versioning : package
    Classification, comparison and the natural sequence.
discovery : package
    Upstream download page crawling.
io : package
    Archive downloads and local source directory scanning.
policy : package
    Acquisition and retention policies.
state : package
    Persistent record of sources and installed builds.

Public API
----------
    from relseq.versioning import classify, compare, natural_sequence
    from relseq.config import load_profile
    from relseq.core import discover_remote, discover_local, plan_builds
    from relseq.validation import validate_profile
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "relseq - classify, order and track upstream library versions"

# Re-export commonly used functions for convenience
from relseq.config import load_profile
from relseq.core import (
    discover_local,
    discover_remote,
    plan_builds,
    record_install,
    version_timeline,
)
from relseq.validation import validate_profile
from relseq.versioning import ReleaseType, classify, compare, natural_sequence

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "ReleaseType",
    "classify",
    "compare",
    "discover_local",
    "discover_remote",
    "load_profile",
    "natural_sequence",
    "plan_builds",
    "record_install",
    "validate_profile",
    "version_timeline",
]
