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

"""Public API return types for relseq.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Using result types:
        ```python
        from pathlib import Path
        from relseq.core import plan_builds
        from relseq.results import PlanResult

        result: PlanResult = plan_builds(
            Path("profiles/zlib.yaml"), Path("state/versions.json")
        )
        print(result.versions)  # Attribute access, not dict access
        ```

Note:
    Only public API return types belong in this module. Domain types
    (like ComparisonProfile or PackageLink) stay with their related logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class ScanResult:
    """Result from scanning a library's local source directory.

    Attributes:
        library: Library name.
        source_dir: Directory that was scanned.
        found: Every version with an archive in source_dir, oldest first.
        added: Versions newly recorded in state, oldest first.
        skipped: Versions declined, mapped to the reason (e.g., "unknown",
            "skipped", "stale-prerelease", "old-micro").
        status: Always "success" for a completed scan.
    """

    library: str
    source_dir: Path
    found: list[str]
    added: list[str]
    skipped: dict[str, str]
    status: str


@dataclass(frozen=True)
class PlanResult:
    """Result from planning which versions to build.

    Attributes:
        library: Library name.
        versions: Versions to build, newest first.
        sources: Archive path of each planned version.
        status: "success" if there is something to build, "empty" otherwise.
    """

    library: str
    versions: list[str]
    sources: dict[str, Path] = field(default_factory=dict)
    status: str = "success"


@dataclass(frozen=True)
class TimelineEntry:
    """One installed version in a library timeline.

    Attributes:
        version: Version string.
        release_type: Classification of the version (e.g., "release").
        installed: Install directory, if known.
        source: Source archive, if known.
        deleted: True if the version is superseded and hidden from reports.
    """

    version: str
    release_type: str
    installed: Path | None
    source: Path | None
    deleted: bool


@dataclass(frozen=True)
class FetchResult:
    """Result from crawling a library's SourceUrl and downloading archives.

    Attributes:
        library: Library name.
        source_url: Index page the crawl started from.
        found: Every usable version linked from the crawled pages, oldest
            first.
        added: Versions downloaded (or already on disk) and recorded in
            state, oldest first.
        skipped: Versions not downloaded, mapped to the policy reason
            ("stale-prerelease", "old-micro", "old-nano").
        failed: Versions whose download failed, mapped to the error.
        status: "success" if nothing failed, "partial" otherwise.
    """

    library: str
    source_url: str
    found: list[str]
    added: list[str]
    skipped: dict[str, str] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)
    status: str = "success"


@dataclass(frozen=True)
class InstallResult:
    """Result from recording an installed build.

    Attributes:
        library: Library name.
        version: Installed version.
        install_dir: Absolute install directory as stored in state.
        source: Source archive the build came from.
        replaced: True if the version was already recorded as installed.
        status: Always "success" for a recorded install.
    """

    library: str
    version: str
    install_dir: Path
    source: Path
    replaced: bool = False
    status: str = "success"
