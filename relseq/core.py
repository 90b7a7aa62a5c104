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

"""Core orchestration for relseq.

This module ties the pure versioning core to the outside world: library
profiles on disk, upstream download pages, the local source mirror and the
state file.

Workflow:

- **discover_remote**: crawl the profile's SourceUrl, download new release
  archives into the repository and record them in the state file.
- **discover_local**: scan the profile's SourceDir for release archives and
  record the versions worth keeping in the state file.
- **plan_builds**: from the known sources, pick the versions to build,
  newest first.
- **record_install**: remember the install directory of a built version.
- **version_timeline**: from the installed builds, produce the ordered
  timeline with superseded versions marked deleted.

Design Principles:

- Functions return frozen dataclasses (see relseq.results)
- Error handling uses exceptions; the CLI layer formats them for display
- The versioning core never logs; progress is reported from here

Example:
    Programmatic usage:
        ```python
        from pathlib import Path
        from relseq.core import discover_local, plan_builds

        state = Path("state/versions.json")
        scan = discover_local(Path("profiles/zlib.yaml"), state)
        print(f"New versions: {scan.added}")

        plan = plan_builds(Path("profiles/zlib.yaml"), state, new_only=True)
        print(f"To build: {plan.versions}")
        ```

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
import shutil
from typing import Any

from relseq.config.loader import load_profile
from relseq.discovery import DEFAULT_DEPTH, check_skip_urls, crawl
from relseq.exceptions import ConfigError, NetworkError
from relseq.io.download import download_file
from relseq.io.scan import scan_source_dir
from relseq.logging import get_global_logger
from relseq.policy.retention import deleted_versions, merge_version_order
from relseq.policy.updates import should_download
from relseq.results import (
    FetchResult,
    InstallResult,
    PlanResult,
    ScanResult,
    TimelineEntry,
)
from relseq.state import StateTracker
from relseq.versioning import (
    ReleaseType,
    classify,
    natural_sequence,
    release_identifier,
    skip_version,
    sort_versions,
)
from relseq.versioning.packages import collect_packages

DEFAULT_STATE_FILE = Path("state/versions.json")
DEFAULT_REPO_DIR = Path("src")


def _load_state(state_file: Path) -> StateTracker:
    logger = get_global_logger()
    tracker = StateTracker(state_file)
    tracker.load()
    logger.verbose("STATE", f"Loaded state from {state_file}")
    return tracker


def discover_local(
    profile_path: Path, state_file: Path = DEFAULT_STATE_FILE
) -> ScanResult:
    """Scan a library's source directory and record new versions in state.

    Archives are visited newest first, so an old pre-release is declined once
    a newer release is on record.

    Args:
        profile_path: Path to the library profile. Must define SourceDir.
        state_file: Path to the state file. Created if it doesn't exist.

    Returns:
        ScanResult with the versions found, added, and skipped (with reason).

    Raises:
        ConfigError: On profile errors, a missing SourceDir key, or a
            SourceDir that is not a directory.
        StateError: If the state file is corrupted.

    """
    logger = get_global_logger()

    logger.step(1, 4, "Loading profile...")
    profile = load_profile(profile_path)
    source_dir = profile.source_dir
    if source_dir is None:
        raise ConfigError(f"No 'SourceDir' defined in profile: {profile_path}")

    logger.step(2, 4, "Loading state...")
    tracker = _load_state(state_file)
    tracker.prune_missing(profile.name)
    known = set(tracker.sources(profile.name))

    logger.step(3, 4, "Scanning sources...")
    archives = scan_source_dir(source_dir, profile.package)

    logger.step(4, 4, "Recording new versions...")
    comparison = profile.comparison
    added: list[str] = []
    skipped: dict[str, str] = {}

    for raw in sort_versions(archives, comparison, reverse=True):
        if classify(raw, comparison) is ReleaseType.UNKNOWN:
            logger.verbose("VERSION", f"Unrecognized version: {raw}")
            skipped[raw] = "unknown"
            continue

        version = release_identifier(raw, comparison) or raw
        if skip_version(version, comparison):
            logger.verbose("VERSION", f"Skipped by profile: {version}")
            skipped[version] = "skipped"
            continue

        decision = should_download(version, known, comparison)
        if not decision.download:
            if decision.reason != "known":
                skipped[version] = decision.reason
            continue

        logger.verbose("SCAN", f"New version: {version}")
        tracker.record_source(profile.name, version, archives[raw])
        known.add(version)
        added.append(version)

    tracker.save()
    logger.verbose("STATE", f"Updated state file: {state_file}")
    if not added:
        logger.info("No new packages found")

    return ScanResult(
        library=profile.name,
        source_dir=source_dir,
        found=sort_versions(archives, comparison),
        added=sort_versions(added, comparison),
        skipped=skipped,
        status="success",
    )


def _crawl_depth(config: Mapping[str, Any]) -> int:
    depth = config.get("SourceUrlDepth", DEFAULT_DEPTH)
    if isinstance(depth, bool):
        raise ConfigError(f"SourceUrlDepth must be an integer, got {depth!r}")
    try:
        return int(depth)
    except (TypeError, ValueError) as err:
        raise ConfigError(f"SourceUrlDepth must be an integer, got {depth!r}") from err


def _skip_urls(config: Mapping[str, Any]) -> list[str]:
    skip = config.get("SkipUrl") or []
    if isinstance(skip, str):
        skip = [skip]
    return check_skip_urls(skip)


def discover_remote(
    profile_path: Path,
    state_file: Path = DEFAULT_STATE_FILE,
    repo_dir: Path = DEFAULT_REPO_DIR,
    limit: int | None = None,
) -> FetchResult:
    """Crawl a library's SourceUrl and download new release archives.

    Versions are visited newest first. Each archive is saved as
    repo_dir/<Name>/<version>/<file>. An archive already at that path is
    recorded without downloading it again.

    Args:
        profile_path: Path to the library profile. Must define SourceUrl.
        state_file: Path to the state file. Created if it doesn't exist.
        repo_dir: Root directory for downloaded archives.
        limit: Stop after this many archives were added. Must be positive.

    Returns:
        FetchResult with the versions found, added, skipped and failed.

    Raises:
        ConfigError: On profile errors, a missing SourceUrl, an invalid
            SourceUrlDepth, a SkipUrl pattern that does not compile, or a
            non-positive limit.
        NetworkError: If the SourceUrl page itself cannot be read.
        StateError: If the state file is corrupted.

    """
    logger = get_global_logger()

    if limit is not None and (isinstance(limit, bool) or limit < 1):
        raise ConfigError(f"limit must be a positive integer, got {limit!r}")

    logger.step(1, 4, "Loading profile...")
    profile = load_profile(profile_path)
    source_url = profile.config.get("SourceUrl")
    if not source_url:
        raise ConfigError(f"No 'SourceUrl' defined in profile: {profile_path}")
    source_url = str(source_url)
    depth = _crawl_depth(profile.config)
    skip_urls = _skip_urls(profile.config)
    comparison = profile.comparison

    logger.step(2, 4, "Loading state...")
    tracker = _load_state(state_file)
    tracker.prune_missing(profile.name)
    known = set(tracker.sources(profile.name))

    logger.step(3, 4, "Searching for new packages...")
    links = crawl(
        source_url,
        profile.package,
        depth=depth,
        skip_urls=skip_urls,
        known=known,
        profile=comparison,
    )
    packages = collect_packages(links, profile.package, comparison)

    logger.step(4, 4, "Downloading new packages...")
    added: list[str] = []
    skipped: dict[str, str] = {}
    failed: dict[str, str] = {}

    for version in sort_versions(packages, comparison, reverse=True):
        decision = should_download(version, known, comparison)
        if not decision.download:
            if decision.reason != "known":
                skipped[version] = decision.reason
            continue

        package = packages[version]
        version_dir = repo_dir / profile.name / version
        target = version_dir / package.filename
        if target.is_file():
            logger.verbose("FILE", f"Already present: {target}")
        else:
            logger.info(f"Downloading package '{package.filename}'")
            try:
                target, _ = download_file(
                    package.url, version_dir, filename=package.filename
                )
            except NetworkError as err:
                logger.info(f"Error: {err}")
                failed[version] = str(err)
                shutil.rmtree(version_dir, ignore_errors=True)
                continue

        tracker.record_source(profile.name, version, target.resolve())
        known.add(version)
        added.append(version)
        if limit is not None and len(added) >= limit:
            break

    tracker.save()
    logger.verbose("STATE", f"Updated state file: {state_file}")
    if not added:
        logger.info("No new packages found")

    return FetchResult(
        library=profile.name,
        source_url=source_url,
        found=sort_versions(packages, comparison),
        added=sort_versions(added, comparison),
        skipped=skipped,
        failed=failed,
        status="partial" if failed else "success",
    )


def plan_builds(
    profile_path: Path,
    state_file: Path = DEFAULT_STATE_FILE,
    target_version: str | None = None,
    new_only: bool = False,
    limit: int | None = None,
) -> PlanResult:
    """Choose the versions to build from the known sources.

    Args:
        profile_path: Path to the library profile.
        state_file: Path to the state file.
        target_version: Build only this version.
        new_only: Skip versions that are already installed.
        limit: Maximum number of versions to plan. Must be positive.

    Returns:
        PlanResult with versions newest first. status is "empty" when there
        is nothing to build.

    Raises:
        ConfigError: On profile errors or a non-positive limit.
        StateError: If the state file is corrupted.

    """
    logger = get_global_logger()

    if limit is not None and (isinstance(limit, bool) or limit < 1):
        raise ConfigError(f"limit must be a positive integer, got {limit!r}")

    profile = load_profile(profile_path)
    tracker = _load_state(state_file)
    sources = tracker.sources(profile.name)
    installed = tracker.installed(profile.name)

    planned = list(reversed(natural_sequence(sources, profile.comparison)))
    logger.verbose("PLAN", f"Natural sequence: {', '.join(planned) or '(empty)'}")

    if target_version is not None:
        planned = [v for v in planned if v == target_version]
        if not planned:
            logger.verbose("PLAN", f"Version {target_version} is not buildable")
    if new_only:
        planned = [v for v in planned if v not in installed]
    if limit is not None:
        planned = planned[:limit]
    if not planned:
        logger.info(f"No versions to build for {profile.name}")

    return PlanResult(
        library=profile.name,
        versions=planned,
        sources={v: Path(sources[v]) for v in planned if v in sources},
        status="success" if planned else "empty",
    )


def record_install(
    profile_path: Path,
    version: str,
    install_dir: Path,
    state_file: Path = DEFAULT_STATE_FILE,
) -> InstallResult:
    """Record that a version was built and installed into install_dir.

    The install directory is stored as an absolute path so the state file
    can be used from any working directory. Recording a version again
    replaces its install directory.

    Args:
        profile_path: Path to the library profile.
        version: Version that was built. Must have a known source archive.
        install_dir: Directory the build was installed into. Must exist.
        state_file: Path to the state file.

    Returns:
        InstallResult with the stored install directory and its source.

    Raises:
        ConfigError: On profile errors, an unrecognized version, a version
            without a known source, or a missing install directory.
        StateError: If the state file is corrupted.

    """
    logger = get_global_logger()

    profile = load_profile(profile_path)
    if classify(version, profile.comparison) is ReleaseType.UNKNOWN:
        raise ConfigError(f"Unrecognized version: {version}")

    install_dir = Path(install_dir)
    if not install_dir.is_dir():
        raise ConfigError(f"Install directory does not exist: {install_dir}")
    install_dir = install_dir.resolve()

    tracker = _load_state(state_file)
    sources = tracker.sources(profile.name)
    if version not in sources:
        raise ConfigError(
            f"No source archive recorded for {profile.name} {version}; "
            f"run 'relseq fetch' or 'relseq scan' first"
        )

    replaced = version in tracker.installed(profile.name)
    tracker.record_installed(profile.name, version, install_dir)
    tracker.save()
    logger.verbose("STATE", f"Installed {profile.name} {version}: {install_dir}")

    return InstallResult(
        library=profile.name,
        version=version,
        install_dir=install_dir,
        source=Path(sources[version]),
        replaced=replaced,
    )


def _saved_order(config: Mapping[str, Any]) -> list[str]:
    # Pos 0 is the newest entry of a saved timeline.
    saved = config.get("Versions")
    if not isinstance(saved, dict):
        return []
    positioned = []
    for version, info in saved.items():
        if isinstance(info, dict) and info.get("Pos") is not None:
            try:
                positioned.append((int(info["Pos"]), str(version)))
            except (TypeError, ValueError):
                continue
    return [v for _, v in sorted(positioned, reverse=True)]


def _saved_overrides(config: Mapping[str, Any]) -> dict[str, bool]:
    saved = config.get("Versions")
    if not isinstance(saved, dict):
        return {}
    overrides: dict[str, bool] = {}
    for version, info in saved.items():
        if not isinstance(info, dict) or "Deleted" not in info:
            continue
        flag = info["Deleted"]
        if isinstance(flag, bool):
            overrides[str(version)] = flag
        elif str(flag).strip() in {"0", "1"}:
            overrides[str(version)] = str(flag).strip() == "1"
    return overrides


def version_timeline(
    profile_path: Path,
    state_file: Path = DEFAULT_STATE_FILE,
    existing_order: Sequence[str] = (),
    overrides: Mapping[str, bool] | None = None,
) -> list[TimelineEntry]:
    """Build the timeline of installed versions, newest first.

    When existing_order is empty and overrides is None, both are read from
    the profile's "Versions" mapping ("Pos" and "Deleted" of each entry).

    Args:
        profile_path: Path to the library profile.
        state_file: Path to the state file.
        existing_order: Saved order, oldest first.
        overrides: Explicit deleted flags per version.

    Returns:
        One TimelineEntry per installed version.

    Raises:
        ConfigError: On profile errors.
        StateError: If the state file is corrupted.

    """
    logger = get_global_logger()

    profile = load_profile(profile_path)
    comparison = profile.comparison
    tracker = _load_state(state_file)
    installed = tracker.installed(profile.name)
    sources = tracker.sources(profile.name)

    if not existing_order:
        existing_order = _saved_order(profile.config)
    if overrides is None:
        overrides = _saved_overrides(profile.config)

    ordered = merge_version_order(
        existing_order, natural_sequence(installed, comparison), comparison
    )
    deleted = deleted_versions(ordered, comparison, overrides)
    logger.verbose(
        "POLICY", f"Deleted versions: {', '.join(sorted(deleted)) or '(none)'}"
    )

    return [
        TimelineEntry(
            version=version,
            release_type=str(classify(version, comparison)),
            installed=Path(installed[version]) if version in installed else None,
            source=Path(sources[version]) if version in sources else None,
            deleted=version in deleted,
        )
        for version in reversed(ordered)
    ]
