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

"""Library profile validation.

Checks a profile without scanning sources or touching the state file. Useful
for quick feedback while writing profiles and in CI pipelines.

Validation Checks:

- The file parses (YAML or JSON) and its top level is a mapping
- Name is present and is a non-empty string
- Comparison options are valid (ExtendVersion, ReleasePattern, SkipVersions)
- Versions, when present, maps version strings to mappings
- SourceUrlDepth is an integer and SkipUrl a string or a list of
  substrings and patterns that compile
- Keys the tool does not know are reported as warnings

Example:
    Validate a profile and handle results:
        ```python
        from pathlib import Path
        from relseq.validation import validate_profile

        result = validate_profile(Path("profiles/zlib.yaml"))
        if result["status"] == "valid":
            print(f"Profile is valid with {result['key_count']} key(s)")
        else:
            for error in result["errors"]:
                print(f"Error: {error}")
        ```

"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from relseq.config.loader import load_effective_config
from relseq.discovery import check_skip_urls
from relseq.exceptions import ConfigError
from relseq.versioning.profile import PROFILE_KEYS, ComparisonProfile

__all__ = ["KNOWN_KEYS", "validate_profile"]

# Keys understood by relseq or by the build tooling that shares the profile.
KNOWN_KEYS: frozenset[str] = frozenset(PROFILE_KEYS) | {
    "Name",
    "Title",
    "Package",
    "SourceUrl",
    "SourceUrlDepth",
    "SourceDir",
    "SkipUrl",
    "Git",
    "Svn",
    "Doc",
    "Maintainer",
    "MaintainerUrl",
    "Changelog",
    "BuildSystem",
    "BuildScript",
    "BuildShared",
    "Configure",
    "CurrentConfigure",
    "PreInstall",
    "CurrentPreInstall",
    "PostInstall",
    "CurrentPostInstall",
    "SkipObjects",
    "SkipHeaders",
    "SkipSymbols",
    "SkipInternalSymbols",
    "SkipTypes",
    "SkipInternalTypes",
    "PkgDiff",
    "HeadersDiff",
    "LocalBuild",
    "Versions",
}


def _result(
    status: str,
    errors: list[str],
    warnings: list[str],
    key_count: int,
    profile_path: Path,
) -> dict[str, Any]:
    return {
        "status": status,
        "errors": errors,
        "warnings": warnings,
        "key_count": key_count,
        "profile_path": str(profile_path),
    }


def validate_profile(profile_path: Path, verbose: bool = False) -> dict[str, Any]:
    """Validate a library profile.

    Organization defaults (defaults/org.yaml) are merged first, exactly as
    they are when the profile is used.

    Args:
        profile_path: Path to the profile file.
        verbose: If True, print validation progress. Default is False.

    Returns:
        A dict (status, errors, warnings, key_count, profile_path), where
            status is "valid" or "invalid" and key_count is the number of
            top-level keys in the merged profile.

    """
    errors: list[str] = []
    warnings: list[str] = []

    if verbose:
        print(f"Validating profile: {profile_path}")

    if not profile_path.exists():
        errors.append(f"Profile file not found: {profile_path}")
        return _result("invalid", errors, warnings, 0, profile_path)

    try:
        config = load_effective_config(profile_path)
    except ConfigError as err:
        errors.append(str(err))
        return _result("invalid", errors, warnings, 0, profile_path)

    if verbose:
        print("  [OK] Profile syntax is valid")

    name = config.get("Name")
    if name is None:
        errors.append("Missing required field: Name")
    elif not isinstance(name, str) or not name.strip():
        errors.append("Field 'Name' must be a non-empty string")
    elif verbose:
        print(f"  [OK] Name: {name}")

    try:
        ComparisonProfile.from_mapping(config)
    except ConfigError as err:
        errors.append(str(err))
    else:
        if verbose:
            print("  [OK] Comparison options are valid")

    versions = config.get("Versions")
    if versions is not None:
        if not isinstance(versions, dict):
            errors.append("Field 'Versions' must be a mapping")
        else:
            for version, info in versions.items():
                if not isinstance(info, dict):
                    errors.append(f"Versions.{version}: Must be a mapping")

    depth = config.get("SourceUrlDepth")
    if depth is not None and (
        isinstance(depth, bool) or not str(depth).strip().isdigit()
    ):
        errors.append("Field 'SourceUrlDepth' must be a non-negative integer")

    skip_urls = config.get("SkipUrl")
    if skip_urls is not None:
        if not isinstance(skip_urls, (str, list)):
            errors.append("Field 'SkipUrl' must be a string or a list")
        else:
            try:
                check_skip_urls(
                    [skip_urls] if isinstance(skip_urls, str) else skip_urls
                )
            except ConfigError as err:
                errors.append(str(err))

    source_dir = config.get("SourceDir")
    if source_dir and not Path(source_dir).is_dir():
        warnings.append(f"SourceDir does not exist: {source_dir}")

    for key in sorted(str(k) for k in config if k not in KNOWN_KEYS):
        warnings.append(f"Unknown key: {key}")

    status = "valid" if not errors else "invalid"

    if verbose:
        if status == "valid":
            print("  [OK] Profile is valid!")
        else:
            print(f"  [ERROR] Profile has {len(errors)} error(s)")

    return _result(status, errors, warnings, len(config), profile_path)
