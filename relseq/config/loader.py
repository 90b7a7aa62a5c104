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
Library profile loading and merging for relseq.

A library profile describes one tracked library: its name, where its
release archives live, and the comparison options for its version scheme.
Profiles are YAML files; the JSON profiles written by older tooling load
unchanged because YAML is a superset of JSON.

Configuration Layers
--------------------
1. **Organization defaults** (defaults/org.yaml)
   - Optional; found by walking upward from the profile's directory
   - Shared options, e.g. a default MinimalVersion policy or SkipUrl list

2. **Library profile** (profiles/<library>.yaml or .json)
   - Always required; defines the library itself
   - Overrides organization defaults

Merge Behavior
--------------
  - **Dicts**: Recursively merged (keys from the profile override defaults)
  - **Lists**: Completely replaced (NOT appended/extended)
  - **Scalars**: Overwritten

Path Resolution
---------------
Relative paths are resolved against the PROFILE FILE location, so a profile
and its source mirror can move together. Currently resolved paths:
  - SourceDir

Functions
---------
load_effective_config : function
    Load and merge the raw configuration for a profile.
load_profile : function
    Load a profile and build its LibraryProfile (main public API).

Error Handling
--------------
- ConfigError: missing file, YAML parse errors, empty files, non-mapping
  top level, missing Name, invalid comparison options
- All errors are chained with "from err" for better debugging

Examples
--------
    >>> from pathlib import Path
    >>> from relseq.config import load_profile
    >>> profile = load_profile(Path("profiles/openssl.json"))
    >>> profile.name
    'openssl'
    >>> profile.comparison.letter_releases
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from relseq.exceptions import ConfigError
from relseq.logging import get_global_logger
from relseq.versioning.profile import ComparisonProfile

# -------------------------------
# Data types
# -------------------------------


@dataclass(frozen=True)
class LibraryProfile:
    """A loaded library profile.

    Attributes:
        name: Library name (profile key "Name"); also the default package
            name archives start with.
        path: Absolute path of the profile file.
        comparison: Comparison options parsed from the profile.
        config: The full merged configuration, including keys relseq does
            not interpret.

    """

    name: str
    path: Path
    comparison: ComparisonProfile
    config: dict[str, Any] = field(default_factory=dict)

    @property
    def package(self) -> str:
        """Archive name prefix (profile key "Package", defaults to the name)."""
        package = self.config.get("Package")
        return str(package) if package else self.name

    @property
    def source_dir(self) -> Path | None:
        """Local directory holding release archives, if configured."""
        source_dir = self.config.get("SourceDir")
        return Path(source_dir) if source_dir else None


# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """Load a YAML (or JSON) file and return the parsed object.

    Raises:
        ConfigError: When the file does not exist, cannot be parsed, or is
            empty.
    """
    if not p.exists():
        raise ConfigError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        raise ConfigError(f"YAML file is empty: {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge two dicts, overlay wins; lists and scalars are replaced.

    Inputs are not mutated.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


# -------------------------------
# Defaults discovery
# -------------------------------


def _find_defaults_root(start_dir: Path) -> Path | None:
    """Walk upward from start_dir looking for defaults/org.yaml."""
    for parent in [start_dir] + list(start_dir.parents):
        candidate = parent / "defaults" / "org.yaml"
        if candidate.exists():
            return parent / "defaults"
    return None


# -------------------------------
# Path resolution
# -------------------------------


def _resolve_known_paths(cfg: dict[str, Any], profile_dir: Path) -> None:
    """Resolve relative path fields against the profile directory, in place."""
    raw_path = cfg.get("SourceDir")
    if isinstance(raw_path, str) and raw_path:
        p = Path(raw_path)
        if not p.is_absolute():
            cfg["SourceDir"] = str((profile_dir / p).resolve())


# -------------------------------
# Public API
# -------------------------------


def load_effective_config(profile_path: Path) -> dict[str, Any]:
    """
    Load and merge the effective configuration for a library profile.

    Steps
      1) Read the profile (YAML or JSON).
      2) Find defaults root by scanning upwards for 'defaults/org.yaml'.
      3) Merge: org defaults -> profile (dicts deep-merge, lists replace).
      4) Resolve known relative paths (relative to the profile directory).

    Returns
      The merged configuration dict. Without a defaults tree, the profile
      is returned as-is (with path resolution).

    Raises
      ConfigError on a missing profile, parse errors, empty files, or a top
      level that is not a mapping.
    """
    logger = get_global_logger()

    profile_path = profile_path.resolve()
    profile_dir = profile_path.parent

    logger.verbose("CONFIG", f"Loading profile: {profile_path}")

    profile_obj = _load_yaml_file(profile_path)
    if not isinstance(profile_obj, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {profile_path}")

    merged: dict[str, Any] = {}
    layers_merged = 0

    defaults_root = _find_defaults_root(profile_dir)
    if defaults_root:
        org_defaults_path = defaults_root / "org.yaml"
        logger.verbose(
            "CONFIG", f"Loading: {org_defaults_path.relative_to(defaults_root.parent)}"
        )
        org_defaults = _load_yaml_file(org_defaults_path)
        if isinstance(org_defaults, dict):
            merged = _deep_merge_dicts(merged, org_defaults)
            layers_merged += 1

    merged = _deep_merge_dicts(merged, profile_obj)
    layers_merged += 1

    logger.verbose("CONFIG", f"Deep merging {layers_merged} layer(s)")
    logger.debug("CONFIG", f"Final config keys: {', '.join(merged)}")

    _resolve_known_paths(merged, profile_dir)
    return merged


def load_profile(profile_path: Path) -> LibraryProfile:
    """Load a library profile and parse its comparison options.

    Args:
        profile_path: Path to the profile file.

    Returns:
        LibraryProfile with name, resolved path, comparison options, and the
        merged configuration.

    Raises:
        ConfigError: On any loading error, a missing Name, or invalid
            comparison options.

    """
    config = load_effective_config(profile_path)

    name = config.get("Name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError(
            f"name of the library is not specified in profile: {profile_path}"
        )

    return LibraryProfile(
        name=name.strip(),
        path=profile_path.resolve(),
        comparison=ComparisonProfile.from_mapping(config),
        config=config,
    )
