"""
Pytest configuration and shared fixtures for relseq tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from relseq.logging import SilentLogger, set_global_logger


@pytest.fixture(autouse=True)
def silent_global_logger():
    """Reset the global logger so CLI tests don't leak verbosity."""
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def sample_profile_data() -> dict[str, Any]:
    """
    Provide sample library profile data.

    Returns a profile that exercises the common comparison options.
    """
    return {
        "Name": "zlib",
        "Title": "Zlib",
        "SourceUrl": "https://zlib.net/fossils/",
        "SourceDir": "mirror",
        "SkipVersions": ["1.2.0.1"],
        "MinimalVersion": "1.2.0",
    }


@pytest.fixture
def sample_org_defaults() -> dict[str, Any]:
    """Provide sample organization defaults."""
    return {
        "Maintainer": "Release Team",
        "SkipUrl": ["https://example.com/old/"],
        "KeepOldBeta": "Off",
    }


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("test.yaml", {"key": "value"})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create


@pytest.fixture
def create_archives(tmp_test_dir: Path):
    """
    Factory fixture for creating empty release archives.

    Usage:
        mirror = create_archives("mirror", ["zlib-1.2.13.tar.gz"])
    """

    def _create(dirname: str, names: list[str]) -> Path:
        root = tmp_test_dir / dirname
        root.mkdir(parents=True, exist_ok=True)
        for name in names:
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"")
        return root

    return _create
