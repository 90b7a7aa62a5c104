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

"""Persistent record of known source archives and installed builds.

The state file remembers, per library, which versions have a source archive
on disk and which have been built and installed. It is what lets relseq tell
a new upstream version from one it has already seen, and what the build plan
and timeline are computed from.

Layout:

```json
{
  "metadata": {"relseq_version": "0.1.0", "schema_version": "1",
               "last_updated": "..."},
  "libraries": {
    "zlib": {
      "source": {"1.2.13": "/srv/src/zlib/zlib-1.2.13.tar.gz"},
      "installed": {"1.2.13": "/srv/installed/zlib/1.2.13"}
    }
  }
}
```

The filesystem is the source of truth: prune_missing() drops entries whose
archive or install directory no longer exists, and nothing here ever
deletes files.

Example:
    High-level API with StateTracker:
        ```python
        from pathlib import Path
        from relseq.state import StateTracker

        tracker = StateTracker(Path("state/versions.json"))
        tracker.load()
        tracker.record_source("zlib", "1.3", Path("src/zlib-1.3.tar.gz"))
        tracker.save()
        ```

    Low-level API with functions:
        ```python
        from pathlib import Path
        from relseq.state import load_state, save_state

        state = load_state(Path("state/versions.json"))
        # ... modify state dict ...
        save_state(state, Path("state/versions.json"))
        ```

"""

from __future__ import annotations

from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Any

from relseq import __version__
from relseq.exceptions import StateError
from relseq.logging import get_global_logger

SCHEMA_VERSION = "1"


class StateTracker:
    """Loads, queries, and updates the state file.

    Attributes:
        state_file: Path to the JSON state file.
        state: In-memory state dictionary.

    """

    def __init__(self, state_file: Path):
        """Initialize state tracker.

        Args:
            state_file: Path to JSON state file. Created if doesn't exist.

        """
        self.state_file = state_file
        self.state: dict[str, Any] = {}

    def load(self) -> dict[str, Any]:
        """Load state from file.

        Creates the default structure if the file doesn't exist. A corrupted
        file is moved aside to ``<name>.json.backup`` and replaced with a
        fresh state before the error is raised.

        Returns:
            Loaded state dictionary.

        Raises:
            StateError: If the file is not valid JSON or not a JSON object.
            OSError: If file permissions prevent reading.

        """
        logger = get_global_logger()
        try:
            self.state = load_state(self.state_file)
        except FileNotFoundError:
            logger.verbose("STATE", f"Creating new state file: {self.state_file}")
            self.state = create_default_state()
            self.save()
        except json.JSONDecodeError as err:
            self._reset_corrupted()
            raise StateError(
                f"Corrupted state file backed up to "
                f"{self.state_file.with_suffix('.json.backup')}. "
                f"Created fresh state file."
            ) from err

        if not isinstance(self.state, dict):
            self._reset_corrupted()
            raise StateError(
                f"State file is not a JSON object: {self.state_file}. "
                f"Created fresh state file."
            )

        self.state.setdefault("libraries", {})
        return self.state

    def _reset_corrupted(self) -> None:
        backup = self.state_file.with_suffix(".json.backup")
        self.state_file.replace(backup)
        self.state = create_default_state()
        self.save()

    def save(self) -> None:
        """Save current state to file, refreshing metadata.last_updated.

        Raises:
            OSError: If file permissions prevent writing.

        """
        self.state.setdefault("metadata", {})
        self.state["metadata"]["last_updated"] = datetime.now(UTC).isoformat()
        save_state(self.state, self.state_file)

    def library(self, name: str) -> dict[str, Any]:
        """Return the state entry of a library, creating it if missing."""
        libraries = self.state.setdefault("libraries", {})
        entry = libraries.setdefault(name, {})
        entry.setdefault("source", {})
        entry.setdefault("installed", {})
        return entry

    def sources(self, name: str) -> dict[str, str]:
        """Known source archives of a library (version -> archive path)."""
        entry = self.state.get("libraries", {}).get(name) or {}
        return dict(entry.get("source") or {})

    def installed(self, name: str) -> dict[str, str]:
        """Installed builds of a library (version -> install directory)."""
        entry = self.state.get("libraries", {}).get(name) or {}
        return dict(entry.get("installed") or {})

    def record_source(self, name: str, version: str, path: Path) -> None:
        """Remember the source archive of a version."""
        self.library(name)["source"][version] = str(path)

    def record_installed(self, name: str, version: str, path: Path) -> None:
        """Remember the install directory of a built version."""
        self.library(name)["installed"][version] = str(path)

    def prune_missing(self, name: str) -> list[str]:
        """Forget source and installed entries whose path no longer exists.

        Nothing is removed from disk.

        Returns:
            Versions that were dropped from either map, sorted.

        """
        logger = get_global_logger()
        entry = self.library(name)
        dropped: set[str] = set()

        for kind in ("source", "installed"):
            for version, raw_path in list(entry[kind].items()):
                if not Path(raw_path).exists():
                    logger.verbose(
                        "STATE", f"Forgetting {kind} of {name} {version}: {raw_path}"
                    )
                    del entry[kind][version]
                    dropped.add(version)

        return sorted(dropped)


def create_default_state() -> dict[str, Any]:
    """Create a default empty state structure.

    Returns:
        Empty state with metadata section.

    """
    return {
        "metadata": {
            "relseq_version": __version__,
            "schema_version": SCHEMA_VERSION,
            "last_updated": datetime.now(UTC).isoformat(),
        },
        "libraries": {},
    }


def load_state(state_file: Path) -> Any:
    """Load state from JSON file.

    Args:
        state_file: Path to JSON state file.

    Returns:
        The decoded JSON document.

    Raises:
        FileNotFoundError: If state file doesn't exist.
        json.JSONDecodeError: If file contains invalid JSON.

    """
    with open(state_file, encoding="utf-8") as f:
        return json.load(f)


def save_state(state: dict[str, Any], state_file: Path) -> None:
    """Save state to JSON file with pretty-printing.

    Creates parent directories if needed. Uses 2-space indentation, sorted
    keys and a trailing newline so the file diffs cleanly in git.

    Args:
        state: State dictionary to save.
        state_file: Path to JSON state file.

    """
    state_file.parent.mkdir(parents=True, exist_ok=True)

    with open(state_file, "w", encoding="utf-8") as f:
        json.dump(state, f, indent=2, sort_keys=True)
        f.write("\n")
