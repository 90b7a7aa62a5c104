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

"""Local source-directory scanning for relseq.

Some libraries are not crawled from the web at all: their release archives
already sit in a local mirror (the profile's SourceDir). This module walks
such a directory and maps each archive of the library to its version.

Only file names are inspected. Archives are never opened, copied, or moved;
the returned paths point into SourceDir as-is.

Example:
    ```python
    from pathlib import Path
    from relseq.io import scan_source_dir

    found = scan_source_dir(Path("/srv/mirror/zlib"), "zlib")
    for version, path in found.items():
        print(version, path)  # 1.2.13 /srv/mirror/zlib/zlib-1.2.13.tar.gz
    ```
"""

from __future__ import annotations

from pathlib import Path

from relseq.exceptions import ConfigError
from relseq.logging import get_global_logger
from relseq.versioning.packages import parse_package_name


def scan_source_dir(source_dir: Path, package: str) -> dict[str, Path]:
    """Find the package archives below a directory.

    Files are visited in reverse path order, so when two archives carry the
    same version the one with the greater path wins.

    Args:
        source_dir: Directory to walk recursively.
        package: Package name the archive names start with.

    Returns:
        Mapping of version string to archive path.

    Raises:
        ConfigError: If source_dir does not exist or is not a directory.

    """
    logger = get_global_logger()

    if not source_dir.is_dir():
        raise ConfigError(f"can't access source directory: {source_dir}")

    logger.verbose("SCAN", f"Scanning {source_dir} for {package} archives")

    files = sorted((p for p in source_dir.rglob("*") if p.is_file()), reverse=True)
    found: dict[str, Path] = {}
    for path in files:
        parsed = parse_package_name(path.name, package)
        if parsed is None or parsed.version in found:
            continue
        logger.debug("SCAN", f"Found {path}")
        found[parsed.version] = path

    logger.verbose("SCAN", f"Found {len(found)} archive(s)")
    return found
