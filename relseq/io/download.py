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
HTTP(S) download of release archives for relseq.

Key Features:

- **Retry Logic with Exponential Backoff** - Transient failures (429, 500,
  502, 503, 504) are retried through urllib3.util.Retry.
- **Atomic Writes** - Archives are written to a .part file and renamed on
  success, so a half-downloaded tarball never shows up in the repository.
- **Package Checks** - An HTML response or an empty body is not a package;
  the partial file is removed and NetworkError is raised.
- **Stream Hashing** - SHA-256 is computed while writing.

Constants:

- DEFAULT_CHUNK (int): Stream chunk size (1 MiB).

Example:
Basic download:

    >>> from pathlib import Path
    >>> from relseq.io import download_file
    >>> path, sha256 = download_file(
    ...     "https://zlib.net/fossils/zlib-1.2.13.tar.gz",
    ...     Path("src/zlib/1.2.13"),
    ... )

Notes:
- Timeouts are per-request, not total download time
- All HTTP errors are chained with 'from err'
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from relseq import __version__
from relseq.exceptions import NetworkError
from relseq.logging import get_global_logger

# Stream size per chunk (1 MiB).
DEFAULT_CHUNK = 1024 * 1024

USER_AGENT = f"relseq/{__version__}"


def _filename_from_cd(content_disposition: str) -> str | None:
    """
    Extract a filename from a Content-Disposition header if present.

    Example header:
      'attachment; filename="zlib-1.3.tar.gz"'
    """
    if not content_disposition:
        return None
    parts = [s.strip() for s in content_disposition.split(";")]
    for part in parts:
        if part.lower().startswith("filename="):
            value = part.split("=", 1)[1].strip().strip('"')
            return value or None
    return None


def _filename_from_url(url: str) -> str:
    name = Path(urlparse(url).path).name
    return name or "download.bin"


def make_session() -> requests.Session:
    """
    Create a requests.Session with retry/backoff defaults.

    - Retries on common transient status codes.
    - Applies exponential backoff.
    - Sets a User-Agent naming relseq.
    """
    s = requests.Session()
    retries = Retry(
        total=3,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
        raise_on_status=False,
    )
    s.headers.update({"User-Agent": USER_AGENT})
    s.mount("http://", HTTPAdapter(max_retries=retries))
    s.mount("https://", HTTPAdapter(max_retries=retries))
    return s


def download_file(
    url: str,
    destination_folder: Path,
    *,
    filename: str | None = None,
    timeout: int = 60,
) -> tuple[Path, str]:
    """Download a release archive into destination_folder.

    Follows redirects and retries transient failures. Writes to
    <filename>.part then renames to <filename> on success.

    Args:
        url: Archive URL.
        destination_folder: Folder to save into (created if missing).
        filename: Name to save under. Defaults to the Content-Disposition
            filename, then the last component of the final URL.
        timeout: Per-request timeout (seconds).

    Returns:
        A tuple (file_path, sha256_hex).

    Raises:
        NetworkError: If the request fails, the server answers with a
            non-2xx status, or the response is an HTML page or empty.

    """
    logger = get_global_logger()

    destination_folder = Path(destination_folder)
    destination_folder.mkdir(parents=True, exist_ok=True)

    logger.verbose("HTTP", f"GET {url}")

    with make_session() as session:
        try:
            resp = session.get(url, stream=True, allow_redirects=True, timeout=timeout)
        except requests.exceptions.RequestException as err:
            raise NetworkError(f"can't access '{url}': {err}") from err

        for hist in resp.history:
            logger.debug(
                "HTTP",
                f"Redirect {hist.status_code} -> {hist.headers.get('Location', 'unknown')}",
            )

        try:
            resp.raise_for_status()
        except requests.HTTPError as err:
            resp.close()
            raise NetworkError(f"download failed for {url}: {err}") from err

        logger.verbose("HTTP", f"Response: {resp.status_code} {resp.reason}")

        ctype = resp.headers.get("Content-Type", "")
        if "text/html" in ctype.lower():
            resp.close()
            raise NetworkError(f"'{url}' is not a package (content-type={ctype})")

        name = (
            filename
            or _filename_from_cd(resp.headers.get("Content-Disposition", ""))
            or _filename_from_url(resp.url)
        )
        target = destination_folder / name
        tmp = target.with_suffix(target.suffix + ".part")
        logger.debug("FILE", f"Downloading to: {tmp}")

        sha = hashlib.sha256()
        downloaded = 0
        try:
            with tmp.open("wb") as f:
                for chunk in resp.iter_content(chunk_size=DEFAULT_CHUNK):
                    if not chunk:
                        continue
                    f.write(chunk)
                    sha.update(chunk)
                    downloaded += len(chunk)
        except requests.exceptions.RequestException as err:
            tmp.unlink(missing_ok=True)
            raise NetworkError(f"download interrupted for {url}: {err}") from err
        finally:
            resp.close()

    if not downloaded:
        tmp.unlink(missing_ok=True)
        raise NetworkError(f"can't access '{url}': empty response")

    tmp.replace(target)
    digest = sha.hexdigest()
    logger.verbose("FILE", f"Saved {target} ({downloaded} bytes, sha256 {digest})")

    return target, digest
