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
Release index crawling for relseq.

Upstream projects publish their tarballs on plain directory listings, project
download pages, GitHub release pages or SourceForge file trees. This module
reads such pages and returns every link that might lead to a release
archive. Turning links into versions is left to
relseq.versioning.packages.collect_packages.

Link Sources (per page):

1. href/src attributes holding absolute URLs
2. href/src attributes holding relative paths (joined with the page URL)
3. Absolute URLs anywhere in the page text
4. Quoted archive file names (joined with the page URL), unless an absolute
   link with the same file name was already found

Crawling:

The profile's SourceUrl is read first. With SourceUrlDepth >= 2 (the
default is 2), links that look like sub-directories of SourceUrl ("…/", or
a trailing version such as "…/v1.2") are read as well, one level per extra
step. Directories of versions that are already known or skipped by the
profile are not entered.

Profile Keys:

- SourceUrl (required): Index page to start from.
- SourceUrlDepth (optional): Crawl depth. Default: 2.
- SkipUrl (optional): Links to ignore. Entries containing any of
  ``* + ( | \\`` are regular expressions (searched), others are substrings.

Example:
    ```python
    from relseq.discovery import crawl

    links = crawl("https://zlib.net/fossils/", "zlib", depth=1)
    ```

Note:
    Only http and https pages can be read; ftp indexes raise NetworkError.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
import re
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
import requests

from relseq.exceptions import ConfigError, NetworkError
from relseq.io.download import make_session
from relseq.logging import get_global_logger
from relseq.versioning import ComparisonProfile, skip_version
from relseq.versioning.packages import PACKAGE_EXTENSIONS

DEFAULT_DEPTH = 2

# A SkipUrl entry containing one of these is a regex, otherwise a substring.
_URL_PATTERN_CHARS = frozenset("*+(|\\")

_EXT_ALTERNATION = "|".join(re.escape(ext) for ext in PACKAGE_EXTENSIONS)
_BARE_URL = re.compile(r"(?:ftp|https?)://[^\"'<>\s]+", re.IGNORECASE)
_QUOTED_ARCHIVE = re.compile(
    rf"[\"']([^\"'<>\s]+\.(?:{_EXT_ALTERNATION}))[\"']", re.IGNORECASE
)
_PARENT_DIR = re.compile(r"/[^/]+/\.\./")
_GITHUB_PAGER = re.compile(r"github\.com/.*\?after=")
_TRAILING_VERSION = re.compile(r"/v?\d[\d.\-]*\Z", re.IGNORECASE)
_SF_FILES_DIR = re.compile(
    r"https://sourceforge\.net/projects/[^/]+/files/[^/]+/([^/]+)/\Z"
)
_SF_DOWNLOAD = re.compile(r"(https?)://sourceforge\.net/projects/(\w+)/files/(.+)/download\Z")
_SF_ARCHIVE_TAIL = re.compile(rf"(?:{_EXT_ALTERNATION})/(.+)\Z")


def _url_pattern(entry: str) -> re.Pattern[str] | None:
    if not any(ch in _URL_PATTERN_CHARS for ch in entry):
        return None
    try:
        return re.compile(entry)
    except re.error as err:
        raise ConfigError(f"SkipUrl entry is not a valid regex: {entry!r}: {err}") from err


def check_skip_urls(skip_urls: Iterable[str]) -> list[str]:
    """Return the non-empty SkipUrl entries.

    Raises:
        ConfigError: If a pattern entry does not compile.

    """
    entries = [str(entry) for entry in skip_urls if entry]
    for entry in entries:
        _url_pattern(entry)
    return entries


def skip_url(link: str, skip_urls: Iterable[str]) -> bool:
    """Return True if link matches any SkipUrl entry.

    Raises:
        ConfigError: If a pattern entry does not compile.

    """
    for entry in skip_urls:
        if not entry:
            continue
        pattern = _url_pattern(entry)
        if pattern is not None:
            if pattern.search(link):
                return True
        elif entry in link:
            return True
    return False


def _site_address(url: str) -> str:
    parts = urlparse(url)
    return f"{parts.scheme}://{parts.netloc}"


def _strip_query(url: str) -> str:
    return url.split("?", 1)[0]


def _file_name(url: str) -> str:
    return _strip_query(url).rstrip("/").rsplit("/", 1)[-1]


def extract_links(
    html: str,
    page_url: str,
    final_url: str | None = None,
    skip_urls: Iterable[str] = (),
) -> list[str]:
    """Return the links of an index page, absolute and cleaned up.

    Args:
        html: Page content.
        page_url: URL that was requested.
        final_url: URL the page was served from after redirects. Relative
            links are joined against it. Defaults to page_url.
        skip_urls: SkipUrl entries of the profile.

    Returns:
        Links in discovery order, without duplicates. Links back to the page
        itself or to the site root are dropped.

    """
    final_url = final_url or page_url
    base = _strip_query(final_url)
    skip_urls = list(skip_urls)

    absolute: set[str] = set()
    relative: set[str] = set()
    soup = BeautifulSoup(html, "html.parser")
    for attr in ("href", "src"):
        for tag in soup.find_all(attrs={attr: True}):
            value = str(tag[attr]).strip()
            if not value or value.startswith(("#", "mailto:", "javascript:")):
                continue
            if re.match(r"(?:ftp|https?)://", value, re.IGNORECASE):
                absolute.add(value)
            else:
                relative.add(urljoin(base, value))

    bare = set(_BARE_URL.findall(html))

    absolute_names = {_file_name(link) for link in absolute}
    quoted = {
        urljoin(base, name)
        for name in _QUOTED_ARCHIVE.findall(html)
        if _file_name(name) not in absolute_names
    }

    candidates = [
        *sorted(absolute, reverse=True),
        *sorted(relative, reverse=True),
        *sorted(bare, reverse=True),
        *sorted(quoted, reverse=True),
    ]

    site = _site_address(page_url)
    own = {page_url.rstrip("/"), final_url.rstrip("/"), site}

    links: list[str] = []
    seen: set[str] = set()
    for link in candidates:
        while _PARENT_DIR.search(link):
            link = _PARENT_DIR.sub("/", link)
        if skip_url(link, skip_urls):
            continue
        if not _GITHUB_PAGER.search(link):
            link = _strip_query(link)
        link = link.replace("%2D", "-")
        link = re.sub(r"/{2,}\Z", "/", link)
        if link.rstrip("/") in own:
            continue
        if "sourceforge" in link:
            tail = _SF_ARCHIVE_TAIL.search(link)
            if tail and tail.group(1) != "download":
                continue
            sf = _SF_DOWNLOAD.match(link)
            if sf:
                link = (
                    f"{sf.group(1)}://sourceforge.net/projects/{sf.group(2)}/files/"
                    f"{sf.group(3)}/download?use_mirror=autoselect"
                )
        link = link.replace("%2b", "+").replace(":21/", "/")
        if link not in seen:
            seen.add(link)
            links.append(link)
    return links


def read_page(
    url: str, session: requests.Session | None = None, timeout: int = 30
) -> tuple[str, str]:
    """Fetch a page and return (content, final URL).

    Raises:
        NetworkError: If the URL is not http(s) or the request fails.

    """
    logger = get_global_logger()

    if urlparse(url).scheme not in {"http", "https"}:
        raise NetworkError(f"can't access page '{url}': unsupported scheme")

    logger.verbose("CRAWL", f"Reading {url}")
    getter = session.get if session is not None else requests.get
    try:
        response = getter(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.HTTPError as err:
        raise NetworkError(
            f"can't access page '{url}': {response.status_code} {response.reason}"
        ) from err
    except requests.exceptions.RequestException as err:
        raise NetworkError(f"can't access page '{url}': {err}") from err

    logger.debug("CRAWL", f"Page fetched ({len(response.text)} bytes)")
    return response.text, response.url


def get_links(
    url: str,
    skip_urls: Iterable[str] = (),
    session: requests.Session | None = None,
) -> list[str]:
    """Read a page and return its links (see extract_links)."""
    html, final_url = read_page(url, session)
    return extract_links(html, url, final_url, skip_urls)


def sub_pages(
    top: str,
    links: Iterable[str],
    package: str,
    known: Collection[str] = (),
    profile: ComparisonProfile | None = None,
) -> list[str]:
    """Select the links worth descending into from the top page.

    A link is a candidate when it ends with "/" or with a version-like
    component (or is a GitHub "?after=" pager), and lies below top.
    Directories named after a known or skipped version are left out.
    """
    logger = get_global_logger()
    top = _strip_query(top)
    version_dir = re.compile(
        rf"/({re.escape(package)}[\-_]*|)v?([\d.\-_]+)/*\Z", re.IGNORECASE
    )

    pages: list[str] = []
    for link in links:
        if not link.endswith("/") and not _TRAILING_VERSION.search(link):
            if not _GITHUB_PAGER.search(link):
                continue
        if top not in link:
            continue

        sf = _SF_FILES_DIR.search(link)
        if sf:
            if sf.group(1) in known:
                logger.debug("CRAWL", f"Skip: {link}")
                continue
        else:
            match = version_dir.search(link)
            if match:
                version = match.group(2)
                if version in known or skip_version(version, profile):
                    logger.debug("CRAWL", f"Skip: {link}")
                    continue

        pages.append(link)
    return pages


def crawl(
    source_url: str,
    package: str,
    *,
    depth: int = DEFAULT_DEPTH,
    skip_urls: Iterable[str] = (),
    known: Collection[str] = (),
    profile: ComparisonProfile | None = None,
) -> list[str]:
    """Collect links from source_url and, depth permitting, its sub-pages.

    Args:
        source_url: Index page to start from.
        package: Package name (used to recognize version directories).
        depth: Number of page levels to read. 1 reads source_url only.
        skip_urls: SkipUrl entries of the profile.
        known: Versions already held; their directories are not entered.
        profile: Comparison options (for skip_version).

    Returns:
        All links found, source_url's first.

    Raises:
        NetworkError: If source_url itself cannot be read. Sub-pages that
            fail are logged and skipped.

    """
    logger = get_global_logger()
    skip_urls = list(skip_urls)

    with make_session() as session:
        links = get_links(source_url, skip_urls, session)

        checked = {source_url}
        for _ in range(depth - 1):
            for page in sub_pages(source_url, links, package, known, profile):
                if page in checked:
                    continue
                checked.add(page)
                try:
                    links.extend(get_links(page, skip_urls, session))
                except NetworkError as err:
                    logger.verbose("CRAWL", f"Skipping page: {err}")

    logger.verbose("CRAWL", f"Found {len(links)} link(s)")
    return links
