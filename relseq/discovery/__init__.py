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

"""Release index crawling for relseq.

This package reads upstream download pages and returns the links that may
point to release archives.

Public API:

crawl : function
    Read SourceUrl and, depth permitting, its version sub-directories.
extract_links : function
    Pull absolute, cleaned-up links out of one HTML page.
sub_pages : function
    Pick the links worth descending into.
skip_url : function
    Apply the profile's SkipUrl entries to a link.
check_skip_urls : function
    Reject SkipUrl patterns that do not compile.

Example:
    from relseq.discovery import crawl
    from relseq.versioning.packages import collect_packages

    links = crawl("https://zlib.net/fossils/", "zlib")
    packages = collect_packages(links, "zlib")

"""

from .index_page import (
    DEFAULT_DEPTH,
    check_skip_urls,
    crawl,
    extract_links,
    skip_url,
    sub_pages,
)

__all__ = [
    "DEFAULT_DEPTH",
    "check_skip_urls",
    "crawl",
    "extract_links",
    "skip_url",
    "sub_pages",
]
