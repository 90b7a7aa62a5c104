"""Filesystem and network input for relseq.

Modules:

scan : module
    Map the package archives of a local source directory to versions.
download : module
    Fetch release archives over HTTP(S) with retries and atomic writes.

Public API:

scan_source_dir : function
    Walk a directory and return {version: archive path}.
download_file : function
    Download one archive and return (path, sha256).
make_session : function
    requests.Session with relseq's retry and User-Agent defaults.

Example:
    from pathlib import Path
    from relseq.io import scan_source_dir

    found = scan_source_dir(Path("./mirror"), "libpng")
    print(sorted(found))

"""

from .download import download_file, make_session
from .scan import scan_source_dir

__all__ = ["download_file", "make_session", "scan_source_dir"]
