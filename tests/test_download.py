"""
Tests for relseq.io.download module.

Tests download functionality including:
- Basic downloads
- Redirects
- Content-Disposition headers and explicit file names
- HTML and empty responses
- Atomic writes
"""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest
import requests
import requests_mock

from relseq.exceptions import NetworkError
from relseq.io.download import USER_AGENT, download_file, make_session


def _sha256(data: bytes) -> str:
    """Helper to compute SHA-256 hash."""
    return hashlib.sha256(data).hexdigest()


def test_download_success(tmp_test_dir: Path) -> None:
    """Test basic successful download."""
    url = "https://example.org/pub/zlib-1.3.tar.gz"
    data = b"\x1f\x8b tarball"

    with requests_mock.Mocker() as m:
        m.get(url, content=data, headers={"Content-Length": str(len(data))})
        path, digest = download_file(url, tmp_test_dir)

    assert path == tmp_test_dir / "zlib-1.3.tar.gz"
    assert path.read_bytes() == data
    assert digest == _sha256(data)


def test_follows_redirect_and_uses_final_url_name(tmp_test_dir: Path) -> None:
    """Test that redirects are followed and final URL name is used."""
    start = "https://example.org/download?id=42"
    final = "https://cdn.example.org/zlib-1.3.tar.xz"

    with requests_mock.Mocker() as m:
        m.get(start, status_code=302, headers={"Location": final})
        m.get(final, content=b"abc")
        path, _ = download_file(start, tmp_test_dir)

    assert path.name == "zlib-1.3.tar.xz"
    assert path.read_bytes() == b"abc"


def test_content_disposition_filename(tmp_test_dir: Path) -> None:
    """Test that Content-Disposition header overrides URL filename."""
    url = "https://example.org/dl"

    with requests_mock.Mocker() as m:
        m.get(
            url,
            content=b"abc",
            headers={"Content-Disposition": 'attachment; filename="zlib-1.3.zip"'},
        )
        path, _ = download_file(url, tmp_test_dir)

    assert path.name == "zlib-1.3.zip"


def test_explicit_filename_wins(tmp_test_dir: Path) -> None:
    """Test that the caller's file name beats the server's."""
    url = "https://github.com/madler/zlib/archive/v1.3.tar.gz"

    with requests_mock.Mocker() as m:
        m.get(
            url,
            content=b"abc",
            headers={"Content-Disposition": 'attachment; filename="zlib-v1.3.tgz"'},
        )
        path, _ = download_file(url, tmp_test_dir, filename="zlib-1.3.tar.gz")

    assert path.name == "zlib-1.3.tar.gz"


def test_creates_destination_folder(tmp_test_dir: Path) -> None:
    """Test that missing destination folders are created."""
    url = "https://example.org/zlib-1.3.tar.gz"
    destination = tmp_test_dir / "src" / "zlib" / "1.3"

    with requests_mock.Mocker() as m:
        m.get(url, content=b"abc")
        path, _ = download_file(url, destination)

    assert path.parent == destination


def test_http_error_raises(tmp_test_dir: Path) -> None:
    """Test that a 404 raises NetworkError."""
    url = "https://example.org/zlib-9.9.tar.gz"

    with requests_mock.Mocker() as m:
        m.get(url, status_code=404)

        with pytest.raises(NetworkError, match="download failed"):
            download_file(url, tmp_test_dir)

    assert list(tmp_test_dir.iterdir()) == []


def test_connection_error_raises(tmp_test_dir: Path) -> None:
    """Test that connection failures are wrapped in NetworkError."""
    url = "https://example.org/zlib-1.3.tar.gz"

    with requests_mock.Mocker() as m:
        m.get(url, exc=requests.exceptions.ConnectTimeout)

        with pytest.raises(NetworkError, match="can't access"):
            download_file(url, tmp_test_dir)


def test_rejects_html(tmp_test_dir: Path) -> None:
    """Test that an HTML page is not accepted as a package."""
    url = "https://example.org/zlib-1.3.tar.gz"

    with requests_mock.Mocker() as m:
        m.get(url, text="<html>moved</html>", headers={"Content-Type": "text/html"})

        with pytest.raises(NetworkError, match="is not a package"):
            download_file(url, tmp_test_dir)

    assert not (tmp_test_dir / "zlib-1.3.tar.gz").exists()


def test_rejects_empty_body(tmp_test_dir: Path) -> None:
    """Test that an empty response leaves no file behind."""
    url = "https://example.org/zlib-1.3.tar.gz"

    with requests_mock.Mocker() as m:
        m.get(url, content=b"")

        with pytest.raises(NetworkError, match="empty response"):
            download_file(url, tmp_test_dir)

    assert list(tmp_test_dir.iterdir()) == []


def test_writes_atomically_no_part_leftovers(tmp_test_dir: Path) -> None:
    """Test that atomic writes don't leave .part files behind."""
    url = "https://example.org/zlib-1.3.tar.gz"

    with requests_mock.Mocker() as m:
        m.get(url, content=b"x" * 10)
        path, _ = download_file(url, tmp_test_dir)

    assert list(tmp_test_dir.glob("*.part")) == []
    assert path.exists()


def test_session_identifies_relseq() -> None:
    """Test the session's User-Agent."""
    with make_session() as session:
        assert session.headers["User-Agent"] == USER_AGENT
        assert USER_AGENT.startswith("relseq/")
