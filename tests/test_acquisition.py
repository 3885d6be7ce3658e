"""
Tests for version gating, archive download/extraction and sessions.

No test touches the network: the archive source gets a fake HTTP session,
and sessions get a fake CatalogSource.
"""

import io
import json
import zipfile
from pathlib import Path

import pytest
import requests

from sodium_typegen.acquisition import (
    GenerationSession,
    GithubArchiveSource,
    check_minimum_version,
    compare_version_numbers,
    open_session,
)
from sodium_typegen.errors import AcquisitionError, VersionError

from conftest import write_source_tree


def build_archive(version: str) -> bytes:
    buffer = io.BytesIO()
    prefix = f"libsodium.js-{version}/wrapper"
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr(f"{prefix}/symbols/crypto_box_keypair.json", json.dumps({"name": "crypto_box_keypair"}))
        zf.writestr(f"{prefix}/constants.json", json.dumps([{"name": "crypto_box_SEEDBYTES", "type": "uint"}]))
    return buffer.getvalue()


class FakeResponse:
    """Streaming response stand-in with a fixed body and status."""

    def __init__(self, content: bytes, status: int = 200):
        self.content = content
        self.status = status

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} Not Found")

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start:start + chunk_size]


class FakeSession:
    """HTTP session stand-in that records requested URLs."""

    def __init__(self, response: FakeResponse):
        self.response = response
        self.requested = []

    def get(self, url, stream=False, timeout=None):
        self.requested.append(url)
        return self.response


class RecordingSource:
    """CatalogSource that writes a tree into the scratch dir, or fails."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    def fetch(self, version: str, scratch_dir: Path) -> Path:
        self.calls.append(version)
        if self.fail:
            raise AcquisitionError("network is down")
        return write_source_tree(scratch_dir / f"libsodium.js-{version}", [{"name": "f"}], [])


class TestVersions:
    """Test version comparison and the minimum version gate."""

    @pytest.mark.parametrize("a,b,expected", [
        ("0.7.3", "0.7.3", 0),
        ("0.7.4", "0.7.3", 1),
        ("0.7.10", "0.7.9", 1),
        ("0.6", "0.7.3", -1),
        ("1.0", "1.0.0", 0),
    ])
    def test_compare(self, a, b, expected):
        """Versions compare numerically, padding missing parts with zero."""
        assert compare_version_numbers(a, b) == expected

    @pytest.mark.parametrize("bad", ["latest", "0.7.x", "", "v0.7.3", "0.7.²", "٣.0", "0. 7.3"])
    def test_non_numeric_rejected(self, bad):
        """Anything but dotted ASCII digits raises VersionError."""
        with pytest.raises(VersionError):
            compare_version_numbers(bad, "0.7.3")

    def test_minimum_accepts_equal_and_newer(self):
        """The minimum itself and newer versions pass through."""
        assert check_minimum_version("0.7.3", "0.7.3") == "0.7.3"
        assert check_minimum_version("0.8.0", "0.7.3") == "0.8.0"

    @pytest.mark.parametrize("bad", ["0.7.2", "0.6.9", "latest", "0.7.²"])
    def test_minimum_rejects(self, bad):
        """Older or non-numeric versions name the minimum in the error."""
        with pytest.raises(VersionError, match="Minimum version is 0.7.3"):
            check_minimum_version(bad, "0.7.3")


class TestGithubArchiveSource:
    """Test archive download and extraction."""

    def test_fetch_downloads_and_extracts(self, tmp_path):
        """The tagged archive is fetched and unpacked into the scratch dir."""
        session = FakeSession(FakeResponse(build_archive("0.7.4")))
        source = GithubArchiveSource("https://example.org/{version}.zip", session=session)

        tree = source.fetch("0.7.4", tmp_path)

        assert session.requested == ["https://example.org/0.7.4.zip"]
        assert tree == tmp_path / "libsodium.js-0.7.4"
        assert (tree / "wrapper" / "constants.json").is_file()

    def test_url_for(self):
        """The URL template is formatted with the version."""
        source = GithubArchiveSource("https://example.org/{version}.zip", session=FakeSession(FakeResponse(b"")))
        assert source.url_for("0.7.4") == "https://example.org/0.7.4.zip"

    def test_http_error_is_acquisition_error(self, tmp_path):
        """An HTTP error status becomes an AcquisitionError."""
        source = GithubArchiveSource("https://example.org/{version}.zip", session=FakeSession(FakeResponse(b"", 404)))
        with pytest.raises(AcquisitionError, match="Could not download"):
            source.fetch("0.7.4", tmp_path)

    def test_bad_archive_is_acquisition_error(self, tmp_path):
        """A body that is not a zip becomes an AcquisitionError."""
        source = GithubArchiveSource("https://example.org/{version}.zip", session=FakeSession(FakeResponse(b"not a zip")))
        with pytest.raises(AcquisitionError, match="Could not extract"):
            source.fetch("0.7.4", tmp_path)


class TestSessions:
    """Test session setup and scratch cleanup."""

    def test_local_source_used_in_place(self, source_tree):
        """A local tree is used as-is and never fetched or removed."""
        fetcher = RecordingSource()
        with open_session(source_tree, "0.7.3", fetcher) as session:
            assert session == GenerationSession(source_dir=source_tree, version="0.7.3")
        assert fetcher.calls == []
        assert source_tree.is_dir()

    def test_local_source_must_be_complete(self, tmp_path):
        """An incomplete local tree fails on entry."""
        with pytest.raises(AcquisitionError):
            with open_session(tmp_path, "0.7.3", RecordingSource()):
                pass

    def test_downloaded_tree_removed_after_success(self):
        """The scratch dir is removed after a normal exit."""
        fetcher = RecordingSource()
        with open_session(None, "0.7.4", fetcher) as session:
            assert session.downloaded
            assert session.source_dir.is_dir()
            scratch = session.scratch_dir
        assert fetcher.calls == ["0.7.4"]
        assert not scratch.exists()

    def test_downloaded_tree_removed_after_error(self):
        """The scratch dir is removed when the body raises."""
        seen = []
        with pytest.raises(RuntimeError):
            with open_session(None, "0.7.4", RecordingSource()) as session:
                seen.append(session.scratch_dir)
                raise RuntimeError("generation failed")
        assert not seen[0].exists()

    def test_fetch_failure_propagates(self):
        """A failed fetch surfaces its AcquisitionError."""
        with pytest.raises(AcquisitionError, match="network is down"):
            with open_session(None, "0.7.4", RecordingSource(fail=True)):
                pass
