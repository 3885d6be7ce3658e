"""
Catalog acquisition: version gating, remote archives and generation sessions.

The compiler never talks to the network directly. It asks a CatalogSource
for a source tree by version, inside a GenerationSession whose scratch
directory is removed on every exit path.
"""

from __future__ import annotations

import logging
import re
import tempfile
import zipfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Protocol

import requests

from sodium_typegen.errors import AcquisitionError, VersionError
from sodium_typegen.loader import check_source


logger = logging.getLogger(__name__)

ARCHIVE_NAME = "libsodium.zip"
CHUNK_SIZE = 64 * 1024

_VERSION_PART_RE = re.compile(r"[0-9]+")


def _version_parts(version: str) -> List[int]:
    parts = version.strip().split(".")
    if not all(_VERSION_PART_RE.fullmatch(part) for part in parts):
        raise VersionError(f"Version is not numeric: {version!r}")
    return [int(part) for part in parts]


def compare_version_numbers(a: str, b: str) -> int:
    """
    Compare two dotted numeric versions.

    Missing components count as zero ("1.0" == "1.0.0").

    Returns:
        -1, 0 or 1

    Raises:
        VersionError: If either version has a non-numeric component
    """
    left, right = _version_parts(a), _version_parts(b)
    width = max(len(left), len(right))
    left += [0] * (width - len(left))
    right += [0] * (width - len(right))
    return (left > right) - (left < right)


def check_minimum_version(version: str, minimum: str) -> str:
    """
    Reject versions that are non-numeric or older than the floor.

    Raises:
        VersionError: With the supported minimum in the message
    """
    try:
        comparison = compare_version_numbers(version, minimum)
    except VersionError:
        comparison = -1
    if comparison < 0:
        raise VersionError(f"Minimum version is {minimum}.")
    return version


class CatalogSource(Protocol):
    """Anything that can materialize a libsodium.js source tree for a version."""

    def fetch(self, version: str, scratch_dir: Path) -> Path:
        ...


class GithubArchiveSource:
    """
    Downloads the tagged libsodium.js archive and extracts it.

    One blocking request, no retry. Any failure is an AcquisitionError.
    """

    def __init__(
        self,
        url_template: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url_template = url_template
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, version: str) -> str:
        return self.url_template.format(version=version)

    def download(self, url: str, destination: Path) -> Path:
        logger.info('Downloading libsodium.js from "%s" ...', url)
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                with open(destination, "wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        f.write(chunk)
        except (requests.RequestException, OSError) as e:
            raise AcquisitionError(f"Could not download {url}: {e}") from e
        return destination

    def extract(self, archive: Path, scratch_dir: Path) -> None:
        try:
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(scratch_dir)
        except (zipfile.BadZipFile, OSError) as e:
            raise AcquisitionError(f"Could not extract {archive}: {e}") from e

    def fetch(self, version: str, scratch_dir: Path) -> Path:
        archive = self.download(self.url_for(version), scratch_dir / ARCHIVE_NAME)
        self.extract(archive, scratch_dir)
        return scratch_dir / f"libsodium.js-{version}"


@dataclass(frozen=True)
class GenerationSession:
    """
    Transient state of one generation call.

    Properties:
        source_dir: libsodium.js source tree to load
        version: Catalog version of that tree
        downloaded: True when the tree was fetched (and will be removed)
        scratch_dir: Temporary directory owning the download, if any
    """

    source_dir: Path
    version: str
    downloaded: bool = False
    scratch_dir: Optional[Path] = None


@contextmanager
def open_session(
    local_source: Optional[Path],
    version: str,
    source: CatalogSource,
) -> Iterator[GenerationSession]:
    """
    Prepare a source tree for one generation call.

    A caller-supplied tree is used in place and never removed. Otherwise a
    scratch directory is created, the archive is fetched into it, and the
    whole directory is removed when the block exits, on success or error.

    Raises:
        AcquisitionError: If the scratch directory cannot be created, the
            fetch fails, or the tree is incomplete
    """
    if local_source is not None:
        yield GenerationSession(source_dir=check_source(local_source), version=version)
        return

    try:
        scratch = tempfile.TemporaryDirectory(prefix="sodium-typegen-")
    except OSError as e:
        raise AcquisitionError(f"Could not create temp dir: {e}") from e

    with scratch as scratch_name:
        scratch_dir = Path(scratch_name)
        source_dir = check_source(source.fetch(version, scratch_dir))
        logger.debug("Using downloaded source tree %s", source_dir)
        yield GenerationSession(
            source_dir=source_dir,
            version=version,
            downloaded=True,
            scratch_dir=scratch_dir,
        )
    logger.debug("Removed scratch directory %s", scratch_dir)


__all__ = [
    "CatalogSource",
    "GenerationSession",
    "GithubArchiveSource",
    "check_minimum_version",
    "compare_version_numbers",
    "open_session",
]
