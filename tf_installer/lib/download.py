from __future__ import annotations

import hashlib
import logging
import shutil
import tempfile
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Protocol

from ..errors import ChecksumMismatchError, ChecksumMissingError
from .registry import DownloadDescriptor

logger = logging.getLogger(__name__)


class Downloader(Protocol):
    def download(self, url: str, dest: Path) -> Path:
        ...


@contextmanager
def scratch_workspace(parent: Optional[str] = None) -> Iterator[Path]:
    """Uniquely named scratch directory, removed on every exit path."""

    root = Path(parent) if parent else Path(tempfile.gettempdir())
    root.mkdir(parents=True, exist_ok=True)
    scratch = root / f"tf-installer-{uuid.uuid4().hex}"
    scratch.mkdir()
    logger.debug("Created scratch dir %s", str(scratch))
    try:
        yield scratch
    finally:
        shutil.rmtree(scratch, ignore_errors=True)
        logger.debug("Removed scratch dir %s", str(scratch))


def parse_shasums(text: str) -> Dict[str, str]:
    """Parse SHA256SUMS content (``<hex>  <filename>`` per line)."""

    out: Dict[str, str] = {}
    for line in text.splitlines():
        parts = line.strip().split()
        if len(parts) < 2:
            continue
        digest, name = parts[0], parts[-1]
        # sha256sum marks binary-mode entries with a leading '*'.
        out[name.lstrip("*")] = digest
    return out


def expected_checksum(manifest: Dict[str, str], filename: str) -> str:
    try:
        return manifest[filename]
    except KeyError:
        raise ChecksumMissingError(
            f"{filename} is not listed in the checksum manifest; registry metadata is inconsistent"
        ) from None


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def verify_archive(archive: Path, manifest_text: str, filename: str) -> str:
    expected = expected_checksum(parse_shasums(manifest_text), filename)
    actual = sha256_file(archive)
    if actual.lower() != expected.strip().lower():
        raise ChecksumMismatchError(filename, expected, actual)
    logger.info("Checksum OK for %s (sha256=%s)", filename, actual)
    return actual


def download_and_verify(descriptor: DownloadDescriptor, http: Downloader, scratch: Path) -> Path:
    """Fetch archive + manifest into scratch and return the verified archive path."""

    archive = http.download(descriptor.archive_url, scratch / descriptor.filename)
    manifest = http.download(descriptor.shasums_url, scratch / "SHA256SUMS")
    try:
        manifest_text = manifest.read_bytes().decode("utf-8")
    except UnicodeDecodeError:
        raise ChecksumMissingError(f"Checksum manifest {descriptor.shasums_url} is not a SHA256SUMS text file") from None
    verify_archive(archive, manifest_text, descriptor.filename)
    return archive
