from __future__ import annotations

from pathlib import Path

import pytest

from helpers import FakeHttp, add_provider_release, sha256_hex
from tf_installer.errors import ChecksumMismatchError, ChecksumMissingError, DownloadError
from tf_installer.lib.download import (
    download_and_verify,
    expected_checksum,
    parse_shasums,
    scratch_workspace,
    verify_archive,
)
from tf_installer.lib.registry import DownloadDescriptor


def _descriptor(http: FakeHttp, version: str) -> DownloadDescriptor:
    route = next(v for k, v in http.json_routes.items() if k.endswith(f"/{version}/download/windows/amd64"))
    return DownloadDescriptor(
        archive_url=route["download_url"],
        shasums_url=route["shasums_url"],
        filename=route["filename"],
    )


def test_parse_shasums_handles_binary_marker_and_blank_lines() -> None:
    text = "abc123  a.zip\n\nDEF456 *b.zip\nmalformed\n"
    assert parse_shasums(text) == {"a.zip": "abc123", "b.zip": "DEF456"}


def test_expected_checksum_requires_exact_filename() -> None:
    manifest = {"terraform_1.7.5_windows_amd64.zip": "aa"}
    with pytest.raises(ChecksumMissingError):
        expected_checksum(manifest, "terraform_1.7.5_windows_amd64.zip.sig")


def test_verify_archive_is_case_insensitive(tmp_path: Path) -> None:
    archive = tmp_path / "a.zip"
    archive.write_bytes(b"payload")
    digest = sha256_hex(b"payload").upper()
    assert verify_archive(archive, f"{digest}  a.zip\n", "a.zip") == digest.lower()


def test_verify_archive_rejects_any_mismatch(tmp_path: Path) -> None:
    archive = tmp_path / "a.zip"
    archive.write_bytes(b"payload")
    with pytest.raises(ChecksumMismatchError) as exc:
        verify_archive(archive, f"{'a' * 64}  a.zip\n", "a.zip")
    assert exc.value.expected == "a" * 64
    assert exc.value.actual == sha256_hex(b"payload")


def test_scratch_workspace_is_unique_and_removed(tmp_path: Path) -> None:
    with scratch_workspace(str(tmp_path)) as one, scratch_workspace(str(tmp_path)) as two:
        assert one != two
        (one / "file").write_text("x")
    assert list(tmp_path.iterdir()) == []


def test_download_and_verify_returns_archive(tmp_path: Path, fake_http: FakeHttp) -> None:
    filename = add_provider_release(fake_http, "1.36.1")
    with scratch_workspace(str(tmp_path)) as scratch:
        archive = download_and_verify(_descriptor(fake_http, "1.36.1"), fake_http, scratch)
        assert archive == scratch / filename
        assert archive.is_file()
    assert list(tmp_path.iterdir()) == []


def test_checksum_mismatch_removes_scratch(tmp_path: Path, fake_http: FakeHttp) -> None:
    add_provider_release(fake_http, "1.36.1", checksum="a" * 64)
    seen = []
    with pytest.raises(ChecksumMismatchError):
        with scratch_workspace(str(tmp_path)) as scratch:
            seen.append(scratch)
            download_and_verify(_descriptor(fake_http, "1.36.1"), fake_http, scratch)
    assert not seen[0].exists()
    assert list(tmp_path.iterdir()) == []


def test_missing_manifest_entry_is_fatal(tmp_path: Path, fake_http: FakeHttp) -> None:
    add_provider_release(fake_http, "1.36.1", list_in_shasums=False)
    with pytest.raises(ChecksumMissingError):
        with scratch_workspace(str(tmp_path)) as scratch:
            download_and_verify(_descriptor(fake_http, "1.36.1"), fake_http, scratch)
    assert list(tmp_path.iterdir()) == []


def test_download_failure_removes_scratch(tmp_path: Path, fake_http: FakeHttp) -> None:
    descriptor = DownloadDescriptor(
        archive_url="https://files.example/missing.zip",
        shasums_url="https://files.example/SHA256SUMS",
        filename="missing.zip",
    )
    with pytest.raises(DownloadError):
        with scratch_workspace(str(tmp_path)) as scratch:
            download_and_verify(descriptor, fake_http, scratch)
    assert list(tmp_path.iterdir()) == []


def test_binary_manifest_is_missing_checksum(tmp_path: Path, fake_http: FakeHttp) -> None:
    add_provider_release(fake_http, "1.36.1")
    descriptor = _descriptor(fake_http, "1.36.1")
    fake_http.files[descriptor.shasums_url] = b"\xff\xfe\x00garbage"

    with pytest.raises(ChecksumMissingError, match="not a SHA256SUMS"):
        with scratch_workspace(str(tmp_path)) as scratch:
            download_and_verify(descriptor, fake_http, scratch)
    assert list(tmp_path.iterdir()) == []
