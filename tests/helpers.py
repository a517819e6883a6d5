"""Test helpers: an in-memory registry/download backend and zip builders."""

from __future__ import annotations

import hashlib
import io
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from tf_installer.errors import DownloadError

PROVIDER_REGISTRY = "https://registry.example/v1/providers/databricks/databricks"
TERRAFORM_INDEX = "https://releases.example/terraform/index.json"
TERRAFORM_RELEASE = "https://releases.example/terraform/{version}/index.json"


class FakeHttp:
    """Stands in for HttpClient; records every call, never touches the network."""

    def __init__(self) -> None:
        self.json_routes: Dict[str, Any] = {}
        self.files: Dict[str, bytes] = {}
        self.calls: List[Tuple[str, str]] = []

    def get_json(self, url: str) -> Any:
        self.calls.append(("GET", url))
        if url not in self.json_routes:
            raise DownloadError(f"Request to {url} failed: 404")
        return self.json_routes[url]

    def download(self, url: str, dest: Path) -> Path:
        self.calls.append(("DOWNLOAD", url))
        if url not in self.files:
            raise DownloadError(f"Download of {url} failed: 404")
        dest.write_bytes(self.files[url])
        return dest


def make_zip(members: Dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def add_provider_release(
    http: FakeHttp,
    version: str,
    *,
    os_name: str = "windows",
    arch: str = "amd64",
    members: Optional[Dict[str, bytes]] = None,
    checksum: Optional[str] = None,
    list_in_shasums: bool = True,
) -> str:
    """Publish one provider build on the fake registry; returns the archive filename."""

    filename = f"terraform-provider-databricks_{version}_{os_name}_{arch}.zip"
    suffix = ".exe" if os_name == "windows" else ""
    archive = make_zip(
        members
        if members is not None
        else {
            f"terraform-provider-databricks_v{version}{suffix}": b"provider-binary",
            "CHANGELOG.md": b"# changes\n",
            "LICENSE": b"license\n",
        }
    )
    base = f"https://files.example/databricks/{version}"
    shasums_lines = [f"{'0' * 64}  terraform-provider-databricks_{version}_linux_arm64.zip"]
    if list_in_shasums:
        shasums_lines.append(f"{checksum or sha256_hex(archive)}  {filename}")

    http.files[f"{base}/{filename}"] = archive
    http.files[f"{base}/SHA256SUMS"] = ("\n".join(shasums_lines) + "\n").encode()
    http.json_routes[f"{PROVIDER_REGISTRY}/{version}/download/{os_name}/{arch}"] = {
        "os": os_name,
        "arch": arch,
        "filename": filename,
        "download_url": f"{base}/{filename}",
        "shasums_url": f"{base}/SHA256SUMS",
    }
    versions = http.json_routes.setdefault(f"{PROVIDER_REGISTRY}/versions", {"versions": []})
    versions["versions"].append({"version": version, "platforms": [{"os": os_name, "arch": arch}]})
    return filename


def add_terraform_release(http: FakeHttp, version: str, *, os_name: str = "linux", arch: str = "amd64") -> str:
    filename = f"terraform_{version}_{os_name}_{arch}.zip"
    suffix = ".exe" if os_name == "windows" else ""
    archive = make_zip({f"terraform{suffix}": b"terraform-binary", "LICENSE.txt": b"license\n"})
    base = f"https://releases.example/terraform/{version}"
    shasums = f"terraform_{version}_SHA256SUMS"

    http.files[f"{base}/{filename}"] = archive
    http.files[f"{base}/{shasums}"] = f"{sha256_hex(archive)}  {filename}\n".encode()
    http.json_routes[TERRAFORM_RELEASE.format(version=version)] = {
        "name": "terraform",
        "version": version,
        "shasums": shasums,
        "builds": [
            {"os": os_name, "arch": arch, "filename": filename, "url": f"{base}/{filename}"},
        ],
    }
    index = http.json_routes.setdefault(TERRAFORM_INDEX, {"name": "terraform", "versions": {}})
    index["versions"][version] = {"version": version}
    return filename


