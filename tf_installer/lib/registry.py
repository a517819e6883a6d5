from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import requests

from ..errors import DownloadError

logger = logging.getLogger(__name__)

USER_AGENT = "tf-installer/1.0"
CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class DownloadDescriptor:
    archive_url: str
    shasums_url: str
    filename: str


class ArtifactRegistry(Protocol):
    """Where versions are listed and download descriptors are resolved."""

    def list_versions(self) -> List[str]:
        ...

    def describe(self, version: str, os_name: str, arch: str) -> DownloadDescriptor:
        ...


class HttpClient:
    """Thin wrapper around a requests.Session.

    Every failure (connection, HTTP status, bad JSON) surfaces as DownloadError.
    No retries are performed.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None) -> None:
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self.timeout = timeout

    def get_json(self, url: str) -> Any:
        logger.info("GET %s", url)
        try:
            response = self.session.get(url, headers={"Accept": "application/json"}, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise DownloadError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise DownloadError(f"Response from {url} is not valid JSON") from e

    def download(self, url: str, dest: Path) -> Path:
        logger.info("Downloading %s -> %s", url, str(dest))
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                with dest.open("wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as e:
            raise DownloadError(f"Download of {url} failed: {e}") from e
        return dest


class HashiCorpReleases:
    """releases.hashicorp.com index for the Terraform CLI."""

    def __init__(self, http: HttpClient, *, versions_url: str, release_url: str) -> None:
        self.http = http
        self.versions_url = versions_url
        self.release_url = release_url

    def list_versions(self) -> List[str]:
        data = self.http.get_json(self.versions_url)
        versions = (data or {}).get("versions") if isinstance(data, dict) else None
        if isinstance(versions, dict):
            return list(versions.keys())
        if isinstance(versions, list):
            return [str(v.get("version") if isinstance(v, dict) else v) for v in versions]
        return []

    def describe(self, version: str, os_name: str, arch: str) -> DownloadDescriptor:
        url = self.release_url.format(version=version)
        data = self.http.get_json(url)
        if not isinstance(data, dict):
            raise DownloadError(f"Unexpected release metadata from {url}")

        builds = data.get("builds")
        build = next(
            (
                b
                for b in (builds if isinstance(builds, list) else [])
                if isinstance(b, dict) and b.get("os") == os_name and b.get("arch") == arch
            ),
            None,
        )
        if not build:
            raise DownloadError(f"Terraform {version} has no build for {os_name}_{arch}")

        archive_url = build.get("url")
        if not isinstance(archive_url, str) or not archive_url:
            raise DownloadError(f"Terraform {version} build for {os_name}_{arch} has no download url")

        shasums = data.get("shasums") or f"terraform_{version}_SHA256SUMS"
        base = url.rsplit("/", 1)[0]
        return DownloadDescriptor(
            archive_url=archive_url,
            shasums_url=f"{base}/{shasums}",
            filename=str(build.get("filename") or archive_url.rsplit("/", 1)[-1]),
        )


class ProviderRegistry:
    """Terraform registry protocol (v1 providers API) for a single provider."""

    def __init__(self, http: HttpClient, *, registry_url: str) -> None:
        self.http = http
        self.registry_url = registry_url.rstrip("/")

    def list_versions(self) -> List[str]:
        data = self.http.get_json(f"{self.registry_url}/versions")
        entries = (data or {}).get("versions") if isinstance(data, dict) else None
        out: List[str] = []
        for entry in entries or []:
            if isinstance(entry, dict) and entry.get("version"):
                out.append(str(entry["version"]))
        return out

    def describe(self, version: str, os_name: str, arch: str) -> DownloadDescriptor:
        url = f"{self.registry_url}/{version}/download/{os_name}/{arch}"
        data: Dict[str, Any] = self.http.get_json(url)
        try:
            return DownloadDescriptor(
                archive_url=str(data["download_url"]),
                shasums_url=str(data["shasums_url"]),
                filename=str(data["filename"]),
            )
        except (KeyError, TypeError) as e:
            raise DownloadError(f"Incomplete download metadata from {url}: missing {e}") from e
