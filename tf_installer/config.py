from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .lib.platform_info import detect_arch, detect_os, normalize_arch, normalize_os

DEFAULT_INSTALL_ROOT = "~/.tf-installer"
DEFAULT_TERRAFORM_VERSIONS_URL = "https://releases.hashicorp.com/terraform/index.json"
DEFAULT_TERRAFORM_RELEASE_URL = "https://releases.hashicorp.com/terraform/{version}/index.json"
DEFAULT_PROVIDER_REGISTRY_URL = "https://registry.terraform.io/v1/providers/databricks/databricks"


@dataclass(frozen=True)
class InstallerConfig:
    raw: Dict[str, Any]

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    @property
    def install_root(self) -> Path:
        return Path(str(self.raw.get("install_root") or DEFAULT_INSTALL_ROOT)).expanduser()

    @property
    def allow_prerelease(self) -> bool:
        return bool(self.raw.get("allow_prerelease", False))

    @property
    def http_timeout(self) -> Optional[float]:
        t = self.raw.get("http_timeout")
        return float(t) if t is not None else None

    @property
    def os_name(self) -> str:
        v = self.raw.get("os")
        return normalize_os(str(v)) if v else detect_os()

    @property
    def arch(self) -> str:
        v = self.raw.get("arch")
        return normalize_arch(str(v)) if v else detect_arch()

    @property
    def terraform_version(self) -> str:
        return str(self._section("terraform").get("version") or "latest")

    @property
    def terraform_versions_url(self) -> str:
        return str(self._section("terraform").get("versions_url") or DEFAULT_TERRAFORM_VERSIONS_URL)

    @property
    def terraform_release_url(self) -> str:
        return str(self._section("terraform").get("release_url") or DEFAULT_TERRAFORM_RELEASE_URL)

    @property
    def provider_version(self) -> str:
        return str(self._section("provider").get("version") or "latest")

    @property
    def provider_registry_url(self) -> str:
        return str(self._section("provider").get("registry_url") or DEFAULT_PROVIDER_REGISTRY_URL)

    def with_overrides(self, **overrides: Any) -> "InstallerConfig":
        """Return a copy with top-level keys replaced (None values are ignored)."""

        raw = dict(self.raw)
        raw.update({k: v for k, v in overrides.items() if v is not None})
        return InstallerConfig(raw=raw)


def load_config(path: Optional[str]) -> InstallerConfig:
    if not path:
        return InstallerConfig(raw={})

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("installer config must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping/object")

    return InstallerConfig(raw=raw)
