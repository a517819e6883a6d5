from __future__ import annotations

from pathlib import Path

import pytest

from tf_installer.config import DEFAULT_PROVIDER_REGISTRY_URL, InstallerConfig, load_config
from tf_installer.errors import ConfigError


def test_defaults_without_config_file() -> None:
    cfg = load_config(None)
    assert cfg.terraform_version == "latest"
    assert cfg.provider_version == "latest"
    assert cfg.provider_registry_url == DEFAULT_PROVIDER_REGISTRY_URL
    assert cfg.allow_prerelease is False
    assert cfg.http_timeout is None
    assert cfg.install_root == Path("~/.tf-installer").expanduser()


def test_loads_yaml(tmp_path: Path) -> None:
    p = tmp_path / "installer.yml"
    p.write_text(
        "install_root: /opt/tf\n"
        "allow_prerelease: true\n"
        "http_timeout: 30\n"
        "os: Windows\n"
        "arch: x86_64\n"
        "terraform:\n"
        "  version: 1.7.5\n",
        encoding="utf-8",
    )
    cfg = load_config(str(p))
    assert cfg.install_root == Path("/opt/tf")
    assert cfg.allow_prerelease is True
    assert cfg.http_timeout == 30.0
    assert cfg.os_name == "windows"
    assert cfg.arch == "amd64"
    assert cfg.terraform_version == "1.7.5"
    assert cfg.provider_version == "latest"


def test_overrides_ignore_none() -> None:
    cfg = InstallerConfig(raw={"install_root": "/a", "arch": "arm64"})
    cfg2 = cfg.with_overrides(install_root="/b", arch=None)
    assert cfg2.install_root == Path("/b")
    assert cfg2.arch == "arm64"
    assert cfg.install_root == Path("/a")


@pytest.mark.parametrize(
    "name, content",
    [
        ("installer.json", "{}"),
        ("installer.yaml", "- a\n- b\n"),
        ("installer.yaml", "key: [unclosed\n"),
    ],
)
def test_bad_config_files(tmp_path: Path, name: str, content: str) -> None:
    p = tmp_path / name
    p.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(p))


def test_missing_named_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "nope.yaml"))
