from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple

from .config import InstallerConfig
from .lib.placement import InstallTarget
from .lib.platform_info import detect_arch, detect_os
from .lib.probe import TERRAFORM_VERSION_RE, CommandVersionProbe, LayoutVersionProbe, VersionProbe
from .lib.registry import ArtifactRegistry, HashiCorpReleases, HttpClient, ProviderRegistry


class ArtifactDefinition:
    """What differs between installable artifacts; the pipeline is shared."""

    name: str = ""
    display_name: str = ""
    layout: Tuple[str, ...] = ()
    binary_template: str = ""
    # Prefix of the binary inside the release zip.
    member_prefix: str = ""
    on_path: bool = False

    def target_for(self, root: Path, version: str, os_name: str, arch: str) -> InstallTarget:
        return InstallTarget(
            root=Path(root),
            version=version,
            os_name=os_name,
            arch=arch,
            layout=self.layout,
            binary_template=self.binary_template,
        )

    def requested_version(self, cfg: InstallerConfig) -> str:
        raise NotImplementedError

    def make_registry(self, cfg: InstallerConfig, http: HttpClient) -> ArtifactRegistry:
        raise NotImplementedError

    def make_probe(self, target: InstallTarget) -> VersionProbe:
        raise NotImplementedError


class TerraformArtifact(ArtifactDefinition):
    name = "terraform"
    display_name = "Terraform"
    layout = ("terraform",)
    binary_template = "terraform"
    member_prefix = "terraform"
    on_path = True

    def requested_version(self, cfg: InstallerConfig) -> str:
        return cfg.terraform_version

    def make_registry(self, cfg: InstallerConfig, http: HttpClient) -> ArtifactRegistry:
        return HashiCorpReleases(
            http,
            versions_url=cfg.terraform_versions_url,
            release_url=cfg.terraform_release_url,
        )

    def make_probe(self, target: InstallTarget) -> VersionProbe:
        # A binary built for another platform cannot be run here; trust the layout.
        if (target.os_name, target.arch) != (detect_os(), detect_arch()):
            return LayoutVersionProbe(target.binary_path, target.version)
        return CommandVersionProbe(target.binary_path, args=("version",), pattern=TERRAFORM_VERSION_RE)


class DatabricksProviderArtifact(ArtifactDefinition):
    """Databricks provider in Terraform's implied local mirror layout.

    Terraform discovers it from ``<root>/registry.terraform.io/databricks/databricks``
    when ``<root>`` is listed as a plugin directory (or is ``terraform.d/plugins``).
    """

    name = "provider"
    display_name = "Databricks Terraform provider"
    layout = ("registry.terraform.io", "databricks", "databricks")
    binary_template = "terraform-provider-databricks_v{version}"
    member_prefix = "terraform-provider-databricks"
    on_path = False

    def requested_version(self, cfg: InstallerConfig) -> str:
        return cfg.provider_version

    def make_registry(self, cfg: InstallerConfig, http: HttpClient) -> ArtifactRegistry:
        return ProviderRegistry(http, registry_url=cfg.provider_registry_url)

    def make_probe(self, target: InstallTarget) -> VersionProbe:
        return LayoutVersionProbe(target.binary_path, target.version)


ARTIFACTS: Dict[str, ArtifactDefinition] = {
    a.name: a for a in (TerraformArtifact(), DatabricksProviderArtifact())
}


def get_artifact(name: str) -> ArtifactDefinition:
    try:
        return ARTIFACTS[name]
    except KeyError:
        raise ValueError(f"Unknown artifact {name!r} (expected one of: {', '.join(ARTIFACTS)})") from None
