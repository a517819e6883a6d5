from .step_10_resolve_version import ResolveVersionStep
from .step_20_probe_installed import ProbeInstalledStep
from .step_30_decide import DecideStep
from .step_40_describe_download import DescribeDownloadStep
from .step_50_download_verify import DownloadVerifyStep
from .step_60_place_binary import PlaceBinaryStep
from .step_70_verify_install import VerifyInstallStep
from .step_80_configure_environment import ConfigureEnvironmentStep

__all__ = [
    "ResolveVersionStep",
    "ProbeInstalledStep",
    "DecideStep",
    "DescribeDownloadStep",
    "DownloadVerifyStep",
    "PlaceBinaryStep",
    "VerifyInstallStep",
    "ConfigureEnvironmentStep",
]
