from __future__ import annotations

from enum import Enum
from typing import Optional


class InstallAction(str, Enum):
    SKIP = "skip"
    INSTALL = "install"


def decide_install(requested: str, installed: Optional[str], force: bool) -> InstallAction:
    """Skip only when the exact requested version is already installed and not forced.

    Plain string equality; no version-range matching.
    """

    if installed is not None and installed == requested and not force:
        return InstallAction.SKIP
    return InstallAction.INSTALL
