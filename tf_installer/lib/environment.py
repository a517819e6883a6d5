from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import MutableMapping, Optional, Protocol

logger = logging.getLogger(__name__)


class EnvironmentMutator(Protocol):
    """Makes an installed directory usable by the rest of the machine."""

    def apply(self, directory: Path) -> None:
        ...

    def verify(self, directory: Path) -> bool:
        ...


def _norm(p: str) -> str:
    return os.path.normcase(os.path.normpath(p))


class ProcessPathEnvironment:
    """Prepend the install dir to PATH of the current process (idempotent).

    Machine-wide PATH (registry, shell profiles) is deliberately untouched;
    the caller is told which directory to add.
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None) -> None:
        self.environ = os.environ if environ is None else environ

    def _entries(self) -> list[str]:
        return [p for p in self.environ.get("PATH", "").split(os.pathsep) if p]

    def apply(self, directory: Path) -> None:
        entries = self._entries()
        wanted = str(directory)
        if _norm(wanted) in {_norm(e) for e in entries}:
            logger.info("PATH already contains %s", wanted)
            return
        self.environ["PATH"] = os.pathsep.join([wanted, *entries])
        logger.info("Prepended %s to PATH (current process only)", wanted)

    def verify(self, directory: Path) -> bool:
        return _norm(str(directory)) in {_norm(e) for e in self._entries()}


class NoopEnvironment:
    """For artifacts found by Terraform itself (provider plugin dirs)."""

    def apply(self, directory: Path) -> None:
        logger.debug("No environment changes needed for %s", str(directory))

    def verify(self, directory: Path) -> bool:
        return True
