from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Optional, Pattern, Protocol, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


class VersionProbe(Protocol):
    """Answers "which version is installed here?"; None means not installed."""

    def query_version(self) -> Optional[str]:
        ...


class CommandVersionProbe:
    """Run ``<executable> <args>`` and match the first output line.

    A missing binary, a binary we cannot execute, a non-zero exit or output we
    do not recognize all mean "not installed".
    """

    def __init__(
        self,
        executable: Path,
        *,
        args: Sequence[str] = ("version",),
        pattern: Pattern[str],
        timeout: Optional[float] = 30.0,
    ) -> None:
        self.executable = Path(executable)
        self.args = tuple(args)
        self.pattern = pattern
        self.timeout = timeout

    def query_version(self) -> Optional[str]:
        if not self.executable.is_file():
            logger.info("No binary at %s", str(self.executable))
            return None

        try:
            r = run_cmd([str(self.executable), *self.args], check=False, timeout=self.timeout)
        except (OSError, subprocess.SubprocessError) as e:
            logger.info("Could not run %s (%s); treating as not installed", str(self.executable), e)
            return None

        if r.returncode != 0:
            logger.info("%s exited %s; treating as not installed", str(self.executable), r.returncode)
            return None

        m = self.pattern.match(r.first_line)
        if not m:
            logger.warning("Unrecognized version output %r; treating as not installed", r.first_line)
            return None
        return m.group("version")


class LayoutVersionProbe:
    """Version is implied by the presence of the versioned binary on disk."""

    def __init__(self, binary_path: Path, version: str) -> None:
        self.binary_path = Path(binary_path)
        self.version = version

    def query_version(self) -> Optional[str]:
        if self.binary_path.is_file():
            return self.version
        return None


TERRAFORM_VERSION_RE = re.compile(r"^Terraform v(?P<version>\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?)")
