from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from dataclasses import dataclass
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def first_line(self) -> str:
        lines = (self.stdout or "").strip().splitlines()
        return lines[0].strip() if lines else ""


def format_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(a)) for a in argv)


def _decode(raw: bytes | None) -> str:
    # Binaries may print anything; undecodable bytes become U+FFFD.
    return (raw or b"").decode("utf-8", errors="replace")


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    timeout: float | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a binary with its output captured and logged.

    Output is decoded as UTF-8 with replacement, so a binary printing garbage
    yields unreadable text rather than an exception. OSError (missing or
    non-executable binary) and TimeoutExpired propagate; callers that treat
    absence as a normal state catch them.
    """

    argv_list = [str(a) for a in argv]
    logger.info("CMD %s", format_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    started = time.monotonic()
    p = subprocess.run(
        argv_list,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=cwd,
        env=dict(os.environ, **(env or {})),
        timeout=timeout,
    )
    result = CmdResult(argv=argv_list, returncode=p.returncode, stdout=_decode(p.stdout), stderr=_decode(p.stderr))
    logger.debug("CMD exit=%s after %.2fs", result.returncode, time.monotonic() - started)

    if result.stdout:
        logger.debug("STDOUT %s", result.stdout.strip())
    if result.stderr:
        logger.debug("STDERR %s", result.stderr.strip())

    if check and result.returncode != 0:
        raise RuntimeError(f"Command failed ({result.returncode}): {format_argv(argv_list)}\n{result.stderr}")

    return result
