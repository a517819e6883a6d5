from __future__ import annotations

import logging
import os
import shutil
import stat
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from ..errors import PlacementError
from .platform_info import exe_suffix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallTarget:
    """Deterministic, versioned location of one installed binary.

    directory = <root>/<layout...>/<version>/<os>_<arch>
    binary    = directory/<binary_template.format(version=...)>[.exe]
    """

    root: Path
    version: str
    os_name: str
    arch: str
    layout: Tuple[str, ...]
    binary_template: str

    @property
    def platform_segment(self) -> str:
        return f"{self.os_name}_{self.arch}"

    @property
    def directory(self) -> Path:
        return Path(self.root).joinpath(*self.layout, self.version, self.platform_segment)

    @property
    def binary_name(self) -> str:
        return self.binary_template.format(version=self.version) + exe_suffix(self.os_name)

    @property
    def binary_path(self) -> Path:
        return self.directory / self.binary_name


@dataclass(frozen=True)
class PlacementResult:
    path: Path
    already_present: bool


def _select_member(zf: zipfile.ZipFile, member_prefix: str) -> zipfile.ZipInfo:
    candidates = [
        m
        for m in zf.infolist()
        if not m.is_dir() and Path(m.filename).name.startswith(member_prefix)
    ]
    if not candidates:
        raise PlacementError(f"Archive contains no file starting with {member_prefix!r}")
    if len(candidates) > 1:
        names = ", ".join(sorted(m.filename for m in candidates))
        raise PlacementError(f"Archive contains several candidate binaries: {names}")
    return candidates[0]


def _make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def place_archive(
    archive: Path,
    target: InstallTarget,
    *,
    member_prefix: str,
    staging_dir: Path,
    force: bool = False,
) -> PlacementResult:
    """Extract the binary from a verified zip archive into its versioned path.

    Only the single member whose name starts with ``member_prefix`` is
    extracted; LICENSE/README/CHANGELOG files shipped alongside it are not.
    On success exactly one file exists in ``target.directory``.
    """

    directory = target.directory
    binary_path = target.binary_path

    if binary_path.is_file() and not force:
        logger.info("Binary already present at %s; not overwriting", str(binary_path))
        return PlacementResult(path=binary_path, already_present=True)

    if directory.exists():
        if force:
            logger.info("Removing existing install dir %s (force)", str(directory))
        else:
            logger.warning("Removing stale install dir without binary: %s", str(directory))
        shutil.rmtree(directory)

    staging_dir.mkdir(parents=True, exist_ok=True)
    try:
        with zipfile.ZipFile(archive) as zf:
            member = _select_member(zf, member_prefix)
            extracted_name = Path(member.filename).name
            staged = staging_dir / extracted_name
            with zf.open(member) as src, staged.open("wb") as dst:
                shutil.copyfileobj(src, dst)
    except zipfile.BadZipFile as e:
        raise PlacementError(f"Archive {archive.name} is not a valid zip file") from e

    directory.mkdir(parents=True, exist_ok=True)
    if extracted_name != target.binary_name:
        logger.info("Renaming extracted %s -> %s", extracted_name, target.binary_name)
    shutil.move(str(staged), str(binary_path))

    if target.os_name != "windows":
        _make_executable(binary_path)

    files = [p for p in directory.iterdir() if p.is_file()]
    if not binary_path.is_file() or len(files) != 1:
        raise PlacementError(
            f"Expected exactly one binary in {directory}, found: {sorted(p.name for p in files)}"
        )

    logger.info("Placed %s", str(binary_path))
    return PlacementResult(path=binary_path, already_present=False)
