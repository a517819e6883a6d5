from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from ..errors import ResolutionError, ValidationError

logger = logging.getLogger(__name__)

LATEST = "latest"

SEMVER_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@dataclass(frozen=True)
class VersionSpec:
    """Either a literal semantic version or the ``latest`` sentinel."""

    raw: str

    @property
    def is_latest(self) -> bool:
        return self.raw == LATEST

    @classmethod
    def parse(cls, value: Optional[str]) -> "VersionSpec":
        v = (value or LATEST).strip()
        if v.lower() == LATEST:
            return cls(raw=LATEST)
        # Accept the common "v1.2.3" spelling, but store the bare version.
        if v[:1] in {"v", "V"}:
            logger.info("Normalized version %r to %r", v, v[1:])
            v = v[1:]
        validate_version(v)
        return cls(raw=v)


def is_valid_version(value: str) -> bool:
    return bool(SEMVER_RE.match(value or ""))


def is_prerelease(value: str) -> bool:
    m = SEMVER_RE.match(value or "")
    return bool(m and m.group("prerelease"))


def validate_version(value: str) -> str:
    if not is_valid_version(value):
        raise ValidationError(
            f"Invalid version {value!r}: expected MAJOR.MINOR.PATCH[-PRERELEASE] or 'latest'"
        )
    return value


def _prerelease_key(pre: str) -> Tuple[Tuple[int, int, str], ...]:
    # Numeric identifiers sort before alphanumeric ones (semver precedence rules).
    parts = []
    for ident in pre.split("."):
        if ident.isdigit():
            parts.append((0, int(ident), ""))
        else:
            parts.append((1, 0, ident))
    return tuple(parts)


def version_key(value: str) -> tuple:
    m = SEMVER_RE.match(value)
    if not m:
        raise ValidationError(f"Invalid version {value!r}")
    core = (int(m.group("major")), int(m.group("minor")), int(m.group("patch")))
    pre = m.group("prerelease")
    # A release sorts above any of its prereleases.
    if pre is None:
        return core + (1, ())
    return core + (0, _prerelease_key(pre))


def select_highest(candidates: Iterable[str], *, allow_prerelease: bool = False) -> Optional[str]:
    """Return the highest well-formed version; malformed entries are ignored."""

    usable: List[str] = []
    for c in candidates:
        c = str(c).strip()
        if not is_valid_version(c):
            logger.debug("Ignoring unusable version entry %r", c)
            continue
        if is_prerelease(c) and not allow_prerelease:
            continue
        usable.append(c)

    if not usable:
        return None
    return max(usable, key=version_key)


def resolve_version(
    spec: VersionSpec,
    list_versions: Callable[[], Iterable[str]],
    *,
    allow_prerelease: bool = False,
    artifact: str = "artifact",
) -> str:
    """Turn a VersionSpec into a literal version.

    Literal specs are returned unchanged and never call ``list_versions``.
    ``latest`` makes exactly one call to ``list_versions``.
    """

    if not spec.is_latest:
        return validate_version(spec.raw)

    remediation = f"Pass an explicit version (e.g. --version 1.7.5) to install {artifact} offline."
    try:
        candidates = list(list_versions())
    except ResolutionError:
        raise
    except Exception as e:
        raise ResolutionError(f"Unable to query available {artifact} versions: {e}. {remediation}") from e

    chosen = select_highest(candidates, allow_prerelease=allow_prerelease)
    if chosen is None:
        raise ResolutionError(f"No usable {artifact} version found in registry response. {remediation}")

    logger.info("Resolved latest %s version: %s", artifact, chosen)
    return chosen
