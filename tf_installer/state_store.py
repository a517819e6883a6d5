from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

# Receipts kept per artifact; older entries are dropped.
MAX_RECEIPTS = 50


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def load_state(path: str) -> Dict[str, Any]:
    p = Path(path).expanduser()
    if not p.exists():
        return {}

    if _detect_format(p) in {"yaml", "yml"}:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    else:
        data = json.loads(p.read_text(encoding="utf-8"))

    if not isinstance(data, dict):
        raise ValueError(f"State file must be an object/dict, got {type(data)}")

    return data


def save_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)

    if _detect_format(p) in {"yaml", "yml"}:
        p.write_text(yaml.safe_dump(state, sort_keys=False) + "\n", encoding="utf-8")
    else:
        p.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def ensure_defaults(state: Dict[str, Any]) -> Dict[str, Any]:
    """Fill required keys with defaults (without overriding existing values)."""

    state.setdefault("version", 1)
    state.setdefault("receipts", {})
    state.setdefault("errors", [])
    return state


def record_receipt(state: Dict[str, Any], outcome: Dict[str, Any], *, now: Optional[float] = None) -> None:
    """Append an install outcome. Receipts are an audit trail, never an input."""

    entry = dict(outcome)
    entry.setdefault("ts", time.time() if now is None else now)
    receipts = state.setdefault("receipts", {}).setdefault(str(outcome.get("artifact")), [])
    receipts.append(entry)
    del receipts[:-MAX_RECEIPTS]


def record_error(state: Dict[str, Any], *, artifact: str, step: Optional[str], error: str) -> None:
    state.setdefault("errors", []).append(
        {"artifact": artifact, "step": step, "error": error, "ts": time.time()}
    )
    del state["errors"][:-MAX_RECEIPTS]


def set_aside_state(path: str) -> Path:
    """Rename an unreadable state file to ``<name>.corrupt`` so a fresh one can be written."""

    p = Path(path).expanduser()
    aside = p.with_name(p.name + ".corrupt")
    p.replace(aside)
    return aside
