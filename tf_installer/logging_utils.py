from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

DEFAULT_LOG_PATH = "~/.tf-installer/tf-installer.log"
FALLBACK_LOG_NAME = "tf-installer.log"

# Handlers owned by the installer carry this name so repeat calls can find them.
HANDLER_NAME = "tf-installer"


def _installer_handlers(root: logging.Logger) -> List[logging.Handler]:
    return [h for h in root.handlers if h.get_name() == HANDLER_NAME]


def _open_log_file(log_path: str) -> logging.FileHandler:
    """Open the requested log file, or ./tf-installer.log if that is not possible."""

    requested = Path(log_path).expanduser()
    try:
        requested.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(requested, encoding="utf-8")
    except OSError as e:
        fallback = Path.cwd() / FALLBACK_LOG_NAME
        logging.getLogger(__name__).warning("Cannot log to %s (%s); using %s", str(requested), e, str(fallback))
        return logging.FileHandler(fallback, encoding="utf-8")


def configure_logging(
    log_path: Optional[str] = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Attach the installer's log handlers to the root logger.

    ``log_path=None`` logs to the console only and touches no files. Calling
    this again only adjusts the level. Returns the log file actually written,
    or None when there is none.
    """

    root = logging.getLogger()
    root.setLevel(level)

    existing = _installer_handlers(root)
    if existing:
        files = [h for h in existing if isinstance(h, logging.FileHandler)]
        return files[0].baseFilename if files else None

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    handlers: List[logging.Handler] = []
    if also_console:
        handlers.append(logging.StreamHandler())
    file_handler = _open_log_file(log_path) if log_path else None
    if file_handler is not None:
        handlers.append(file_handler)

    for h in handlers:
        h.set_name(HANDLER_NAME)
        h.setFormatter(fmt)
        root.addHandler(h)

    chosen = file_handler.baseFilename if file_handler is not None else None
    logging.getLogger(__name__).info("Logging initialized (file=%s)", chosen or "none")
    return chosen
