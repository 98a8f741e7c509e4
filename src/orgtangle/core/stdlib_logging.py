from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from orgtangle.core.utils.io import ensure_parent_dir

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_INSTALLED_HANDLER: logging.Handler | None = None
_INSTALLED_TARGET: str | None = None
_JSON_MODE_NULL_HANDLER_INSTALLED: bool = False


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(*, level: str = "WARNING", log_path: Optional[Path] = None) -> None:
    """Install the orgtangle handler on the ``orgtangle`` logger.

    Writes to ``log_path`` when given, otherwise to stderr. Idempotent
    per-process: reconfiguring with the same target only updates the level.
    """
    global _INSTALLED_HANDLER, _INSTALLED_TARGET

    target = str(Path(log_path).resolve()) if log_path else "<stderr>"
    pkg_logger = logging.getLogger("orgtangle")
    pkg_logger.setLevel(_level_from_name(level))

    if _INSTALLED_HANDLER is not None and _INSTALLED_TARGET == target:
        _INSTALLED_HANDLER.setLevel(_level_from_name(level))
        return

    if _INSTALLED_HANDLER is not None:
        pkg_logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        _INSTALLED_HANDLER = None

    handler: logging.Handler
    if log_path:
        ensure_parent_dir(Path(target))
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(_FORMAT))
    pkg_logger.addHandler(handler)

    _INSTALLED_HANDLER = handler
    _INSTALLED_TARGET = target


def suppress_lastresort_in_json_mode() -> None:
    """Keep stdlib's implicit ``lastResort`` handler from writing to stderr.

    ``--json`` output must stay machine-readable; a NullHandler on the root
    logger stops WARNING+ records from falling through when nothing else is
    configured.
    """
    global _JSON_MODE_NULL_HANDLER_INSTALLED

    root = logging.getLogger()
    if root.handlers or _JSON_MODE_NULL_HANDLER_INSTALLED:
        return
    root.addHandler(logging.NullHandler())
    _JSON_MODE_NULL_HANDLER_INSTALLED = True


def reset_logging_for_tests() -> None:
    """Test-only: remove handlers installed by this module."""
    global _INSTALLED_HANDLER, _INSTALLED_TARGET, _JSON_MODE_NULL_HANDLER_INSTALLED
    if _INSTALLED_HANDLER is not None:
        logging.getLogger("orgtangle").removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h, logging.NullHandler):
            root.removeHandler(h)
    logging.getLogger("orgtangle").setLevel(logging.NOTSET)
    _INSTALLED_HANDLER = None
    _INSTALLED_TARGET = None
    _JSON_MODE_NULL_HANDLER_INSTALLED = False


__all__ = ["configure_logging", "suppress_lastresort_in_json_mode", "reset_logging_for_tests"]
