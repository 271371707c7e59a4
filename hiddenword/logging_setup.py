"""Centralised logging initialisation for hiddenword.

- Configures a Rich console handler and a rotating file handler.
- Avoids duplicate handlers on repeated calls.
- Provides `TURN_ID_VAR` so every record carries the turn it belongs to.
"""
from __future__ import annotations

import logging
import os
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.logging import RichHandler

# Turn id of the current match step, set by the CLI / turn controller
TURN_ID_VAR: ContextVar[str] = ContextVar("turn_id", default="-")


class _TurnIdFilter(logging.Filter):
    """Adds `turn_id` from the ContextVar to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.turn_id = TURN_ID_VAR.get()
        return True


def default_log_path() -> str:
    """Default log file: `hiddenword.log` in the repository root.

    Can be overridden with the `HIDDENWORD_LOG_PATH` environment variable.
    """

    env = os.getenv("HIDDENWORD_LOG_PATH")
    if env:
        return env
    root_dir = Path(__file__).resolve().parents[1]
    return str(root_dir / "hiddenword.log")


def configure_logging(*, log_path: str | None = None, verbose: bool = False) -> logging.Logger:
    """Initialises logging once and returns the project logger.

    - Rich on the console (readable tracebacks)
    - Rotating file handler (~1 MB, 5 backups)
    - Format includes `turn_id` from `TURN_ID_VAR`
    """

    root = logging.getLogger()
    if root.handlers:
        return logging.getLogger("hiddenword")

    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    turn_filter = _TurnIdFilter()

    # Console
    ch = RichHandler(rich_tracebacks=True)
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.addFilter(turn_filter)
    ch.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(ch)

    # Rotating file
    try:
        path = log_path or default_log_path()
        fh = RotatingFileHandler(path, maxBytes=1_000_000, backupCount=5, encoding="utf-8")
    except OSError:
        # Without a writable file keep at least the console
        return logging.getLogger("hiddenword")
    fh.setLevel(logging.DEBUG)
    fh.addFilter(turn_filter)
    fh.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s [turn=%(turn_id)s] %(message)s")
    )
    root.addHandler(fh)

    return logging.getLogger("hiddenword")
