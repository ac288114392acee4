from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from .lib.paths import DEFAULT_LOG_PATH


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self._max_level


def configure_logging(
    log_path: Optional[str] = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Configure logging.

    Console output keeps the old bootstrap look: `[HH:MM:SS] message` on
    stdout, `[WARNING] message` on stderr. The log file gets full timestamps and
    debug output (every command run).

    Notes:
    - If log_path cannot be written, we fall back to a file in the current
      working directory.
    - log_path=None disables the file handler.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_fedora_bootstrap_configured", False):
        return getattr(logger, "_fedora_bootstrap_log_path", log_path)

    chosen_path: Optional[str] = None
    handlers: list[logging.Handler] = []

    if log_path:
        file_fmt = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        try:
            Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
            file_handler: logging.Handler = logging.FileHandler(log_path)
            chosen_path = log_path
        except OSError:
            # Fall back to a writable location.
            fallback = str(Path.cwd() / "fedora-bootstrap.log")
            file_handler = logging.FileHandler(fallback)
            chosen_path = fallback
        file_handler.setFormatter(file_fmt)
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    if also_console:
        out = logging.StreamHandler(sys.stdout)
        out.setFormatter(logging.Formatter(fmt="[%(asctime)s] %(message)s", datefmt="%H:%M:%S"))
        out.setLevel(level)
        out.addFilter(_MaxLevelFilter(logging.INFO))
        handlers.append(out)

        err = logging.StreamHandler(sys.stderr)
        err.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(message)s"))
        err.setLevel(logging.WARNING)
        handlers.append(err)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_fedora_bootstrap_configured", True)
    setattr(logger, "_fedora_bootstrap_log_path", chosen_path)

    logging.getLogger(__name__).debug("Logging initialized (requested=%s, actual=%s)", log_path, chosen_path)
    return chosen_path
