"""Session log file under platformdirs user_log_dir.

Modules log through ``logging.getLogger(__name__)``. Nothing is attached to
the ``pomodoro_cli`` logger until ``get_logger`` is first called from the CLI;
from then on every record in the package goes to one rotating file. The
timer owns the terminal while it runs, so nothing is logged to the console.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "pomodoro_cli"
_LOG_FILE = "pomodoro.log"
_MAX_BYTES = 1024 * 1024  # one session logs a few lines per phase change
_BACKUP_COUNT = 2

_LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(threadName)s %(message)s"

_package_logger: logging.Logger | None = None


def log_file_path() -> Path:
    """Where session logs are written."""
    return Path(user_log_dir(_APP_NAME)) / _LOG_FILE


def _install_file_handler() -> logging.Logger:
    path = log_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    package_logger = logging.getLogger(_APP_NAME)
    package_logger.setLevel(logging.DEBUG)
    # Records from the listener and audio threads must not reach a root
    # handler that could print over the status line.
    package_logger.propagate = False

    if not any(
        isinstance(h, logging.handlers.RotatingFileHandler)
        for h in package_logger.handlers
    ):
        handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
        package_logger.addHandler(handler)
    return package_logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a package logger, creating the log file on first use.

    Args:
        name: Dotted module name inside the package; the package logger
            itself when omitted.
    """
    global _package_logger
    if _package_logger is None:
        _package_logger = _install_file_handler()
    if name is None or name == _APP_NAME:
        return _package_logger
    return logging.getLogger(name)
