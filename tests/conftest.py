"""Shared test fixtures and configuration.

Keeps log files out of the real user log directory.
"""

from __future__ import annotations

import logging
import logging.handlers
from unittest.mock import patch

import pytest

from pomodoro_cli.config import PomodoroConfig


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path):
    """Point the application log file at *tmp_path* and reset the singleton."""
    import pomodoro_cli.utils.logger as logger_mod

    original = logger_mod._package_logger
    logger_mod._package_logger = None
    with patch("pomodoro_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield tmp_path / "logs"

    package_logger = logging.getLogger("pomodoro_cli")
    for handler in list(package_logger.handlers):
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            handler.close()
            package_logger.removeHandler(handler)
    package_logger.propagate = True
    logger_mod._package_logger = original


@pytest.fixture()
def short_config() -> PomodoroConfig:
    """One-second focus and break intervals, two pomodoros."""
    return PomodoroConfig(focus_seconds=1, break_seconds=1, max_pomodoros=2)


@pytest.fixture(autouse=True)
def xterm(monkeypatch):
    """Rich drops cursor control codes on dumb terminals."""
    monkeypatch.setenv("TERM", "xterm-256color")
