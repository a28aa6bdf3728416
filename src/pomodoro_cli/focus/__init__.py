"""Focus mode - Pomodoro timer for the terminal.

This package re-exports from pomodoro_cli.models.focus and the timer
service for clean import paths.
"""

from pomodoro_cli.models.focus import (
    Phase,
    SessionState,
    format_status,
)
from pomodoro_cli.services.timer_service import FocusTimer, TimerOutcome, run_session

__all__ = [
    "FocusTimer",
    "Phase",
    "SessionState",
    "TimerOutcome",
    "format_status",
    "run_session",
]
