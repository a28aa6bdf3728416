"""Focus mode - Pomodoro session model, input and display."""

from .events import ChannelClosedError, Event, EventChannel, KeyEvent
from .keyboard import InputListener, TerminalMode
from .state import Interval, Phase, SessionState, Transition
from .ticker import Ticker
from .ui import StatusLine, format_remaining, format_status

__all__ = [
    "ChannelClosedError",
    "Event",
    "EventChannel",
    "InputListener",
    "Interval",
    "KeyEvent",
    "Phase",
    "SessionState",
    "StatusLine",
    "TerminalMode",
    "Ticker",
    "Transition",
    "format_remaining",
    "format_status",
]
