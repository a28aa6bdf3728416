"""Single-line status display for the timer."""

from rich.console import Console
from rich.control import Control
from rich.segment import ControlType
from rich.text import Text

from .state import Phase, SessionState

FOCUS_ENDED_PROMPT = "Pomodoro ended. Press key to begin break."
BREAK_ENDED_PROMPT = "Break ended. Press key to begin a new pomodoro."
DONE_MESSAGE = "Done. Press any key to end."
FATAL_MESSAGE = "System error. Shutting down."

PHASE_STYLES = {
    Phase.FOCUS: "bold cyan",
    Phase.BREAK: "bold green",
    Phase.FOCUS_ENDED: "yellow",
    Phase.BREAK_ENDED: "yellow",
    Phase.DONE: "bold green",
}


def format_remaining(seconds: float) -> str:
    """Format seconds as MM:SS, truncating fractions and flooring at zero."""
    secs = max(0, int(seconds))
    return f"{secs // 60:02d}:{secs % 60:02d}"


def format_status(state: SessionState) -> str:
    """Return the plain status line for the current session state."""
    if state.phase is Phase.FOCUS:
        line = f"Pomodoro {state.focus_count}: {format_remaining(state.interval.remaining)}"
    elif state.phase is Phase.BREAK:
        line = f"Break {state.break_count}: {format_remaining(state.interval.remaining)}"
    elif state.phase is Phase.FOCUS_ENDED:
        return FOCUS_ENDED_PROMPT
    elif state.phase is Phase.BREAK_ENDED:
        return BREAK_ENDED_PROMPT
    else:
        return DONE_MESSAGE

    if state.paused:
        line += " (paused)"
    return line


def status_text(state: SessionState) -> Text:
    """Styled version of ``format_status``; the plain text is identical."""
    line = format_status(state)
    text = Text(line, style=PHASE_STYLES[state.phase])
    if state.paused and state.phase.is_timed:
        text.stylize("dim", len(line) - len(" (paused)"))
    return text


class StatusLine:
    """Writes a status line that overwrites itself in place."""

    def __init__(self, console: Console):
        self.console = console
        self._open = False

    def _rewind(self) -> None:
        self.console.control(
            Control(ControlType.CARRIAGE_RETURN, (ControlType.ERASE_IN_LINE, 2))
        )

    def render(self, state: SessionState) -> None:
        self._rewind()
        self.console.print(status_text(state), end="", soft_wrap=True)
        self._open = True

    def fatal(self, message: str = FATAL_MESSAGE) -> None:
        """Replace the status line with an error message and end the line."""
        self._rewind()
        self.console.print(Text(message, style="bold red"), soft_wrap=True)
        self._open = False

    def close(self) -> None:
        """Terminate the status line with a newline, if one is showing."""
        if self._open:
            self.console.print()
            self._open = False
