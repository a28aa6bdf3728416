"""Control loop driving a Pomodoro session.

The loop is single-threaded and owns the ``SessionState``. Each tick waits
at most ``poll_timeout`` seconds for one keyboard event (the only blocking
point), then advances the state machine by the wall time that passed and
redraws the status line.
"""

from __future__ import annotations

import logging
from enum import Enum

from rich.console import Console

from pomodoro_cli.config import PomodoroConfig
from pomodoro_cli.models.focus.events import (
    ChannelClosedError,
    Event,
    EventChannel,
    KeyEvent,
)
from pomodoro_cli.models.focus.keyboard import InputListener, TerminalMode
from pomodoro_cli.models.focus.state import Phase, SessionState
from pomodoro_cli.models.focus.ticker import Ticker
from pomodoro_cli.models.focus.ui import StatusLine
from pomodoro_cli.services.audio.player import Notifier

logger = logging.getLogger(__name__)

DEFAULT_POLL_TIMEOUT = 0.5

QUIT_KEYS = frozenset({"q", "\x03"})
PAUSE_KEYS = frozenset({"p"})


class Command(str, Enum):
    """What a single input event means in the current phase."""

    QUIT = "quit"
    FINISH = "finish"
    ACKNOWLEDGE = "acknowledge"
    TOGGLE_PAUSE = "toggle_pause"
    IGNORE = "ignore"


class TimerOutcome(str, Enum):
    """How the control loop ended."""

    COMPLETED = "completed"
    QUIT = "quit"
    FAILED = "failed"


def classify(event: Event | None, phase: Phase) -> Command:
    """Map an input event to a command for the given phase."""
    if not isinstance(event, KeyEvent):
        return Command.IGNORE
    if event.key in QUIT_KEYS:
        return Command.QUIT
    if phase is Phase.DONE:
        return Command.FINISH
    if phase.awaits_ack:
        return Command.ACKNOWLEDGE
    if event.key in PAUSE_KEYS:
        return Command.TOGGLE_PAUSE
    return Command.IGNORE


class FocusTimer:
    """Runs one session from the first focus interval until it ends."""

    def __init__(
        self,
        config: PomodoroConfig,
        channel: EventChannel,
        notifier: Notifier,
        status_line: StatusLine,
        ticker: Ticker | None = None,
        poll_timeout: float = DEFAULT_POLL_TIMEOUT,
    ):
        self.state = SessionState(config)
        self.channel = channel
        self.notifier = notifier
        self.status_line = status_line
        self.ticker = ticker or Ticker()
        self.poll_timeout = poll_timeout

    def run(self) -> TimerOutcome:
        """Run the loop and return how it ended.

        The receiving side of the channel is closed on return so the input
        listener stops at its next keypress.
        """
        logger.info(
            "session started: focus=%ss break=%ss max=%s",
            self.state.config.focus_seconds,
            self.state.config.break_seconds,
            self.state.config.max_pomodoros,
        )
        try:
            outcome = self._loop()
        except KeyboardInterrupt:
            outcome = TimerOutcome.QUIT
        finally:
            self.channel.close_receiver()

        if outcome is not TimerOutcome.FAILED:
            self.status_line.close()
        logger.info("session ended: %s", outcome.value)
        return outcome

    def _loop(self) -> TimerOutcome:
        self.ticker.reset()
        self.status_line.render(self.state)
        while True:
            try:
                event = self.channel.receive(self.poll_timeout)
            except ChannelClosedError:
                logger.error("keyboard input channel closed in phase %s", self.state.phase.value)
                self.status_line.fatal()
                return TimerOutcome.FAILED

            command = classify(event, self.state.phase)
            if command is Command.QUIT:
                return TimerOutcome.QUIT
            if command is Command.FINISH:
                return TimerOutcome.COMPLETED

            self.tick(command)

    def tick(self, command: Command = Command.IGNORE) -> None:
        """Advance the session by the time since the last tick and redraw."""
        transition = self.state.advance(
            self.ticker.tick(),
            ack_requested=command is Command.ACKNOWLEDGE,
            toggle_pause_requested=command is Command.TOGGLE_PAUSE,
        )
        if command is Command.TOGGLE_PAUSE and self.state.phase.is_timed:
            logger.debug("paused=%s", self.state.paused)
        if transition.changed:
            logger.info(
                "phase %s -> %s (pomodoro %d, break %d)",
                transition.previous.value,
                transition.current.value,
                self.state.focus_count,
                self.state.break_count,
            )
        if transition.notify:
            self.notifier.notify()
        self.status_line.render(self.state)


def run_session(config: PomodoroConfig, console: Console, mute: bool = False) -> TimerOutcome:
    """Run a full interactive session on the controlling terminal."""
    channel = EventChannel()
    timer = FocusTimer(
        config,
        channel,
        Notifier(enabled=not mute),
        StatusLine(console),
    )
    with TerminalMode(console):
        InputListener(channel).start()
        return timer.run()
