"""Interval state machine for a Pomodoro session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pomodoro_cli.config import PomodoroConfig


class Phase(str, Enum):
    """Mutually exclusive modes of a session."""

    FOCUS = "focus"
    BREAK = "break"
    FOCUS_ENDED = "focus_ended"
    BREAK_ENDED = "break_ended"
    DONE = "done"

    @property
    def is_timed(self) -> bool:
        """True for phases with a running interval."""
        return self in (Phase.FOCUS, Phase.BREAK)

    @property
    def awaits_ack(self) -> bool:
        """True while an ended interval waits for a keypress."""
        return self in (Phase.FOCUS_ENDED, Phase.BREAK_ENDED)


@dataclass
class Interval:
    """A timed span counting elapsed seconds up towards ``duration``."""

    duration: float
    elapsed: float = 0.0

    @property
    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self.duration - self.elapsed)

    def has_ended(self) -> bool:
        # A zero-length interval has ended before any time passes.
        return self.elapsed >= self.duration

    def add(self, seconds: float) -> None:
        """Accumulate elapsed time; negative deltas are ignored."""
        if seconds > 0:
            self.elapsed += seconds


@dataclass(frozen=True)
class Transition:
    """Result of one ``SessionState.advance`` call."""

    previous: Phase
    current: Phase
    notify: bool = False

    @property
    def changed(self) -> bool:
        return self.previous is not self.current


@dataclass
class SessionState:
    """All mutable state of a running session.

    Owned by the control loop; nothing else mutates it.
    """

    config: PomodoroConfig
    phase: Phase = Phase.FOCUS
    interval: Interval = field(init=False)
    focus_count: int = 1
    break_count: int = 1
    paused: bool = False
    pending_ack: bool = False

    def __post_init__(self) -> None:
        self.interval = Interval(self.config.focus_seconds)

    def advance(
        self,
        elapsed: float,
        ack_requested: bool = False,
        toggle_pause_requested: bool = False,
    ) -> Transition:
        """Advance the session by one tick.

        Args:
            elapsed: Wall-clock seconds since the previous tick.
            ack_requested: A key arrived this tick while awaiting acknowledgment.
            toggle_pause_requested: A pause key arrived this tick.

        Returns:
            The transition taken this tick (``previous == current`` if none).
        """
        if toggle_pause_requested and self.phase.is_timed:
            self.paused = not self.paused

        if ack_requested and self.phase.awaits_ack:
            self.pending_ack = True

        if not self.paused and self.phase.is_timed:
            self.interval.add(elapsed)

        return self._next_state()

    def _next_state(self) -> Transition:
        previous = self.phase

        if self.phase is Phase.FOCUS and self.interval.has_ended():
            # A pause never outlives its interval.
            self.paused = False
            if self.focus_count == self.config.max_pomodoros:
                self.phase = Phase.DONE
            else:
                self.phase = Phase.FOCUS_ENDED
            return Transition(previous, self.phase, notify=True)

        if self.phase is Phase.FOCUS_ENDED and self.pending_ack:
            self.pending_ack = False
            self.focus_count += 1
            self.interval = Interval(self.config.break_seconds)
            self.phase = Phase.BREAK
            return Transition(previous, self.phase)

        if self.phase is Phase.BREAK and self.interval.has_ended():
            self.paused = False
            self.phase = Phase.BREAK_ENDED
            return Transition(previous, self.phase, notify=True)

        if self.phase is Phase.BREAK_ENDED and self.pending_ack:
            self.pending_ack = False
            self.break_count += 1
            self.interval = Interval(self.config.focus_seconds)
            self.phase = Phase.FOCUS
            return Transition(previous, self.phase)

        return Transition(previous, previous)
