"""Session configuration for the Pomodoro CLI."""

from pydantic import BaseModel, ConfigDict, Field

# Flags are small counts; the upper bound keeps them in a single byte.
MAX_FLAG_VALUE = 255

DEFAULT_POMODORO_MINUTES = 25
DEFAULT_BREAK_MINUTES = 4
DEFAULT_MAX_POMODOROS = 4


class PomodoroConfig(BaseModel):
    """Immutable timing configuration for one run of the timer.

    Durations are whole seconds. A duration of 0 is allowed and makes the
    interval end on the first tick that observes it.
    """

    model_config = ConfigDict(frozen=True)

    focus_seconds: int = Field(
        default=DEFAULT_POMODORO_MINUTES * 60,
        ge=0,
        le=MAX_FLAG_VALUE * 60,
        description="Length of a focus interval in seconds",
    )
    break_seconds: int = Field(
        default=DEFAULT_BREAK_MINUTES * 60,
        ge=0,
        le=MAX_FLAG_VALUE * 60,
        description="Length of a break interval in seconds",
    )
    max_pomodoros: int = Field(
        default=DEFAULT_MAX_POMODOROS,
        ge=1,
        le=MAX_FLAG_VALUE,
        description="Number of focus intervals in the session",
    )

    @classmethod
    def from_minutes(
        cls,
        pomodoro_minutes: int = DEFAULT_POMODORO_MINUTES,
        break_minutes: int = DEFAULT_BREAK_MINUTES,
        max_pomodoros: int = DEFAULT_MAX_POMODOROS,
    ) -> "PomodoroConfig":
        """Build a config from CLI minute values.

        Raises:
            pydantic.ValidationError: a value is negative or out of range.
        """
        return cls(
            focus_seconds=pomodoro_minutes * 60,
            break_seconds=break_minutes * 60,
            max_pomodoros=max_pomodoros,
        )
