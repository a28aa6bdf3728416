"""Console utilities for the Pomodoro CLI."""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=2)
def get_console(stderr: bool = False) -> Console:
    """Get a shared Rich Console; ``stderr=True`` for error reporting."""
    return Console(highlight=False, stderr=stderr)
