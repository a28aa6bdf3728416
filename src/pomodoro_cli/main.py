"""Main entry point for the Pomodoro CLI."""

import typer
from pydantic import ValidationError

from pomodoro_cli import __version__
from pomodoro_cli.config import (
    DEFAULT_BREAK_MINUTES,
    DEFAULT_MAX_POMODOROS,
    DEFAULT_POMODORO_MINUTES,
    PomodoroConfig,
)
from pomodoro_cli.focus import TimerOutcome, run_session
from pomodoro_cli.utils.exit_codes import ERROR_GENERAL, ERROR_INVALID_ARGS
from pomodoro_cli.utils.logger import get_logger
from pomodoro_cli.utils.ui.console import get_console

app = typer.Typer(
    name="pomodoro",
    help="A Pomodoro timer for the terminal",
    add_completion=False,
)

console = get_console()
err_console = get_console(stderr=True)

# Config field -> CLI flag, for validation messages
FLAG_NAMES = {
    "focus_seconds": "--pomodoro-duration",
    "break_seconds": "--break-duration",
    "max_pomodoros": "--max-pomodoros",
}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]Pomodoro CLI[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()


def _report_invalid_config(error: ValidationError) -> None:
    for item in error.errors():
        field = str(item["loc"][0]) if item["loc"] else ""
        flag = FLAG_NAMES.get(field, field)
        err_console.print(f"[red]Error: invalid value for {flag}: {item['msg']}[/red]")


@app.command()
def start(
    pomodoro_duration: int = typer.Option(
        DEFAULT_POMODORO_MINUTES,
        "--pomodoro-duration",
        "-p",
        help="Focus interval length in minutes",
    ),
    break_duration: int = typer.Option(
        DEFAULT_BREAK_MINUTES,
        "--break-duration",
        "-b",
        help="Break interval length in minutes",
    ),
    max_pomodoros: int = typer.Option(
        DEFAULT_MAX_POMODOROS,
        "--max-pomodoros",
        "-m",
        help="Number of focus intervals in the session",
    ),
    mute: bool = typer.Option(False, "--mute", help="Do not play the notification sound"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Run a Pomodoro session.

    Keys: 'p' pauses/resumes, 'q' or Ctrl-C quits, any other key continues
    after an interval ends.
    """
    try:
        config = PomodoroConfig.from_minutes(
            pomodoro_minutes=pomodoro_duration,
            break_minutes=break_duration,
            max_pomodoros=max_pomodoros,
        )
    except ValidationError as e:
        get_logger(__name__).warning("rejected configuration: %s", e)
        _report_invalid_config(e)
        raise typer.Exit(ERROR_INVALID_ARGS) from e

    get_logger(__name__).info("pomodoro-cli %s starting", __version__)
    outcome = run_session(config, console, mute=mute)
    if outcome is TimerOutcome.FAILED:
        raise typer.Exit(ERROR_GENERAL)


# Main entry point
def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
