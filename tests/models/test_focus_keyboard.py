"""Unit tests for TerminalMode and InputListener.

Terminal calls are mocked; the listener reads from an os.pipe so tests run
without a real TTY.
"""

from __future__ import annotations

import os
import termios
from io import StringIO

import pytest
from rich.console import Console

from pomodoro_cli.models.focus.events import ChannelClosedError, EventChannel, KeyEvent
from pomodoro_cli.models.focus.keyboard import InputListener, TerminalMode

SHOW_CURSOR = "\x1b[?25h"
HIDE_CURSOR = "\x1b[?25l"


def _terminal_console() -> tuple[Console, StringIO]:
    buf = StringIO()
    return Console(file=buf, force_terminal=True, color_system=None), buf


def _make_terminal_mode(mocker, old_settings=None):
    """Create a TerminalMode with all terminal calls patched.

    Returns the mode, its output buffer and the tcsetattr mock.
    """
    mocker.patch("termios.tcgetattr", return_value=old_settings or ["saved"])
    mocker.patch("tty.setcbreak")
    mock_setattr = mocker.patch("termios.tcsetattr")
    console, buf = _terminal_console()
    return TerminalMode(console, fd=0), buf, mock_setattr


class _Listening:
    """An InputListener reading from a pipe, with helpers to feed it."""

    def __init__(self):
        self.read_fd, self.write_fd = os.pipe()
        self.channel = EventChannel()
        self.listener = InputListener(self.channel, fd=self.read_fd)

    def write(self, data: bytes) -> None:
        os.write(self.write_fd, data)

    def end_input(self) -> None:
        if self.write_fd is not None:
            os.close(self.write_fd)
            self.write_fd = None


@pytest.fixture()
def listening():
    setup = _Listening()
    setup.listener.start()
    yield setup
    # EOF stops the thread before its fd can be reused by another test.
    setup.end_input()
    setup.listener.join(timeout=2)
    os.close(setup.read_fd)


# ---------------------------------------------------------------------------
# TerminalMode
# ---------------------------------------------------------------------------


class TestTerminalModeSetup:
    def test_uses_stdin_fd_by_default(self, mocker):
        mocker.patch("sys.stdin.fileno", return_value=7)
        console, _ = _terminal_console()
        assert TerminalMode(console).fd == 7

    def test_enter_saves_settings_and_sets_cbreak(self, mocker):
        mode, _, _ = _make_terminal_mode(mocker, old_settings=["settings"])
        import tty

        with mode:
            assert mode.old_settings == ["settings"]
            tty.setcbreak.assert_called_once_with(0)

    def test_enter_hides_cursor(self, mocker):
        mode, buf, _ = _make_terminal_mode(mocker)
        with mode:
            assert HIDE_CURSOR in buf.getvalue()

    def test_non_tty_is_tolerated(self, mocker):
        mocker.patch("termios.tcgetattr", side_effect=termios.error(25, "Inappropriate ioctl"))
        mock_setcbreak = mocker.patch("tty.setcbreak")
        mock_setattr = mocker.patch("termios.tcsetattr")
        console, _ = _terminal_console()

        with TerminalMode(console, fd=0) as mode:
            assert mode.old_settings is None
        mock_setcbreak.assert_not_called()
        mock_setattr.assert_not_called()


class TestTerminalModeRestore:
    def test_exit_restores_settings_and_cursor(self, mocker):
        mode, buf, mock_setattr = _make_terminal_mode(mocker, old_settings=["saved"])

        with mode:
            pass

        mock_setattr.assert_called_once_with(0, termios.TCSADRAIN, ["saved"])
        assert buf.getvalue().endswith(SHOW_CURSOR)
        assert mode.old_settings is None

    def test_restores_when_body_raises(self, mocker):
        mode, buf, mock_setattr = _make_terminal_mode(mocker)

        with pytest.raises(RuntimeError):
            with mode:
                raise RuntimeError("boom")

        mock_setattr.assert_called_once()
        assert SHOW_CURSOR in buf.getvalue()

    def test_stop_without_settings_is_noop(self, mocker):
        mock_setattr = mocker.patch("termios.tcsetattr")
        console, _ = _terminal_console()
        TerminalMode(console, fd=0).stop()
        mock_setattr.assert_not_called()

    def test_stop_handles_restore_error(self, mocker):
        mode, _, mock_setattr = _make_terminal_mode(mocker)
        mock_setattr.side_effect = termios.error("gone")
        with mode:
            pass
        assert mode.old_settings is None


# ---------------------------------------------------------------------------
# InputListener
# ---------------------------------------------------------------------------


class TestInputListener:
    def test_is_daemon_thread(self):
        listener = InputListener(EventChannel(), fd=0)
        assert listener.daemon is True
        assert listener.name == "input-listener"

    def test_forwards_keys_in_order(self, listening):
        listening.write(b"pq")

        assert listening.channel.receive(timeout=2) == KeyEvent("p")
        assert listening.channel.receive(timeout=2) == KeyEvent("q")

    def test_decodes_multibyte_characters(self, listening):
        listening.write("é".encode())

        assert listening.channel.receive(timeout=2) == KeyEvent("é")

    def test_end_of_input_closes_channel(self, listening):
        listening.write(b"x")
        listening.end_input()
        listening.listener.join(timeout=2)

        assert not listening.listener.is_alive()
        assert listening.channel.receive(timeout=1) == KeyEvent("x")
        with pytest.raises(ChannelClosedError):
            listening.channel.receive(timeout=1)

    def test_stops_when_receiver_closed(self, listening):
        listening.channel.close_receiver()
        listening.write(b"a")
        listening.listener.join(timeout=2)

        assert not listening.listener.is_alive()
        assert listening.channel.sender_closed

    def test_read_error_closes_channel(self, mocker):
        mocker.patch("os.read", side_effect=OSError(5, "I/O error"))
        channel = EventChannel()

        InputListener(channel, fd=0).run()

        with pytest.raises(ChannelClosedError):
            channel.receive(timeout=1)


class TestEscapeSequences:
    @pytest.mark.parametrize(
        "seq",
        [
            b"\x1bOQ",  # F2
            b"\x1bOP",  # F1
            b"\x1b[A",  # Up
            b"\x1b[15~",  # F5
            b"\x1b[1;5C",  # Ctrl+Right
        ],
    )
    def test_sequence_arrives_as_one_key(self, listening, seq):
        listening.write(seq)

        assert listening.channel.receive(timeout=2) == KeyEvent(seq.decode())
        assert listening.channel.receive(timeout=0.2) is None

    def test_key_after_sequence_is_separate(self, listening):
        listening.write(b"\x1bOQq")

        assert listening.channel.receive(timeout=2) == KeyEvent("\x1bOQ")
        assert listening.channel.receive(timeout=2) == KeyEvent("q")

    def test_lone_escape(self, listening):
        listening.write(b"\x1b")

        assert listening.channel.receive(timeout=2) == KeyEvent("\x1b")

    def test_alt_key_is_one_event(self, listening):
        listening.write("\x1bé".encode())

        assert listening.channel.receive(timeout=2) == KeyEvent("\x1bé")
        assert listening.channel.receive(timeout=0.2) is None

    def test_end_of_input_inside_sequence(self, listening):
        listening.write(b"\x1b[")
        listening.end_input()
        listening.listener.join(timeout=2)

        assert listening.channel.receive(timeout=1) == KeyEvent("\x1b[")
        with pytest.raises(ChannelClosedError):
            listening.channel.receive(timeout=1)
