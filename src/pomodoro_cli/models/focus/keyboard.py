"""Keyboard input: terminal mode handling and the input listener thread."""

from __future__ import annotations

import codecs
import logging
import os
import select
import sys
import termios
import threading
import tty

from rich.console import Console

from .events import EventChannel, KeyEvent

logger = logging.getLogger(__name__)

ESCAPE = b"\x1b"

# How long to wait for the rest of an escape sequence after ESC.
ESCAPE_TIMEOUT = 0.05


class TerminalMode:
    """Puts stdin in cbreak mode and hides the cursor for its lifetime.

    Used as a context manager; the previous terminal settings and cursor
    visibility are restored on every exit path.
    """

    def __init__(self, console: Console, fd: int | None = None):
        self.console = console
        self.fd = sys.stdin.fileno() if fd is None else fd
        self.old_settings = None

    def _setup(self):
        """Setup terminal for single-keypress input."""
        try:
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except termios.error as e:
            # Not a TTY (piped input, CI); keys still arrive line-buffered.
            logger.info("cbreak mode unavailable: %s", e)
            self.old_settings = None

    def stop(self):
        """Restore terminal settings."""
        if self.old_settings:
            try:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            except termios.error as e:
                logger.warning("failed to restore terminal settings: %s", e)
            self.old_settings = None

    def __enter__(self) -> "TerminalMode":
        self._setup()
        self.console.show_cursor(False)
        return self

    def __exit__(self, *exc_info) -> None:
        try:
            self.console.show_cursor(True)
        finally:
            self.stop()


class InputListener(threading.Thread):
    """Blocking reader of keypresses feeding an ``EventChannel``.

    Runs as a daemon thread. It stops when the channel's receiver is closed,
    on end of input, or on a read error, and closes the sending side of the
    channel on its way out so the consumer can notice.
    """

    def __init__(self, channel: EventChannel, fd: int | None = None):
        super().__init__(name="input-listener", daemon=True)
        self.channel = channel
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def read_key(self) -> str | None:
        """Block until one full key is read; None at end of input.

        A key is a single character, or a whole escape sequence such as
        ``ESC O P`` (F1) or ``ESC [ A`` (Up), so that the bytes of one
        keypress never arrive as separate keys.
        """
        while True:
            data = os.read(self.fd, 1)
            if not data:
                return None
            if data == ESCAPE:
                return self._read_escape_sequence()
            key = self._decoder.decode(data)
            if key:
                return key

    def _read_pending_byte(self) -> bytes:
        """Read one more byte if it arrives within ESCAPE_TIMEOUT."""
        ready, _, _ = select.select([self.fd], [], [], ESCAPE_TIMEOUT)
        if not ready:
            return b""
        return os.read(self.fd, 1)

    def _read_escape_sequence(self) -> str:
        seq = ESCAPE
        introducer = self._read_pending_byte()
        if not introducer:
            # lone Esc
            return seq.decode()
        seq += introducer

        if introducer == b"O":
            # SS3: one final byte
            seq += self._read_pending_byte()
        elif introducer == b"[":
            # CSI: parameter and intermediate bytes up to a final byte in 0x40-0x7E
            while True:
                byte = self._read_pending_byte()
                if not byte:
                    break
                seq += byte
                if 0x40 <= byte[0] <= 0x7E:
                    break
        else:
            # Alt+key: the rest of that character
            decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
            char = decoder.decode(introducer)
            while not char:
                byte = self._read_pending_byte()
                if not byte:
                    char = decoder.decode(b"", final=True)
                    break
                char = decoder.decode(byte)
            return "\x1b" + char

        return seq.decode("utf-8", errors="replace")

    def run(self) -> None:
        try:
            while True:
                key = self.read_key()
                if key is None:
                    logger.info("end of keyboard input")
                    break
                if not self.channel.send(KeyEvent(key)):
                    # consumer gone
                    break
        except OSError as e:
            logger.error("keyboard read failed: %s", e)
        finally:
            self.channel.close_sender()
