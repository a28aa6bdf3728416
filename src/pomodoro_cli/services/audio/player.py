"""Notification sound playback for interval transitions."""

from __future__ import annotations

import io
import logging
import threading
import wave
from importlib import resources

SOUNDDEVICE_AVAILABLE = False
NUMPY_AVAILABLE = False

try:
    import sounddevice as sd
    SOUNDDEVICE_AVAILABLE = True
except (ImportError, OSError):
    # OSError: the module is installed but the PortAudio library is missing
    pass

try:
    import numpy as np
    NUMPY_AVAILABLE = True
except ImportError:
    pass

logger = logging.getLogger(__name__)

CLIP_NAME = "gong.wav"
DEFAULT_MAX_SECONDS = 20.0


def check_dependencies() -> tuple[bool, str]:
    """Check if audio dependencies are available."""
    if not SOUNDDEVICE_AVAILABLE:
        return False, "sounddevice not available. Run: pip install sounddevice (needs PortAudio)"
    if not NUMPY_AVAILABLE:
        return False, "numpy not installed. Run: pip install numpy"
    return True, ""


def load_clip() -> bytes:
    """Return the bundled notification clip as WAV bytes."""
    return resources.files("pomodoro_cli.assets").joinpath(CLIP_NAME).read_bytes()


def decode_wav(data: bytes, max_seconds: float = DEFAULT_MAX_SECONDS):
    """Decode WAV bytes into a float32 array in [-1, 1] and its sample rate.

    The result is truncated to ``max_seconds``. Supports 8-bit unsigned and
    16-bit signed PCM.

    Raises:
        wave.Error: the data is not a PCM WAV file.
        ValueError: unsupported sample width.
    """
    with wave.open(io.BytesIO(data), "rb") as wf:
        channels = wf.getnchannels()
        width = wf.getsampwidth()
        rate = wf.getframerate()
        frames = wf.readframes(min(wf.getnframes(), int(rate * max_seconds)))

    if width == 1:
        samples = (np.frombuffer(frames, dtype=np.uint8).astype(np.float32) - 128.0) / 128.0
    elif width == 2:
        samples = np.frombuffer(frames, dtype="<i2").astype(np.float32) / 32768.0
    else:
        raise ValueError(f"Unsupported sample width: {width} bytes")

    if channels > 1:
        samples = samples.reshape(-1, channels)
    return samples, rate


class Notifier:
    """Plays the notification clip in a detached background thread.

    Playback problems are logged inside that thread and never reach the
    caller.
    """

    def __init__(self, enabled: bool = True, max_seconds: float = DEFAULT_MAX_SECONDS):
        self.enabled = enabled
        self.max_seconds = max_seconds

    def notify(self) -> threading.Thread | None:
        """Start playback and return immediately.

        Returns the playback thread (never joined by the timer), or None when
        the notifier is disabled.
        """
        if not self.enabled:
            return None
        thread = threading.Thread(target=self._play_safely, name="notifier", daemon=True)
        thread.start()
        return thread

    def _play_safely(self) -> None:
        try:
            self.play()
        except Exception as e:
            logger.warning("notification playback failed: %s", e)

    def play(self) -> None:
        """Decode and play the clip, blocking until it finishes."""
        ok, message = check_dependencies()
        if not ok:
            raise RuntimeError(message)

        samples, rate = decode_wav(load_clip(), self.max_seconds)
        sd.play(samples, rate)
        sd.wait()
        logger.debug("played %s (%d frames @ %d Hz)", CLIP_NAME, len(samples), rate)
