"""Pomodoro CLI - a terminal focus/break timer."""

import logging

__version__ = "0.1.0"

# File logging is installed by utils.logger.get_logger() when the CLI runs.
logging.getLogger(__name__).addHandler(logging.NullHandler())
