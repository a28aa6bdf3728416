"""
Exit codes for the Pomodoro CLI.

Completing a session and quitting it early are both successful outcomes.
"""

# Session completed or quit by the user
SUCCESS = 0

# Unrecoverable runtime failure (e.g. keyboard input stream closed)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2
