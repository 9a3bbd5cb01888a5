"""Exit codes for the minit command.

    0 - Graceful shutdown, or nothing left to supervise
    1 - Startup failure (log file, daemonization, initial config)
    2 - Invalid option values
"""

EXIT_SUCCESS: int = 0
"""Supervisor shut down gracefully."""

EXIT_STARTUP_ERROR: int = 1
"""Log file, daemonization or initial configuration failed."""

EXIT_USAGE_ERROR: int = 2
"""Option values failed validation."""
