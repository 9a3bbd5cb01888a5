"""minit exceptions."""

from pathlib import Path  # noqa: TC003 - Used in runtime type annotations


class MinitError(Exception):
    """Base exception for minit errors."""


class ConfigError(MinitError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when the child configuration cannot be read.

    Malformed lines are not errors; they are reported as warnings by the
    parser. This exception covers an unreadable resource.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.cause: Exception | None = cause


# =============================================================================
# Supervisor Exceptions
# =============================================================================


class SupervisorError(MinitError):
    """Base exception for supervisor errors."""


class LaunchError(SupervisorError):
    """Raised when a child process cannot be created.

    Attributes:
        slot: The slot whose child failed to launch.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        slot: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and slot context.

        Args:
            message: Human-readable error message.
            slot: The slot whose child failed to launch.
            cause: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.slot: int | None = slot
        self.cause: Exception | None = cause


# =============================================================================
# Startup Exceptions
# =============================================================================


class DaemonizeError(MinitError):
    """Raised when the process cannot detach into the background."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        """Initialize with error message and the underlying cause."""
        super().__init__(message)
        self.cause: Exception | None = cause


class LogSinkError(MinitError):
    """Raised when the log file cannot be opened for appending."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and the log file path."""
        super().__init__(message)
        self.path: Path | None = path
        self.cause: Exception | None = cause
