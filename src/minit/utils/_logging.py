"""Logging utilities for minit.

This module provides a standalone structlog logger factory that writes
JSON-formatted or text-formatted records to the supervisor log file. The
logger is self-contained and does not modify global structlog
configuration.

Every record is flushed and fsynced before the logging call returns, so
the last line survives even if the supervisor dies immediately after.
"""

import logging
import os
from os import getenv
from pathlib import Path
from typing import IO, TYPE_CHECKING, Literal, cast

import structlog

from minit.exceptions import LogSinkError

if TYPE_CHECKING:
    from structlog.typing import EventDict, FilteringBoundLogger

LogFormatType = Literal["json", "text"]


class DurableWriteLogger(structlog.WriteLogger):
    """A WriteLogger that fsyncs the file after every record."""

    def __init__(self, file: IO[str]) -> None:
        super().__init__(file)
        self._durable_file = file

    def fileno(self) -> int:
        """Return the descriptor of the underlying log file."""
        return self._durable_file.fileno()

    def msg(self, message: str) -> None:
        """Write, flush and fsync a single rendered record."""
        super().msg(message)
        os.fsync(self._durable_file.fileno())

    log = debug = info = warn = warning = msg
    fatal = failure = err = error = critical = exception = msg


def _get_log_level() -> int:
    """Get the log level from environment variables.

    Checks MINIT_DEBUG first (sets DEBUG if present), then MINIT_LOG_LEVEL.
    Defaults to INFO if neither is set.

    Returns:
        The logging level as an integer.
    """
    if getenv("MINIT_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(getenv("MINIT_LOG_LEVEL", "info").upper(), logging.INFO)


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, MINIT_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("MINIT_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def _open_log_file(log_path: Path) -> IO[str]:
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return log_path.open("a", encoding="utf-8", errors="backslashreplace")
    except OSError as e:
        msg = f"Failed to open log file {log_path}: {e}"
        raise LogSinkError(msg, path=log_path, cause=e) from e


def open_log_writer(log_file: Path | str) -> DurableWriteLogger:
    """Open the append-only log file behind a durable writer.

    Raises:
        LogSinkError: If the log file cannot be opened.
    """
    return DurableWriteLogger(_open_log_file(Path(log_file)))


_stamper = structlog.processors.TimeStamper(fmt="iso")


def _add_timestamp(
    logger: object, method_name: str, event_dict: "EventDict"  # noqa: UP037
) -> "EventDict":  # noqa: UP037
    """Stamp the record unless it already carries the time of its event."""
    if "timestamp" in event_dict:
        return event_dict
    return _stamper(logger, method_name, event_dict)


def _create_logger(
    log_file_path: str | DurableWriteLogger,
    *,
    log_level: int | None = None,
    log_format: LogFormatType = "json",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger appending to the specified file.

    Args:
        log_file_path: Path to the log file (opened in append mode), or an
            already opened writer.
        log_level: Override log level (uses env vars if not specified).
        log_format: Output format, either "json" or "text".

    Returns:
        A configured FilteringBoundLogger instance.

    Raises:
        LogSinkError: If the log file cannot be opened.
    """
    effective_level = log_level if log_level is not None else _get_log_level()

    if isinstance(log_file_path, DurableWriteLogger):
        raw_logger = log_file_path
    else:
        raw_logger = open_log_writer(log_file_path)

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        _add_timestamp,
    ]

    if log_format == "json":
        # Add dict_tracebacks for structured exception logging in JSON
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    wrapper_class = structlog.make_filtering_bound_logger(effective_level)

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=processors,
            wrapper_class=wrapper_class,
            context_class=dict,
        ),
    )


def create_supervisor_logger(
    log_file: Path | str | DurableWriteLogger,
    *,
    level: str | None = None,
    log_format: LogFormatType = "text",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create the logger used by the supervisor and its children.

    The log level is determined by (in order of precedence):
    1. MINIT_DEBUG environment variable (if set, enables DEBUG level)
    2. The `level` parameter (if provided)
    3. MINIT_LOG_LEVEL environment variable
    4. Default: INFO

    Args:
        log_file: Path to the append-only log file, or a writer already
            opened with open_log_writer().
        level: Optional log level string (debug, info, warning, error).
        log_format: Output format, either "json" or "text".

    Returns:
        A FilteringBoundLogger instance writing to the log file.

    Raises:
        LogSinkError: If the log file cannot be opened.
    """
    effective_level: int | None = None
    if level is not None:
        effective_level = _log_level_from_string(level, respect_env=True)

    return _create_logger(
        log_file if isinstance(log_file, DurableWriteLogger) else str(log_file),
        log_level=effective_level,
        log_format=log_format,
    )
