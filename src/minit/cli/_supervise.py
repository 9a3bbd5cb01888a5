"""Startup sequence for the supervise command.

Order matters: the log file is opened while errors can still reach the
terminal, the process then detaches, and from that point on every problem
is reported only through the log.
"""

import os
from typing import Never

import anyio
from rich.console import Console  # noqa: TC002 - Used in runtime type annotations

from minit.config import SupervisorSettings  # noqa: TC001
from minit.exceptions import ConfigLoadError, DaemonizeError, LogSinkError
from minit.supervisor import (
    ConsoleEventSink,
    EventSink,
    FanOutEventSink,
    LogEventSink,
    Supervisor,
)
from minit.utils import create_supervisor_logger, daemonize, open_log_writer

from ._exit_codes import EXIT_STARTUP_ERROR


def _fail(error_console: Console | None, message: str) -> Never:
    if error_console is not None:
        error_console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(EXIT_STARTUP_ERROR)


def run_supervisor(
    settings: SupervisorSettings,
    *,
    console: Console,
    error_console: Console,
) -> int:
    """Open the log, detach if requested and supervise until shutdown.

    Args:
        settings: Validated options for this run.
        console: Console used for events in foreground runs.
        error_console: Console for startup errors before detaching.

    Returns:
        The supervisor's exit status.

    Raises:
        SystemExit: With EXIT_STARTUP_ERROR if startup fails.
    """
    try:
        writer = open_log_writer(settings.log_file)
    except LogSinkError as e:
        _fail(error_console, str(e))

    logger = create_supervisor_logger(
        writer,
        level=settings.log_level.value,
        log_format=settings.log_format.value,  # type: ignore[arg-type]
    )

    if settings.daemonize:
        try:
            daemonize(keep_fds=(writer.fileno(),))
        except DaemonizeError as e:
            logger.error("daemonize_failed", error=str(e))
            _fail(None, str(e))

    logger.info(
        "daemon_started",
        pid=os.getpid(),
        config=str(settings.config_path),
        max_children=settings.max_children,
    )

    sink: EventSink = LogEventSink(logger)
    if not settings.daemonize:
        sink = FanOutEventSink(sink, ConsoleEventSink(console))

    try:
        supervisor = Supervisor.from_config(
            settings.config_path,
            sink=sink,
            logger=logger,
            capacity=settings.max_children,
        )
    except ConfigLoadError as e:
        logger.error("config_load_failed", error=str(e))
        _fail(None if settings.daemonize else error_console, str(e))

    exit_code = anyio.run(supervisor.run)
    logger.info("minit_ended", exit_code=exit_code)
    return exit_code
