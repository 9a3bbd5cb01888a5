"""Child process launcher.

This module provides the Launcher, which forks a child for a slot, points
the child's standard input and output at the files named by its ChildSpec
and replaces the child's program image with the configured command.

A child that cannot set up its redirections or exec its command reports
the problem to the log and exits with CHILD_FAILURE_EXIT_CODE. The parent
has already recorded its pid by then, so the supervisor reaps and relaunches
it like any other exit. A cause that persists, such as a missing input
file, therefore produces a tight restart loop.
"""

import os
import signal
from typing import TYPE_CHECKING, NoReturn, final

from minit.config import ChildSpec  # noqa: TC001 - Used in runtime type annotations
from minit.exceptions import LaunchError
from minit.utils import JOB_CONTROL_SIGNALS

from ._models import SupervisorEventType, make_event
from ._table import ProcessTable  # noqa: TC001 - Used in runtime type annotations

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ._protocol import EventSink

CHILD_FAILURE_EXIT_CODE = 1

OUTPUT_FILE_MODE = 0o644

# Signals whose disposition the supervisor changes and every child must get
# back at their defaults before exec.
SUPERVISOR_SIGNALS = (
    signal.SIGCHLD,
    signal.SIGHUP,
    signal.SIGINT,
    signal.SIGTERM,
    signal.SIGPIPE,
    signal.SIGXFSZ,
    *JOB_CONTROL_SIGNALS,
)

_STDIN_FILENO = 0
_STDOUT_FILENO = 1
_STDERR_FILENO = 2


def _restore_default_signals() -> None:
    for signum in SUPERVISOR_SIGNALS:
        _ = signal.signal(signum, signal.SIG_DFL)
    _ = signal.set_wakeup_fd(-1)


def _close_extra(*fds: int) -> None:
    for fd in fds:
        if fd > _STDERR_FILENO:
            os.close(fd)


def _redirect_stdio(spec: ChildSpec, logger: "FilteringBoundLogger") -> bool:  # noqa: UP037
    """Point fds 0 and 1 at the spec's input and output files.

    Returns:
        True if both redirections are in place, False after logging why not.
    """
    pid = os.getpid()

    try:
        in_fd = os.open(spec.input_path, os.O_RDONLY)
    except OSError as e:
        logger.error(
            "child_input_failed",
            path=spec.input_path,
            pid=pid,
            error=e.strerror,
        )
        return False

    try:
        out_fd = os.open(
            spec.output_path,
            os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
            OUTPUT_FILE_MODE,
        )
    except OSError as e:
        logger.error(
            "child_output_failed",
            path=spec.output_path,
            pid=pid,
            error=e.strerror,
        )
        _close_extra(in_fd)
        return False

    try:
        _ = os.dup2(in_fd, _STDIN_FILENO)
        _ = os.dup2(out_fd, _STDOUT_FILENO)
    except OSError as e:
        logger.error("child_redirect_failed", pid=pid, error=e.strerror)
        return False
    finally:
        _close_extra(in_fd, out_fd)

    return True


def _child_main(spec: ChildSpec, logger: "FilteringBoundLogger") -> NoReturn:  # noqa: UP037
    """Run in the forked child; never returns into supervisor code."""
    try:
        _restore_default_signals()
        if _redirect_stdio(spec, logger):
            try:
                os.execv(spec.command, spec.args)
            except OSError as e:
                logger.error(
                    "child_exec_failed",
                    command=spec.command,
                    pid=os.getpid(),
                    error=e.strerror,
                )
    finally:
        os._exit(CHILD_FAILURE_EXIT_CODE)


@final
class Launcher:
    """Starts the child for a slot and records it in the process table."""

    __slots__ = ("_logger", "_sink", "_table")

    def __init__(
        self,
        table: ProcessTable,
        sink: "EventSink",  # noqa: UP037
        logger: "FilteringBoundLogger",  # noqa: UP037
    ) -> None:
        """Initialize the launcher.

        Args:
            table: Table receiving the pid of each started child.
            sink: Sink for lifecycle events.
            logger: Logger the child uses to report setup failures.
        """
        self._table = table
        self._sink = sink
        self._logger = logger

    def launch(self, slot: int, spec: ChildSpec) -> int:
        """Start ``spec`` as the process backing ``slot``.

        Args:
            slot: Slot index, within the table's capacity.
            spec: The child to run.

        Returns:
            The pid of the new child.

        Raises:
            LaunchError: If the process could not be created. The slot is
                left untouched.
            IndexError: If the slot is outside the table.
        """
        if not 0 <= slot < self._table.capacity:
            msg = f"slot {slot} out of range 0..{self._table.capacity - 1}"
            raise IndexError(msg)

        try:
            pid = os.fork()
        except OSError as e:
            msg = f"Fork failed for slot {slot}: {e}"
            raise LaunchError(msg, slot=slot, cause=e) from e

        if pid == 0:
            _child_main(spec, self._logger)

        self._table.set(slot, pid)
        self._sink.write_event(
            make_event(
                SupervisorEventType.STARTED,
                slot=slot,
                pid=pid,
                message=f"started slot {slot} as pid {pid}: {' '.join(spec.args)}",
            )
        )
        return pid
