"""Detach the supervisor from its controlling terminal."""

import os
import resource
import signal
import sys
from collections.abc import Iterable

from minit.exceptions import DaemonizeError

# Job-control signals ignored while detaching. Children restore the default
# disposition before exec.
JOB_CONTROL_SIGNALS = (signal.SIGTTOU, signal.SIGTTIN, signal.SIGTSTP)

_DAEMON_DIRECTORY = "/"

_FIRST_EXTRA_FD = 3

# Upper bound used when RLIMIT_NOFILE has no hard limit.
_FALLBACK_MAX_FD = 2048


def _redirect_stdio_to_devnull() -> None:
    for stream in (sys.stdout, sys.stderr):
        stream.flush()

    devnull = os.open(os.devnull, os.O_RDWR)
    try:
        for fd in (0, 1, 2):
            os.dup2(devnull, fd)
    finally:
        if devnull > 2:  # noqa: PLR2004
            os.close(devnull)


def _max_fd() -> int:
    _, hard = resource.getrlimit(resource.RLIMIT_NOFILE)
    if hard == resource.RLIM_INFINITY:
        return _FALLBACK_MAX_FD
    return hard


def _close_inherited_fds(keep_fds: Iterable[int] = ()) -> None:
    """Close every descriptor above stderr except those in ``keep_fds``.

    Args:
        keep_fds: Descriptors that must stay open, such as the log file.
    """
    low = _FIRST_EXTRA_FD
    for fd in sorted({fd for fd in keep_fds if fd >= _FIRST_EXTRA_FD}):
        os.closerange(low, fd)
        low = fd + 1
    os.closerange(low, max(low, _max_fd()))


def daemonize(
    *,
    directory: str = _DAEMON_DIRECTORY,
    keep_fds: Iterable[int] = (),
) -> None:
    """Turn the current process into a background daemon.

    Unless already adopted by init, ignores job-control signals, forks (the
    parent exits immediately with status 0) and starts a new session. The
    standard streams are then pointed at /dev/null, every other inherited
    descriptor up to the RLIMIT_NOFILE hard limit is closed, and the working
    directory is changed.

    Args:
        directory: Working directory for the daemon.
        keep_fds: Descriptors to leave open, such as the log file.

    Raises:
        DaemonizeError: If forking or changing directory fails.
    """
    if os.getppid() != 1:
        for signum in JOB_CONTROL_SIGNALS:
            _ = signal.signal(signum, signal.SIG_IGN)

        try:
            pid = os.fork()
        except OSError as e:
            msg = f"Failed to fork daemon process: {e}"
            raise DaemonizeError(msg, cause=e) from e

        if pid != 0:
            os._exit(0)

        _ = os.setsid()

    _redirect_stdio_to_devnull()
    _close_inherited_fds(keep_fds)

    try:
        os.chdir(directory)
    except OSError as e:
        msg = f"Failed to change directory to {directory}: {e}"
        raise DaemonizeError(msg, cause=e) from e
