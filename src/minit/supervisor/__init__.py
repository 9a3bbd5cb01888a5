"""Supervisor package for keeping a fixed set of children running.

Key Components:
    - ProcessTable: Slot-to-pid registry, the record of what is running
    - Launcher: Forks a child with redirected stdin/stdout and execs it
    - SignalController: Serializes signals into a single request queue
    - Supervisor: Reap-and-restart loop with reload and shutdown
    - SupervisorEvent: Lifecycle event records
    - EventSink: Protocol for event consumption
    - LogEventSink / ConsoleEventSink / FanOutEventSink: Sink implementations

Example:
    >>> from minit.supervisor import LogEventSink, Supervisor
    >>> supervisor = Supervisor.from_config(
    ...     path, sink=LogEventSink(logger), logger=logger
    ... )
    >>> exit_code = anyio.run(supervisor.run)  # Blocks until shutdown
"""

from ._launcher import CHILD_FAILURE_EXIT_CODE, Launcher
from ._models import (
    Request,
    SupervisorEvent,
    SupervisorEventType,
    SupervisorState,
    make_event,
)
from ._output import ConsoleEventSink, FanOutEventSink, LogEventSink
from ._protocol import EventSink
from ._signals import SIGNAL_REQUESTS, SignalController
from ._supervisor import Supervisor
from ._table import ProcessTable

__all__ = [
    "CHILD_FAILURE_EXIT_CODE",
    "SIGNAL_REQUESTS",
    "ConsoleEventSink",
    "EventSink",
    "FanOutEventSink",
    "Launcher",
    "LogEventSink",
    "ProcessTable",
    "Request",
    "SignalController",
    "Supervisor",
    "SupervisorEvent",
    "SupervisorEventType",
    "SupervisorState",
    "make_event",
]
