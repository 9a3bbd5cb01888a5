"""Data models for the supervisor system.

This module defines the core data types for supervision:
- SupervisorState: Lifecycle states of the supervisor as a whole
- SupervisorEventType: Types of lifecycle events
- SupervisorEvent: Immutable event records
- Request: Work items delivered by the signal controller
"""

from dataclasses import dataclass
from enum import Enum, StrEnum, auto


class SupervisorState(StrEnum):
    """Supervisor lifecycle states.

    - RUNNING: Children are supervised and restarted on exit
    - RELOADING: Children are being replaced under a new configuration
    - DRAINING: Children are being stopped for shutdown
    - STOPPED: Nothing is supervised; the process is about to exit
    """

    RUNNING = "running"
    RELOADING = "reloading"
    DRAINING = "draining"
    STOPPED = "stopped"


class SupervisorEventType(StrEnum):
    """Types of supervisor lifecycle events.

    - STARTED: A child process has been created for a slot
    - EXITED: A supervised child exited and was reaped
    - LAUNCH_FAILED: A child process could not be created
    - STOPPED: A child was terminated on request and reaped
    - UNKNOWN_CHILD: A reaped process did not belong to any slot
    - RELOAD_REQUESTED: A hang-up was received
    - RELOAD_FAILED: The new configuration could not be used
    - TERMINATE_REQUESTED: A terminate request was received
    - CONFIG_WARNING: A configuration line was skipped or truncated
    """

    STARTED = "started"
    EXITED = "exited"
    LAUNCH_FAILED = "launch_failed"
    STOPPED = "stopped"
    UNKNOWN_CHILD = "unknown_child"
    RELOAD_REQUESTED = "reload_requested"
    RELOAD_FAILED = "reload_failed"
    TERMINATE_REQUESTED = "terminate_requested"
    CONFIG_WARNING = "config_warning"


class Request(Enum):
    """Work items the signal controller hands to the control loop."""

    CHILD_EXITED = auto()
    RELOAD = auto()
    TERMINATE = auto()


@dataclass(frozen=True, slots=True)
class SupervisorEvent:
    """Immutable supervisor lifecycle event.

    Attributes:
        event_type: Type of lifecycle event.
        timestamp: ISO 8601 formatted timestamp.
        slot: Slot the event refers to, if any.
        pid: Process ID if applicable.
        exit_code: Exit code if a process terminated; negative values are
            the number of the signal that killed it.
        message: Optional human-readable message.
    """

    event_type: SupervisorEventType
    timestamp: str
    slot: int | None = None
    pid: int | None = None
    exit_code: int | None = None
    message: str | None = None


def _get_timestamp() -> str:
    """Get current timestamp in ISO 8601 format."""
    import pendulum  # noqa: PLC0415

    return pendulum.now("UTC").to_iso8601_string()


def make_event(
    event_type: SupervisorEventType,
    *,
    slot: int | None = None,
    pid: int | None = None,
    exit_code: int | None = None,
    message: str | None = None,
) -> SupervisorEvent:
    """Create a SupervisorEvent stamped with the current time."""
    return SupervisorEvent(
        event_type=event_type,
        timestamp=_get_timestamp(),
        slot=slot,
        pid=pid,
        exit_code=exit_code,
        message=message,
    )
