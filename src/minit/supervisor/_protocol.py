"""Protocol definitions for the supervisor system.

This module defines the interface that decouples the supervision engine
from where its events end up:
- EventSink: Protocol for consuming supervisor events
"""

from typing import Protocol, runtime_checkable

from ._models import SupervisorEvent  # noqa: TC001 - Used in runtime type annotations


@runtime_checkable
class EventSink(Protocol):
    """Protocol for consuming supervisor lifecycle events.

    The supervision loop is synchronous between requests, so sinks are
    called synchronously and must finish writing before returning.
    """

    def write_event(self, event: SupervisorEvent) -> None:
        """Record a supervisor lifecycle event.

        Args:
            event: The lifecycle event to record.
        """
        ...
