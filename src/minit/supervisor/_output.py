"""Event sink implementations for the supervisor system.

This module provides concrete implementations of the EventSink protocol:
- LogEventSink: Durable structured log records (the daemon's only channel)
- ConsoleEventSink: Colored console lines for foreground runs
- FanOutEventSink: Forwards each event to several sinks
"""

from typing import TYPE_CHECKING, final

from rich.console import Console
from rich.style import Style
from rich.text import Text

from ._models import SupervisorEvent, SupervisorEventType

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ._protocol import EventSink

_WARNING_EVENTS = frozenset(
    {
        SupervisorEventType.LAUNCH_FAILED,
        SupervisorEventType.UNKNOWN_CHILD,
        SupervisorEventType.RELOAD_FAILED,
        SupervisorEventType.CONFIG_WARNING,
    }
)


@final
class LogEventSink:
    """Event sink that writes one structured log record per event.

    Failure events are logged at warning level, everything else at info.
    Fields that are None are omitted from the record. The record carries
    the time the event happened rather than the time it was written.
    """

    __slots__ = ("_logger",)

    def __init__(self, logger: "FilteringBoundLogger") -> None:  # noqa: UP037
        """Initialize the sink.

        Args:
            logger: Logger the records are written to.
        """
        self._logger = logger

    def write_event(self, event: SupervisorEvent) -> None:
        """Write a supervisor event as a log record.

        Args:
            event: The lifecycle event to record.
        """
        fields: dict[str, object] = {
            "timestamp": event.timestamp,
            "slot": event.slot,
            "pid": event.pid,
            "exit_code": event.exit_code,
            "detail": event.message,
        }
        fields = {key: value for key, value in fields.items() if value is not None}

        if event.event_type in _WARNING_EVENTS:
            self._logger.warning(event.event_type.value, **fields)
        else:
            self._logger.info(event.event_type.value, **fields)


@final
class ConsoleEventSink:
    """Event sink that prints formatted events to a console.

    Formats events as `[slot:pid] EVENT - message` with color coding
    based on event type. Undecodable bytes in the message are shown as
    backslash escapes.
    """

    __slots__ = ("_console", "_event_styles")

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the sink.

        Args:
            console: Rich Console instance for output. If None, creates a new one.
        """
        self._console = console or Console()
        self._event_styles: dict[SupervisorEventType, Style] = {
            SupervisorEventType.STARTED: Style(color="green", bold=True),
            SupervisorEventType.EXITED: Style(color="yellow"),
            SupervisorEventType.STOPPED: Style(color="yellow"),
            SupervisorEventType.LAUNCH_FAILED: Style(color="red", bold=True),
            SupervisorEventType.UNKNOWN_CHILD: Style(color="magenta", dim=True),
            SupervisorEventType.RELOAD_REQUESTED: Style(color="cyan"),
            SupervisorEventType.RELOAD_FAILED: Style(color="red"),
            SupervisorEventType.TERMINATE_REQUESTED: Style(color="cyan"),
            SupervisorEventType.CONFIG_WARNING: Style(color="red", dim=True),
        }

    def write_event(self, event: SupervisorEvent) -> None:
        """Print a supervisor event with special formatting.

        Args:
            event: The lifecycle event to record.
        """
        style = self._event_styles.get(event.event_type, Style())

        text = Text()
        if event.slot is not None:
            label = f"[{event.slot}:{event.pid}]" if event.pid else f"[{event.slot}]"
            _ = text.append(label, style=Style(color="blue", bold=True))
            _ = text.append(" ")

        _ = text.append(event.event_type.value.upper(), style=style)

        if event.slot is None and event.pid is not None:
            _ = text.append(f" (pid={event.pid})", style=Style(dim=True))

        if event.exit_code is not None:
            _ = text.append(f" exit_code={event.exit_code}", style=Style(dim=True))

        if event.message:
            message = event.message.encode("utf-8", "backslashreplace").decode()
            _ = text.append(f" - {message}", style=style)

        self._console.print(text)


@final
class FanOutEventSink:
    """Event sink that forwards every event to each of its sinks in order."""

    __slots__ = ("_sinks",)

    def __init__(self, *sinks: "EventSink") -> None:  # noqa: UP037
        self._sinks = sinks

    def write_event(self, event: SupervisorEvent) -> None:
        """Forward an event to every sink.

        Args:
            event: The lifecycle event to record.
        """
        for sink in self._sinks:
            sink.write_event(event)
