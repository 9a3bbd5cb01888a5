"""Shared test fixtures for minit tests."""

import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from rich.console import Console

from minit.supervisor import SupervisorEvent, SupervisorEventType

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


@dataclass(slots=True)
class RecordingEventSink:
    """Event sink that keeps every event in memory."""

    events: list[SupervisorEvent] = field(default_factory=list)
    on_event: Callable[[SupervisorEvent], None] | None = None

    def write_event(self, event: SupervisorEvent) -> None:
        self.events.append(event)
        if self.on_event is not None:
            self.on_event(event)

    def of_type(self, event_type: SupervisorEventType) -> list[SupervisorEvent]:
        return [event for event in self.events if event.event_type == event_type]

    def types(self) -> list[SupervisorEventType]:
        return [event.event_type for event in self.events]


@pytest.fixture
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "minit.log"


@pytest.fixture
def logger(log_file: Path) -> "FilteringBoundLogger":
    from minit.utils import create_supervisor_logger

    return create_supervisor_logger(log_file, level="debug", log_format="json")


def _require_program(name: str) -> str:
    path = shutil.which(name)
    if path is None:
        pytest.skip(f"{name} not available")
    return path


@pytest.fixture
def cat_bin() -> str:
    return _require_program("cat")


@pytest.fixture
def sleep_bin() -> str:
    return _require_program("sleep")


@pytest.fixture
def true_bin() -> str:
    return _require_program("true")


@pytest.fixture
def console() -> Console:
    return Console(
        width=120,
        force_terminal=True,
        highlight=False,
        color_system=None,
    )
