"""Runtime settings for the supervisor.

This module provides the SupervisorSettings Pydantic model collecting the
options that control one supervisor run.
"""

from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ._loader import DEFAULT_MAX_CHILDREN
from ._models import LogFormat, LogLevel

DEFAULT_LOG_FILE = Path("/tmp/minit.log")  # noqa: S108

MAX_CHILDREN_LIMIT = 1024


class SupervisorSettings(BaseModel):
    """Options for a supervisor run.

    Attributes:
        config_path: Child configuration file, made absolute on validation.
        log_file: Append-only log destination.
        log_level: Log level threshold.
        log_format: Log output format.
        max_children: Capacity of the process table.
        daemonize: Whether to detach into the background before supervising.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    config_path: Path
    log_file: Path = DEFAULT_LOG_FILE
    log_level: LogLevel = LogLevel.INFO
    log_format: LogFormat = LogFormat.TEXT
    max_children: int = Field(
        default=DEFAULT_MAX_CHILDREN, ge=1, le=MAX_CHILDREN_LIMIT
    )
    daemonize: bool = True

    @field_validator("config_path", "log_file")
    @classmethod
    def _make_absolute(cls, value: Path) -> Path:
        # Relative to the launch directory; the daemon itself runs from "/".
        return value.expanduser().absolute()
