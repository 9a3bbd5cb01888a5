"""Utilities shared across minit."""

from ._daemon import JOB_CONTROL_SIGNALS, daemonize
from ._logging import DurableWriteLogger, create_supervisor_logger, open_log_writer

__all__ = [
    "JOB_CONTROL_SIGNALS",
    "DurableWriteLogger",
    "create_supervisor_logger",
    "daemonize",
    "open_log_writer",
]
