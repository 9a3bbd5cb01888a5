"""Child configuration and runtime settings for minit.

Key Components:
    - ChildSpec: One supervised program with its redirections
    - ConfigSnapshot: The ordered specs currently in effect
    - parse / load_config: Line-oriented configuration loader
    - SupervisorSettings: Options for one supervisor run
"""

from ._loader import DEFAULT_MAX_CHILDREN, load_config, parse
from ._models import (
    ChildSpec,
    ConfigSnapshot,
    ConfigWarning,
    LogFormat,
    LogLevel,
    ParseResult,
)
from ._settings import DEFAULT_LOG_FILE, SupervisorSettings

__all__ = [
    "DEFAULT_LOG_FILE",
    "DEFAULT_MAX_CHILDREN",
    "ChildSpec",
    "ConfigSnapshot",
    "ConfigWarning",
    "LogFormat",
    "LogLevel",
    "ParseResult",
    "SupervisorSettings",
    "load_config",
    "parse",
]
