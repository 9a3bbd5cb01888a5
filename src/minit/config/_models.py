"""Data models for the child configuration.

This module defines the immutable types produced by the config loader:
- ChildSpec: One supervised program and its redirections
- ConfigWarning: A problem found on a single configuration line
- ParseResult: Specs and warnings from one parse
- ConfigSnapshot: The configuration currently in effect
- LogLevel / LogFormat: Logging option values
"""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path  # noqa: TC003 - Used in runtime type annotations


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class ChildSpec:
    """Configuration for one supervised child.

    Attributes:
        command: Path of the program to execute.
        args: Argument vector; the first element is the command itself.
        input_path: File opened read-only as the child's standard input.
        output_path: File truncated and opened as the child's standard output.
        line: 1-based line number in the source file, if known.
    """

    command: str
    args: tuple[str, ...]
    input_path: str
    output_path: str
    line: int | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.args:
            msg = "args must contain at least the command"
            raise ValueError(msg)

    @classmethod
    def from_tokens(
        cls,
        tokens: list[str],
        *,
        line: int | None = None,
    ) -> "ChildSpec":  # noqa: UP037
        """Build a spec from a tokenized configuration line.

        The last two tokens are the input and output paths. Everything before
        them is the argument vector, whose first token is also the command.

        Args:
            tokens: Whitespace-separated tokens, at least three.
            line: Source line number for diagnostics.

        Returns:
            The parsed ChildSpec.

        Raises:
            ValueError: If fewer than three tokens are given.
        """
        if len(tokens) < 3:  # noqa: PLR2004
            msg = f"expected at least 3 tokens, got {len(tokens)}"
            raise ValueError(msg)

        *args, input_path, output_path = tokens
        return cls(
            command=args[0],
            args=tuple(args),
            input_path=input_path,
            output_path=output_path,
            line=line,
        )


@dataclass(frozen=True, slots=True)
class ConfigWarning:
    """A configuration line that was skipped or truncated.

    Attributes:
        line: 1-based line number the warning refers to.
        message: Human-readable description.
    """

    line: int
    message: str


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of parsing a configuration text."""

    specs: tuple[ChildSpec, ...] = ()
    warnings: tuple[ConfigWarning, ...] = ()


@dataclass(frozen=True, slots=True)
class ConfigSnapshot:
    """The ordered list of child specs currently in effect.

    Replaced as a whole on reload. Slot ``i`` is always backed by
    ``specs[i]``.

    Attributes:
        specs: Child specs in file order.
        path: File the specs were loaded from, if any.
    """

    specs: tuple[ChildSpec, ...] = ()
    path: Path | None = None

    @property
    def count(self) -> int:
        """Return the number of configured children."""
        return len(self.specs)

    def spec_for(self, slot: int) -> ChildSpec | None:
        """Return the spec backing ``slot``, or None if out of range."""
        if 0 <= slot < len(self.specs):
            return self.specs[slot]
        return None
