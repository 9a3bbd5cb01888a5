"""Line-oriented child configuration loader.

Each non-blank line describes one child::

    command [args...] input_file output_file

Loading is all-or-nothing per line and best-effort overall: a malformed
line is skipped with a warning, and lines beyond the slot capacity are
dropped with a single warning.

Files are decoded as UTF-8 with ``surrogateescape``, so paths and arguments
in other encodings reach the filesystem as the original bytes.
"""

from pathlib import Path

from minit.exceptions import ConfigLoadError

from ._models import ChildSpec, ConfigWarning, ParseResult

DEFAULT_MAX_CHILDREN = 32

_COMMENT_PREFIX = "#"


def parse(text: str, *, max_children: int = DEFAULT_MAX_CHILDREN) -> ParseResult:
    """Parse configuration text into child specs.

    Args:
        text: Raw configuration text.
        max_children: Maximum number of specs to keep.

    Returns:
        The well-formed specs in file order, plus one warning for each
        malformed line and at most one capacity warning.
    """
    specs: list[ChildSpec] = []
    warnings: list[ConfigWarning] = []

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        tokens = raw_line.split()
        if not tokens or tokens[0].startswith(_COMMENT_PREFIX):
            continue

        if len(specs) >= max_children:
            warnings.append(
                ConfigWarning(
                    line=lineno,
                    message=(
                        f"Maximum number of processes ({max_children}) reached, "
                        "ignoring remaining lines"
                    ),
                )
            )
            break

        try:
            specs.append(ChildSpec.from_tokens(tokens, line=lineno))
        except ValueError as e:
            warnings.append(
                ConfigWarning(line=lineno, message=f"Invalid config line: {e}")
            )

    return ParseResult(specs=tuple(specs), warnings=tuple(warnings))


def load_config(
    path: Path | str,
    *,
    max_children: int = DEFAULT_MAX_CHILDREN,
) -> ParseResult:
    """Read and parse a configuration file.

    Args:
        path: Path to the configuration file.
        max_children: Maximum number of specs to keep.

    Returns:
        The parse result for the file contents.

    Raises:
        ConfigLoadError: If the file cannot be read.
    """
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8", errors="surrogateescape")
    except OSError as e:
        msg = f"Failed to open config file {config_path}: {e}"
        raise ConfigLoadError(msg, path=config_path, cause=e) from e

    return parse(text, max_children=max_children)
