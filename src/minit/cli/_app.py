"""The command-line interface for minit."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated, Literal

from cyclopts import App, Parameter
from pydantic import ValidationError
from rich.console import Console

from minit.config import DEFAULT_LOG_FILE, DEFAULT_MAX_CHILDREN, SupervisorSettings

from ._exit_codes import EXIT_USAGE_ERROR
from ._supervise import run_supervisor

LogLevelName = Literal["debug", "info", "warning", "error"]
LogFormatName = Literal["json", "text"]

_HELP = "A minimal init-style process supervisor."


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Create the minit CLI application.

    Args:
        console: Console for regular output. Defaults to stdout.
        error_console: Console for errors. Defaults to stderr.
        exit_on_error: Exit on argument parsing errors instead of raising.

    Returns:
        The configured cyclopts App.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="minit",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.default
    def supervise(  # pyright: ignore[reportUnusedFunction]
        config: Annotated[
            Path,
            Parameter(help="Child configuration file, one child per line."),
        ],
        *,
        log_file: Annotated[
            Path,
            Parameter(help="Append-only log file."),
        ] = DEFAULT_LOG_FILE,
        log_level: Annotated[
            LogLevelName,
            Parameter(help="Log level threshold."),
        ] = "info",
        log_format: Annotated[
            LogFormatName,
            Parameter(help="Log record format."),
        ] = "text",
        max_children: Annotated[
            int,
            Parameter(help="Maximum number of supervised children."),
        ] = DEFAULT_MAX_CHILDREN,
        foreground: Annotated[
            bool,
            Parameter(help="Stay attached to the terminal and echo events."),
        ] = False,
    ) -> None:
        """Supervise the children listed in CONFIG.

        Each line of CONFIG reads `command [args...] input_file output_file`.
        Children are restarted whenever they exit. SIGHUP reloads CONFIG and
        restarts every child; SIGTERM stops them all and exits.
        """
        try:
            settings = SupervisorSettings(
                config_path=config,
                log_file=log_file,
                log_level=log_level,  # pyright: ignore[reportArgumentType]
                log_format=log_format,  # pyright: ignore[reportArgumentType]
                max_children=max_children,
                daemonize=not foreground,
            )
        except ValidationError as e:
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"])
                error_console.print(f"[red]Error:[/red] {location}: {error['msg']}")
            raise SystemExit(EXIT_USAGE_ERROR) from e

        raise SystemExit(
            run_supervisor(settings, console=console, error_console=error_console)
        )

    return app


def main() -> None:
    """Default entrypoint for the `minit` CLI."""
    app = create_app()
    app()
