import json
import time
from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from minit.cli import create_app


@pytest.fixture
def minit_cli_with_exit_code(console: Console) -> Callable[..., int]:
    """Create CLI app for testing that returns the exit code.

    Only run it in the foreground or with arguments that fail before the
    process detaches; daemonizing would fork the test runner.
    """

    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        """Run CLI app and return exit code (0 if no SystemExit)."""

        try:
            app(args)
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run


def read_log_records(log_file: Path) -> list[dict[str, object]]:
    if not log_file.exists():
        return []
    return [json.loads(line) for line in log_file.read_text().splitlines() if line]


@pytest.fixture
def wait_for_log() -> Callable[..., list[dict[str, object]]]:
    """Poll a JSON log file until a predicate holds over its records."""

    def _wait(
        log_file: Path,
        predicate: Callable[[list[dict[str, object]]], bool],
        timeout: float = 10.0,
    ) -> list[dict[str, object]]:
        deadline = time.monotonic() + timeout
        while True:
            records = read_log_records(log_file)
            if predicate(records):
                return records
            if time.monotonic() > deadline:
                events = [record.get("event") for record in records]
                pytest.fail(f"timed out waiting for log records, saw {events}")
            time.sleep(0.05)

    return _wait


@pytest.fixture
def read_log() -> Callable[[Path], list[dict[str, object]]]:
    return read_log_records
