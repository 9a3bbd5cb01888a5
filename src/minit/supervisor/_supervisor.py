"""Main supervisor coordinating the process table, launcher and signals.

This module provides the Supervisor class. All supervision work runs on a
single control task: the initial launch, reaping and relaunching exited
children, full reloads and the final drain. Reload and terminate requests
arrive through the SignalController queue and are handled one at a time.

Stopping a child sends SIGTERM and then waits for that child without a
timeout. A child that ignores SIGTERM blocks the supervisor indefinitely;
there is no escalation to SIGKILL.
"""

import contextlib
import os
import signal
from typing import TYPE_CHECKING, final

import anyio

from minit.config import (
    DEFAULT_MAX_CHILDREN,
    ChildSpec,
    ConfigSnapshot,
    ParseResult,
    load_config,
)
from minit.exceptions import ConfigLoadError, LaunchError

from ._launcher import Launcher
from ._models import Request, SupervisorEventType, SupervisorState, make_event
from ._signals import SignalController
from ._table import ProcessTable

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from ._protocol import EventSink


@final
class Supervisor:
    """Keeps every configured child running.

    Slot ``i`` always runs ``snapshot.specs[i]``. When a child exits it is
    reaped and its slot relaunched immediately, with no delay between
    restarts.
    """

    __slots__ = (
        "_controller",
        "_launcher",
        "_logger",
        "_sink",
        "_snapshot",
        "_state",
        "_table",
    )

    def __init__(
        self,
        snapshot: ConfigSnapshot,
        *,
        sink: "EventSink",  # noqa: UP037
        logger: "FilteringBoundLogger",  # noqa: UP037
        capacity: int = DEFAULT_MAX_CHILDREN,
        controller: SignalController | None = None,
    ) -> None:
        """Initialize the supervisor.

        Args:
            snapshot: Configuration to supervise initially.
            sink: Sink for lifecycle events.
            logger: Logger handed to children for setup failures.
            capacity: Number of slots in the process table.
            controller: Request queue. A new one is created if None.

        Raises:
            ValueError: If the snapshot holds more children than capacity.
        """
        if snapshot.count > capacity:
            msg = f"{snapshot.count} children configured but capacity is {capacity}"
            raise ValueError(msg)

        self._snapshot = snapshot
        self._sink = sink
        self._logger = logger
        self._table = ProcessTable(capacity)
        self._launcher = Launcher(self._table, sink, logger)
        self._controller = controller or SignalController()
        self._state = SupervisorState.RUNNING

    @classmethod
    def from_config(
        cls,
        path: "Path",  # noqa: UP037
        *,
        sink: "EventSink",  # noqa: UP037
        logger: "FilteringBoundLogger",  # noqa: UP037
        capacity: int = DEFAULT_MAX_CHILDREN,
    ) -> "Supervisor":  # noqa: UP037
        """Create a supervisor from a configuration file.

        Configuration warnings are reported to the sink.

        Raises:
            ConfigLoadError: If the file cannot be read.
        """
        result = load_config(path, max_children=capacity)
        supervisor = cls(
            ConfigSnapshot(specs=result.specs, path=path),
            sink=sink,
            logger=logger,
            capacity=capacity,
        )
        supervisor._report_warnings(result)
        return supervisor

    @property
    def state(self) -> SupervisorState:
        """Return the current supervisor state."""
        return self._state

    @property
    def table(self) -> ProcessTable:
        """Return the process table."""
        return self._table

    @property
    def snapshot(self) -> ConfigSnapshot:
        """Return the configuration currently in effect."""
        return self._snapshot

    @property
    def controller(self) -> SignalController:
        """Return the request queue feeding the control loop."""
        return self._controller

    def _report_warnings(self, result: ParseResult) -> None:
        for warning in result.warnings:
            self._sink.write_event(
                make_event(
                    SupervisorEventType.CONFIG_WARNING,
                    message=f"line {warning.line}: {warning.message}",
                )
            )

    def _launch_slot(self, slot: int, spec: ChildSpec) -> int | None:
        try:
            return self._launcher.launch(slot, spec)
        except LaunchError as e:
            self._sink.write_event(
                make_event(
                    SupervisorEventType.LAUNCH_FAILED,
                    slot=slot,
                    message=str(e),
                )
            )
            return None

    def start(self) -> None:
        """Launch every configured slot in ascending order.

        A slot whose process cannot be created stays empty until the next
        reload.
        """
        for slot, spec in enumerate(self._snapshot.specs):
            _ = self._launch_slot(slot, spec)

    def _handle_exit(self, pid: int, status: int) -> None:
        exit_code = os.waitstatus_to_exitcode(status)
        slot = self._table.find_slot_by_pid(pid)

        if slot is None:
            self._sink.write_event(
                make_event(
                    SupervisorEventType.UNKNOWN_CHILD,
                    pid=pid,
                    exit_code=exit_code,
                    message="Reaped a process not owned by any slot",
                )
            )
            return

        self._table.clear(slot)
        self._sink.write_event(
            make_event(
                SupervisorEventType.EXITED,
                slot=slot,
                pid=pid,
                exit_code=exit_code,
                message=f"child {slot} (pid {pid}) exited, restarting",
            )
        )

        spec = self._snapshot.spec_for(slot)
        if spec is not None and self._state == SupervisorState.RUNNING:
            _ = self._launch_slot(slot, spec)

    def reap(self, *, block: bool = False) -> int:
        """Reap every exited child and relaunch its slot.

        Args:
            block: Wait for at least one child to exit before collecting
                the rest without waiting.

        Returns:
            The number of processes reaped.
        """
        reaped = 0
        while True:
            options = 0 if block and reaped == 0 else os.WNOHANG
            try:
                pid, status = os.waitpid(-1, options)
            except ChildProcessError:
                break
            if pid == 0:
                break

            reaped += 1
            self._handle_exit(pid, status)

        return reaped

    def _stop_slot(self, slot: int) -> None:
        pid = self._table.get(slot)
        if pid is None:
            return

        with contextlib.suppress(ProcessLookupError):
            os.kill(pid, signal.SIGTERM)

        exit_code: int | None = None
        try:
            _, status = os.waitpid(pid, 0)
        except ChildProcessError:
            # Already collected elsewhere; the slot is stale either way.
            self._logger.debug("stop_wait_no_child", slot=slot, pid=pid)
        else:
            exit_code = os.waitstatus_to_exitcode(status)

        self._table.clear(slot)
        self._sink.write_event(
            make_event(
                SupervisorEventType.STOPPED,
                slot=slot,
                pid=pid,
                exit_code=exit_code,
                message=f"child {slot} (pid {pid}) exited by signal SIGTERM",
            )
        )

    def stop_all(self) -> None:
        """Terminate and reap every occupied slot, one at a time."""
        for slot in self._table.all_occupied_slots():
            self._stop_slot(slot)

    def reload(self) -> bool:
        """Replace every child with those of a freshly loaded configuration.

        The configuration is read from the path of the current snapshot. If
        it cannot be read, the running children are left untouched. A
        readable file without valid lines is applied like any other: every
        child is stopped and none is started, which ends the run loop.

        Returns:
            True if the new configuration was applied.
        """
        self._state = SupervisorState.RELOADING
        self._sink.write_event(
            make_event(
                SupervisorEventType.RELOAD_REQUESTED,
                message="reloading config and restarting children",
            )
        )

        try:
            result = self._load_snapshot()
        except ConfigLoadError as e:
            self._sink.write_event(
                make_event(SupervisorEventType.RELOAD_FAILED, message=str(e))
            )
            self._state = SupervisorState.RUNNING
            return False

        self._report_warnings(result)
        self.stop_all()
        self._snapshot = ConfigSnapshot(specs=result.specs, path=self._snapshot.path)
        self._state = SupervisorState.RUNNING
        self.start()
        return True

    def _load_snapshot(self) -> ParseResult:
        if self._snapshot.path is None:
            msg = "No configuration file to reload from"
            raise ConfigLoadError(msg)
        return load_config(self._snapshot.path, max_children=self._table.capacity)

    def terminate(self) -> int:
        """Stop every child and leave the supervisor stopped.

        Returns:
            The exit status for the supervisor process.
        """
        self._state = SupervisorState.DRAINING
        self._sink.write_event(
            make_event(
                SupervisorEventType.TERMINATE_REQUESTED,
                message="ending all processes",
            )
        )
        self.stop_all()
        self._state = SupervisorState.STOPPED
        return 0

    def request_reload(self) -> None:
        """Queue a reload behind any pending request."""
        self._controller.request(Request.RELOAD)

    def request_shutdown(self) -> None:
        """Queue a graceful shutdown behind any pending request."""
        self._controller.request(Request.TERMINATE)

    async def run(self) -> int:
        """Run the supervisor until terminated or nothing is left to run.

        Installs the signal handlers, launches every slot and then handles
        queued requests one at a time.

        The loop ends as soon as no slot is occupied, for example when every
        launch failed or a reload emptied the configuration. A SIGHUP sent
        after that cannot bring children back, since nothing is listening.

        Returns:
            The exit status for the supervisor process.
        """
        async with anyio.create_task_group() as tg:
            await tg.start(self._controller.forward_signals)
            self.start()
            exit_code = await self._serve()
            tg.cancel_scope.cancel()

        return exit_code

    async def _serve(self) -> int:
        while not self._table.is_empty():
            request = await self._controller.receive()

            if request is Request.TERMINATE:
                return self.terminate()
            if request is Request.RELOAD:
                _ = self.reload()
            else:
                _ = self.reap()

        self._logger.warning("no_children_left", detail="nothing to supervise")
        self._state = SupervisorState.STOPPED
        return 0

    def get_status(self) -> dict[int, dict[str, object]]:
        """Get status summary for all configured slots.

        Returns:
            Dictionary mapping slot numbers to status dictionaries.
        """
        return {
            slot: {
                "pid": self._table.get(slot),
                "command": spec.command,
                "args": list(spec.args),
                "input": spec.input_path,
                "output": spec.output_path,
            }
            for slot, spec in enumerate(self._snapshot.specs)
        }
