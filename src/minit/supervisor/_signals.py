"""Signal controller for the supervisor.

Signals are never acted on where they are received. The anyio signal
receiver only queues the signal number; a forwarding task maps it to a
Request and pushes it onto a single in-memory queue, which the control
loop consumes one request at a time. A request is therefore handled to
completion before the next one is read, and no supervisor state is touched
from signal context.
"""

import math
import signal
from types import MappingProxyType
from typing import final

import anyio
from anyio.abc import TaskStatus

from ._models import Request

SIGNAL_REQUESTS = MappingProxyType(
    {
        signal.SIGCHLD: Request.CHILD_EXITED,
        signal.SIGHUP: Request.RELOAD,
        signal.SIGTERM: Request.TERMINATE,
        signal.SIGINT: Request.TERMINATE,
    }
)


@final
class SignalController:
    """Serializes signal deliveries and programmatic requests into one queue."""

    __slots__ = ("_receive", "_send")

    def __init__(self) -> None:
        self._send, self._receive = anyio.create_memory_object_stream[Request](
            max_buffer_size=math.inf
        )

    def request(self, request: Request) -> None:
        """Queue a request without waiting.

        Args:
            request: The request to queue behind any already pending.
        """
        self._send.send_nowait(request)

    async def receive(self) -> Request:
        """Wait for and return the next pending request."""
        return await self._receive.receive()

    async def forward_signals(
        self,
        *,
        task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED,
    ) -> None:
        """Translate delivered signals into queued requests.

        Reports readiness through ``task_status`` once the signal handlers
        are installed, then runs until cancelled.
        """
        with anyio.open_signal_receiver(*SIGNAL_REQUESTS) as signals:
            task_status.started()
            async for signum in signals:
                self.request(SIGNAL_REQUESTS[signum])
