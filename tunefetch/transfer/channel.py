"""Single-producer/single-consumer channel carrying download progress.

The producing end is owned by the transfer read loop, the receiving end by
the progress follower. The receiver can be consumed with ``async for`` from
a coroutine or with a plain ``for`` loop from a worker thread.
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Iterator, Optional, Tuple

# Marks the end of the stream once the sender is closed
_CLOSED = object()


class ProgressSender:
    """Sending half of a progress channel."""

    def __init__(self, queue: asyncio.Queue) -> None:
        self._queue = queue
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, value: float) -> None:
        """Queue a progress value for the receiver.

        Raises:
            RuntimeError: If the sender has been closed
        """
        if self._closed:
            raise RuntimeError("Cannot send on a closed progress channel")
        self._queue.put_nowait(value)

    def close(self) -> None:
        """Signal that no more values will be sent. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)


class ProgressReceiver:
    """Receiving half of a progress channel.

    Values arrive in the order they were sent. Once the sender is closed
    and every queued value has been consumed, :meth:`recv` returns ``None``
    and iteration stops.
    """

    def __init__(self, queue: asyncio.Queue, loop: asyncio.AbstractEventLoop) -> None:
        self._queue = queue
        self._loop = loop
        self._exhausted = False

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    async def recv(self) -> Optional[float]:
        """Wait for the next value, or ``None`` once the channel is closed."""
        if self._exhausted:
            return None
        item = await self._queue.get()
        return self._unwrap(item)

    def recv_blocking(self) -> Optional[float]:
        """Blocking variant of :meth:`recv` for use from a worker thread.

        Raises:
            RuntimeError: If called from the event loop thread that owns the
                channel, where it would deadlock
        """
        if self._exhausted:
            return None

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            raise RuntimeError(
                "recv_blocking() cannot be called from the event loop thread; "
                "use 'await recv()' instead"
            )

        future = asyncio.run_coroutine_threadsafe(self._queue.get(), self._loop)
        return self._unwrap(future.result())

    def _unwrap(self, item: object) -> Optional[float]:
        if item is _CLOSED:
            self._exhausted = True
            return None
        return item  # type: ignore[return-value]

    def __aiter__(self) -> AsyncIterator[float]:
        return self

    async def __anext__(self) -> float:
        value = await self.recv()
        if value is None:
            raise StopAsyncIteration
        return value

    def __iter__(self) -> Iterator[float]:
        while True:
            value = self.recv_blocking()
            if value is None:
                return
            yield value


def create_progress_channel() -> Tuple[ProgressSender, ProgressReceiver]:
    """Create a connected sender/receiver pair bound to the running loop.

    Must be called from a coroutine.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    return ProgressSender(queue), ProgressReceiver(queue, loop)
