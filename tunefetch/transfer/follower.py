"""Running progress followers alongside a transfer.

A progress follower is any callable taking a
:class:`~tunefetch.transfer.channel.ProgressReceiver`. Coroutine functions
and objects with an ``async def __call__`` run as tasks on the current loop;
plain functions run in a worker thread so they may block on the receiver.
A plain function returning an awaitable has that awaitable run on the loop.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Union

from tunefetch.exceptions import DownloadError
from tunefetch.transfer.channel import ProgressReceiver

logger = logging.getLogger(__name__)

ProgressFollower = Callable[[ProgressReceiver], Union[Awaitable[Any], Any]]


def is_async_follower(follower: ProgressFollower) -> bool:
    """True if calling ``follower`` returns a coroutine to run on the loop."""
    return inspect.iscoroutinefunction(follower) or inspect.iscoroutinefunction(
        getattr(follower, "__call__", None)
    )


def start_follower(follower: ProgressFollower, receiver: ProgressReceiver) -> asyncio.Task:
    """Schedule ``follower`` concurrently and return its task."""
    if is_async_follower(follower):
        coro = follower(receiver)
    else:
        coro = _run_in_thread(follower, receiver)
    return asyncio.create_task(coro, name="tunefetch-progress-follower")


async def _run_in_thread(follower: ProgressFollower, receiver: ProgressReceiver) -> Any:
    loop = asyncio.get_running_loop()

    def run() -> Any:
        result = follower(receiver)
        if inspect.isawaitable(result):
            return asyncio.run_coroutine_threadsafe(_await(result), loop).result()
        return result

    return await asyncio.to_thread(run)


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


async def join_follower(task: asyncio.Task) -> None:
    """Wait for a follower task to finish.

    Raises:
        DownloadError: If the follower raised or was cancelled
    """
    try:
        await task
    except asyncio.CancelledError as e:
        if not task.cancelled():
            raise
        logger.error("Progress follower was cancelled")
        raise DownloadError("An error occurred while joining progress follower: cancelled") from e
    except Exception as e:
        logger.error(f"Progress follower failed: {e}")
        raise DownloadError(f"An error occurred while joining progress follower: {e}") from e
