"""Helpers turning a command line builder into a spawn function.

Plugins describe their transfer tool with a callable mapping
``(url, file_name)`` to an argv list; these factories take care of starting
the process with the pipes the pipeline expects.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
from typing import Any, Callable, Sequence

from tunefetch.transfer.downloader import DownloadSpawnFn
from tunefetch.transfer.streamer import StreamSpawnFn

logger = logging.getLogger(__name__)

ArgvBuilder = Callable[[str, str], Sequence[str]]

# Default StreamReader buffer limit used by asyncio (64 KiB)
DEFAULT_READER_LIMIT = 2 ** 16


def command_spawner(
    build_argv: ArgvBuilder,
    limit: int = DEFAULT_READER_LIMIT,
    stderr: Any = asyncio.subprocess.DEVNULL,
) -> DownloadSpawnFn:
    """Build an async spawn function for :class:`Downloader`.

    Args:
        build_argv: Maps ``(url, file_name)`` to the command line
        limit: Buffer limit of the stdout stream reader
        stderr: Where the process' stderr goes

    Returns:
        Coroutine function starting the process with stdout piped
    """

    async def spawn(url: str, file_name: str) -> asyncio.subprocess.Process:
        argv = list(build_argv(url, file_name))
        logger.info(f"Spawning transfer process: {' '.join(argv)}")
        return await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=stderr,
            limit=limit,
        )

    return spawn


def popen_spawner(build_argv: ArgvBuilder, **popen_kwargs: Any) -> StreamSpawnFn:
    """Build a blocking spawn function for :class:`Streamer`.

    Extra keyword arguments are passed to :class:`subprocess.Popen`.
    """

    def spawn(url: str, file_name: str) -> subprocess.Popen:
        argv = list(build_argv(url, file_name))
        logger.info(f"Spawning streaming process: {' '.join(argv)}")
        return subprocess.Popen(argv, **popen_kwargs)

    return spawn
