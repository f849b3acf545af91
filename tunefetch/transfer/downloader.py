"""Download pipeline.

A :class:`Downloader` spawns an external transfer process, scans its
standard output for progress updates and forwards them through a
:class:`~tunefetch.transfer.channel.ProgressSender`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable, NoReturn

from tunefetch.exceptions import DownloadError
from tunefetch.transfer.channel import ProgressSender
from tunefetch.transfer.scanner import scan_progress

logger = logging.getLogger(__name__)

# Transfers are expected to be normalized to mp3 by the spawned process
ARTIFACT_SUFFIX = ".mp3"

DownloadSpawnFn = Callable[[str, str], Awaitable[asyncio.subprocess.Process]]


class Downloader:
    """Runs a transfer process and reports its progress.

    Args:
        spawn: Coroutine function receiving ``(url, file_name)`` and
            returning a process whose stdout is a pipe

    Example:
        downloader = Downloader(command_spawner(
            lambda url, name: ["yt-dlp", "-x", "--newline", "-o", name, url]
        ))
        artifact = await downloader.download(url, "song", sender)
    """

    def __init__(self, spawn: DownloadSpawnFn) -> None:
        self._spawn = spawn

    async def download(self, url: str, file_name: str, sender: ProgressSender) -> str:
        """Download ``url`` into ``file_name``.

        Progress values are sent in output order. The sender is always
        closed before this method returns or raises.

        Args:
            url: Media URL handed to the transfer process
            file_name: Output name handed to the transfer process
            sender: Sending half of the progress channel

        Returns:
            ``file_name`` with the ``.mp3`` suffix appended

        Raises:
            DownloadError: If the process cannot be spawned, has no stdout
                pipe, its output cannot be read, or it exits with a non-zero
                status
        """
        try:
            try:
                process = await self._spawn(url, file_name)
            except Exception as e:
                logger.error(f"Failed to spawn transfer process for {url}: {e}")
                raise DownloadError(f"Failed to spawn transfer process: {e}") from e

            if process.stdout is None:
                raise DownloadError("Transfer process stdout is not a pipe")

            logger.debug(f"Transfer process {process.pid} started for {url}")
            try:
                async for value in scan_progress(process.stdout):
                    logger.debug(f"Progress for {file_name}: {value}%")
                    sender.send(value)
            except Exception as e:
                _read_failed(process, url, e)
        finally:
            sender.close()

        # Output after completion is discarded so the process can't block on a full pipe
        try:
            await _drain(process.stdout)
        except Exception as e:
            _read_failed(process, url, e)

        try:
            returncode = await process.wait()
        except Exception as e:
            raise DownloadError(f"Failed to wait for transfer process: {e}") from e

        if returncode != 0:
            logger.error(f"Transfer process for {url} exited with status {returncode}")
            raise DownloadError(f"Transfer process exited with status {returncode}")

        artifact = file_name + ARTIFACT_SUFFIX
        logger.info(f"Downloaded {url} as {artifact}")
        return artifact


def _read_failed(process: asyncio.subprocess.Process, url: str, error: Exception) -> NoReturn:
    logger.error(f"Failed to read output of transfer process for {url}: {error}")
    with contextlib.suppress(ProcessLookupError):
        process.kill()
    raise DownloadError(f"Failed to read transfer process output: {error}") from error


async def _drain(reader: asyncio.StreamReader) -> None:
    while await reader.read(65536):
        pass
