"""Streaming handle.

A reduced sibling of :class:`~tunefetch.transfer.downloader.Downloader`: it
spawns the external process and hands it back, without tracking progress.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Callable

from tunefetch.exceptions import StreamError

logger = logging.getLogger(__name__)

StreamSpawnFn = Callable[[str, str], subprocess.Popen]


class Streamer:
    """Starts a streaming process for a media URL."""

    def __init__(self, spawn: StreamSpawnFn) -> None:
        self._spawn = spawn

    def stream(self, url: str, file_name: str) -> subprocess.Popen:
        """Spawn the streaming process and return its handle.

        Raises:
            StreamError: If the process cannot be spawned
        """
        try:
            handle = self._spawn(url, file_name)
        except Exception as e:
            logger.error(f"Failed to spawn streaming process for {url}: {e}")
            raise StreamError(str(e)) from e

        logger.info(f"Streaming {url} (pid {handle.pid})")
        return handle
