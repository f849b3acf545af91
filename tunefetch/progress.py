"""Ready-made progress followers.

Pass one of these to :meth:`PluginManager.download
<tunefetch.plugins.manager.PluginManager.download>` to display or record
transfer progress.
"""

from __future__ import annotations

import logging
from typing import Callable

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from tunefetch.transfer.channel import ProgressReceiver

logger = logging.getLogger(__name__)


def rich_progress_follower(
    description: str = "Downloading",
    console: Console | None = None,
    transient: bool = False,
) -> Callable[[ProgressReceiver], None]:
    """Build a follower rendering a Rich progress bar.

    The follower blocks on the receiver, so it runs in a worker thread.
    The bar is completed once the channel closes.

    Args:
        description: Text shown next to the bar
        console: Optional custom console instance
        transient: If True, remove the bar after completion

    Example:
        await manager.download(url, "song", rich_progress_follower("song"))
    """

    def follow(receiver: ProgressReceiver) -> None:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=transient,
        ) as progress:
            task = progress.add_task(description, total=100)
            for value in receiver:
                progress.update(task, completed=value)
            progress.update(task, completed=100)

    return follow


async def log_progress_follower(receiver: ProgressReceiver) -> None:
    """Follower logging every progress value at DEBUG level."""
    last = None
    async for value in receiver:
        logger.debug(f"Download progress: {value}%")
        last = value
    logger.debug(f"Download progress finished at {last}%")
