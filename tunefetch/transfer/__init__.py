"""Transfer pipeline.

Spawns external transfer processes, extracts their progress and relays it
to a concurrently running progress follower.
"""

from tunefetch.transfer.channel import ProgressReceiver, ProgressSender, create_progress_channel
from tunefetch.transfer.downloader import ARTIFACT_SUFFIX, Downloader, DownloadSpawnFn
from tunefetch.transfer.follower import ProgressFollower, is_async_follower, join_follower, start_follower
from tunefetch.transfer.scanner import parse_progress, scan_progress
from tunefetch.transfer.spawn import command_spawner, popen_spawner
from tunefetch.transfer.streamer import Streamer, StreamSpawnFn

__all__ = [
    "ARTIFACT_SUFFIX",
    "Downloader",
    "DownloadSpawnFn",
    "ProgressFollower",
    "ProgressReceiver",
    "ProgressSender",
    "Streamer",
    "StreamSpawnFn",
    "command_spawner",
    "create_progress_channel",
    "is_async_follower",
    "join_follower",
    "parse_progress",
    "popen_spawner",
    "scan_progress",
    "start_follower",
]
