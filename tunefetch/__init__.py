"""tunefetch - pluggable media lookup and retrieval.

Register catalog backends on a PluginManager, pick a default one, then
query it for tracks and download or stream the matches while following
transfer progress.
"""

__version__ = "0.1.0"

from tunefetch.exceptions import (
    DownloadError,
    DuplicatedPluginError,
    InvalidResponseTextError,
    InvalidURLError,
    JsonUnparsableError,
    NoDefaultPluginError,
    ParsableTextNotFoundError,
    ParseError,
    PluginError,
    QueryError,
    RequestFailedError,
    StreamError,
    TunefetchError,
    UnregisteredPluginError,
)
from tunefetch.plugins import MediaPlugin, PluginManager
from tunefetch.query import QueryInfo, QueryResult, QueryResultData, format_duration
from tunefetch.transfer import Downloader, ProgressReceiver, ProgressSender, Streamer

__all__ = [
    "DownloadError",
    "Downloader",
    "DuplicatedPluginError",
    "InvalidResponseTextError",
    "InvalidURLError",
    "JsonUnparsableError",
    "MediaPlugin",
    "NoDefaultPluginError",
    "ParsableTextNotFoundError",
    "ParseError",
    "PluginError",
    "PluginManager",
    "ProgressReceiver",
    "ProgressSender",
    "QueryError",
    "QueryInfo",
    "QueryResult",
    "QueryResultData",
    "RequestFailedError",
    "StreamError",
    "Streamer",
    "TunefetchError",
    "UnregisteredPluginError",
    "format_duration",
]
