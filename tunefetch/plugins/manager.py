"""Plugin manager for registering plugins and dispatching to the default one.

The PluginManager owns named plugin instances, tracks which one is the
default, and routes query, download and stream calls to it.
"""

import asyncio
import logging
import subprocess
from types import TracebackType
from typing import Dict, List, Optional, Type

import httpx

from tunefetch.config import HttpConfig, TunefetchConfig
from tunefetch.exceptions import (
    DuplicatedPluginError,
    NoDefaultPluginError,
    RequestFailedError,
    UnregisteredPluginError,
)
from tunefetch.plugins.base import MediaPlugin
from tunefetch.query import QueryInfo, QueryResult
from tunefetch.transfer.channel import create_progress_channel
from tunefetch.transfer.follower import ProgressFollower, join_follower, start_follower

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages registered plugins and provides a single interface to them.

    A plugin has to be set as default before ``query``, ``download`` or
    ``stream`` can be called. The manager is not thread-safe; callers
    sharing one across threads must synchronize access themselves.

    Example:
        async with PluginManager() as manager:
            manager.register("itunes", ItunesPlugin())
            manager.set_default("itunes")

            results = await manager.query(QueryInfo.build_raw("harder better"))
            artifact = await manager.download(
                str(results[0].track_url), "track", rich_progress_follower("track")
            )
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        config: Optional[TunefetchConfig] = None,
    ) -> None:
        """Initialize the plugin manager.

        Args:
            client: HTTP client used for queries; when omitted one is built
                from ``config.http`` and closed by :meth:`aclose`
            config: Global configuration
        """
        self._config = config or TunefetchConfig()
        self._owns_client = client is None
        self._client = client or _build_client(self._config.http)
        self._plugins: Dict[str, MediaPlugin] = {}
        self._default: Optional[str] = None

    @property
    def plugin_names(self) -> List[str]:
        """Get names of all registered plugins."""
        return list(self._plugins.keys())

    @property
    def default_name(self) -> Optional[str]:
        """Get the name of the default plugin, if any."""
        return self._default

    def __len__(self) -> int:
        return len(self._plugins)

    def __contains__(self, name: object) -> bool:
        return name in self._plugins

    def register(self, name: str, plugin: MediaPlugin) -> None:
        """Register a plugin instance under ``name``.

        Raises:
            DuplicatedPluginError: If ``name`` is already registered
        """
        if name in self._plugins:
            raise DuplicatedPluginError(name)

        self._plugins[name] = plugin
        logger.debug(f"Registered plugin: {name}")

    def unregister(self, name: str) -> None:
        """Remove the plugin registered under ``name``.

        If it was the default plugin, no plugin is default afterwards.

        Raises:
            UnregisteredPluginError: If ``name`` is not registered
        """
        if name not in self._plugins:
            raise UnregisteredPluginError(name)

        del self._plugins[name]
        if self._default == name:
            self._default = None
            logger.warning(f"Default plugin {name} was unregistered; no default plugin is set")
        logger.debug(f"Unregistered plugin: {name}")

    def get_plugin(self, name: str) -> Optional[MediaPlugin]:
        """Get a plugin by name, or None."""
        return self._plugins.get(name)

    def set_default(self, name: str) -> None:
        """Set the default plugin. It must have been registered.

        Raises:
            UnregisteredPluginError: If ``name`` is not registered
        """
        if name not in self._plugins:
            raise UnregisteredPluginError(name)

        self._default = name
        logger.info(f"Default plugin set to {name}")

    def apply_default(self) -> bool:
        """Set the default plugin from configuration, if one is configured.

        Returns:
            True if a configured default was applied

        Raises:
            UnregisteredPluginError: If the configured plugin is not registered
        """
        name = self._config.default_plugin
        if not name:
            return False

        self.set_default(name)
        return True

    def current_default(self) -> MediaPlugin:
        """Get the default plugin.

        Raises:
            NoDefaultPluginError: If no plugin is set as default
            UnregisteredPluginError: If the default name is no longer registered
        """
        if self._default is None:
            raise NoDefaultPluginError()

        plugin = self._plugins.get(self._default)
        if plugin is None:
            raise UnregisteredPluginError(self._default)
        return plugin

    async def query(self, info: QueryInfo) -> QueryResult:
        """Execute a query using the default plugin.

        Query and parse errors raised by the plugin propagate unchanged.

        Raises:
            NoDefaultPluginError: If no plugin is set as default
            QueryError: If the plugin cannot express ``info``
            ParseError: If the plugin cannot parse the response
            RequestFailedError: If the HTTP request cannot be executed
        """
        plugin = self.current_default()

        try:
            template = self._client.build_request(plugin.method(), plugin.base_url())
        except httpx.InvalidURL as e:
            raise RequestFailedError(f"Invalid base URL {plugin.base_url()!r}: {e}") from e

        request = plugin.build_query(info, template)
        logger.debug(f"Querying {self._default}: {request.method} {request.url}")

        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error(f"Query request to {request.url} failed: {e}")
            raise RequestFailedError(str(e)) from e

        try:
            result = await plugin.parse(info, response)
        except httpx.HTTPError as e:
            logger.error(f"Reading query response from {request.url} failed: {e}")
            raise RequestFailedError(str(e)) from e
        finally:
            await response.aclose()

        logger.info(f"Query {info.raw!r} returned {len(result)} results from {self._default}")
        return result

    async def download(
        self,
        url: str,
        file_name: str,
        progress_follower: ProgressFollower,
    ) -> str:
        """Download the media at ``url`` as ``file_name`` using the default plugin.

        ``progress_follower`` is started before the transfer and receives
        progress values through a channel; it is joined before returning.

        Returns:
            Name of the downloaded artifact

        Raises:
            NoDefaultPluginError: If no plugin is set as default
            DownloadError: If the transfer fails or the follower cannot be joined
        """
        plugin = self.current_default()
        downloader = plugin.provide_downloader()

        sender, receiver = create_progress_channel()
        follower = start_follower(progress_follower, receiver)

        transfer_error: Optional[Exception] = None
        try:
            artifact = await downloader.download(url, file_name, sender)
        except Exception as e:
            transfer_error = e
            raise
        finally:
            # The sender is closed by now, so the follower runs to completion
            sender.close()
            await asyncio.wait([follower])
            if transfer_error is not None:
                _note_follower_failure(follower, transfer_error)

        await join_follower(follower)
        return artifact

    def stream(self, url: str, file_name: str) -> subprocess.Popen:
        """Stream the media at ``url`` using the default plugin.

        Returns:
            Handle of the spawned streaming process

        Raises:
            NoDefaultPluginError: If no plugin is set as default
            StreamError: If the streaming process cannot be spawned
        """
        plugin = self.current_default()
        streamer = plugin.provide_streamer()
        return streamer.stream(url, file_name)

    async def initialize_all(self) -> Dict[str, bool]:
        """Initialize all registered plugins.

        Returns:
            Dictionary mapping plugin names to initialization success
        """
        results: Dict[str, bool] = {}

        for name, plugin in self._plugins.items():
            try:
                await plugin.initialize()
                results[name] = True
            except Exception as e:
                logger.error(f"Failed to initialize plugin {name}: {e}")
                results[name] = False

        return results

    async def aclose(self) -> None:
        """Shutdown all plugins and close the HTTP client if owned."""
        for name, plugin in self._plugins.items():
            try:
                await plugin.shutdown()
            except Exception as e:
                logger.error(f"Error shutting down plugin {name}: {e}")

        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "PluginManager":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()


def _note_follower_failure(follower: asyncio.Task, transfer_error: Exception) -> None:
    """Attach a follower failure to the transfer error being raised."""
    if follower.cancelled():
        return

    error = follower.exception()
    if error is not None:
        logger.error(f"Progress follower failed during a failed transfer: {error}")
        transfer_error.add_note(f"Progress follower also failed: {error!r}")


def _build_client(config: HttpConfig) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=config.timeout,
        follow_redirects=config.follow_redirects,
        headers={"User-Agent": config.user_agent},
    )

