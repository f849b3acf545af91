"""Base class for media plugins.

Plugins are the backends of tunefetch. Each plugin knows how to query one
catalog service and how to fetch or stream the media it lists.
"""

from abc import ABC, abstractmethod

import httpx

from tunefetch.query import QueryInfo, QueryResult
from tunefetch.transfer.downloader import Downloader
from tunefetch.transfer.streamer import Streamer


class MediaPlugin(ABC):
    """Abstract base class for media plugins.

    Plugins must implement:
    - method(): HTTP method used for search requests
    - base_url(): Endpoint of the catalog service
    - build_query(): Turn a QueryInfo into a concrete request
    - parse(): Turn the service response into a QueryResult
    - provide_downloader(): Downloader fetching the service's media
    - provide_streamer(): Streamer playing the service's media

    Plugins may implement:
    - initialize(): Setup plugin (called by PluginManager.initialize_all)
    - shutdown(): Cleanup plugin (called on manager teardown)

    Example:
        class ItunesPlugin(MediaPlugin):
            def method(self) -> str:
                return "GET"

            def base_url(self) -> str:
                return "https://itunes.apple.com/search"

            def build_query(self, info, request):
                if info.is_empty():
                    raise QueryError("Empty query")
                url = request.url.copy_merge_params({"term": info.raw})
                return httpx.Request(request.method, url, headers=request.headers)

            async def parse(self, info, response):
                payload = await read_json(response)
                ...
    """

    @abstractmethod
    def method(self) -> str:
        """Get the HTTP method used to build search requests."""
        pass

    @abstractmethod
    def base_url(self) -> str:
        """Get the URL search requests are sent to."""
        pass

    @abstractmethod
    def build_query(self, info: QueryInfo, request: httpx.Request) -> httpx.Request:
        """Create a request for the plugin service.

        Args:
            info: The query to express
            request: Request template carrying the method, base URL and
                client defaults

        Returns:
            The request to execute

        Raises:
            QueryError: If ``info`` cannot be expressed as a request
        """
        pass

    @abstractmethod
    async def parse(self, info: QueryInfo, response: httpx.Response) -> QueryResult:
        """Extract results from the response to a ``build_query`` request.

        The response body may not have been read yet; implementations
        await it (``await response.aread()``).

        Raises:
            ParseError: If the body is malformed or incomplete
        """
        pass

    @abstractmethod
    def provide_downloader(self) -> Downloader:
        """Get a Downloader for media of the plugin service."""
        pass

    @abstractmethod
    def provide_streamer(self) -> Streamer:
        """Get a Streamer for media of the plugin service."""
        pass

    async def initialize(self) -> None:
        """Initialize the plugin.

        Override to check that the transfer tools are installed, load
        credentials, etc.
        """

    async def shutdown(self) -> None:
        """Shutdown the plugin.

        Called when the owning manager is closed.
        """
