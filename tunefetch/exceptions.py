"""Exceptions raised by tunefetch.

Every error a caller can observe from the query, registry and transfer
layers derives from :class:`TunefetchError`.
"""

from __future__ import annotations


class TunefetchError(Exception):
    """Base exception for tunefetch errors."""

    def __init__(self, message: str, cause: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (cause: {self.cause})"
        return self.message


class QueryError(TunefetchError):
    """Raised when a QueryInfo cannot be turned into a backend request."""

    def __init__(self, message: str = "Query cannot be expressed as a request", cause: str | None = None) -> None:
        super().__init__(message, cause)


class ParseError(TunefetchError):
    """Base class for errors raised while parsing a backend response."""
    pass


class ParsableTextNotFoundError(ParseError):
    """Raised when the response does not contain any text to parse."""

    def __init__(self, message: str = "The response text doesn't contain text to be parsed") -> None:
        super().__init__(message)


class InvalidResponseTextError(ParseError):
    """Raised when the response text is malformed and cannot be parsed."""

    def __init__(self, message: str = "The response text is malformed and cannot be parsed") -> None:
        super().__init__(message)


class JsonUnparsableError(ParseError):
    """Raised when the response content fails JSON decoding."""

    def __init__(self, cause: str) -> None:
        super().__init__("Error in json parsing", cause)


class PluginError(TunefetchError):
    """Base class for errors raised by the plugin manager."""
    pass


class DuplicatedPluginError(PluginError):
    """Raised when registering a name that is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Duplicated plugin: `{name}`")
        self.name = name


class UnregisteredPluginError(PluginError):
    """Raised when referencing a plugin name that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unregistered plugin: `{name}`")
        self.name = name


class NoDefaultPluginError(PluginError):
    """Raised when an operation needs a default plugin and none is set."""

    def __init__(self) -> None:
        super().__init__("No plugin has been set as default yet")


class DownloadError(PluginError):
    """Raised when the download pipeline fails (spawn, wait or join)."""

    def __init__(self, cause: str) -> None:
        super().__init__("An error occurred while downloading", cause)


class StreamError(PluginError):
    """Raised when the streaming process cannot be started."""

    def __init__(self, cause: str) -> None:
        super().__init__("An error occurred while streaming", cause)


class RequestFailedError(TunefetchError):
    """Raised when the HTTP transport fails to execute a query request."""

    def __init__(self, cause: str) -> None:
        super().__init__("The query request could not be executed", cause)


class InvalidURLError(TunefetchError, ValueError):
    """Raised when a result field is not a well-formed absolute URL."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"Invalid absolute URL for {field}: {value!r}")
        self.field = field
        self.value = value


class ConfigurationError(TunefetchError):
    """Raised for issues related to configuration loading or validation."""
    pass
