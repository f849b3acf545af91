"""Tests for tunefetch exceptions."""

import pytest

from tunefetch.exceptions import (
    ConfigurationError,
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


class TestTunefetchError:
    """Test base TunefetchError class."""

    def test_basic_error(self):
        """Test creating a basic error."""
        error = TunefetchError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.cause is None
        assert str(error) == "Something went wrong"

    def test_error_with_cause(self):
        """Test that the cause is rendered."""
        error = TunefetchError("Something went wrong", cause="disk full")
        assert error.cause == "disk full"
        assert str(error) == "Something went wrong (cause: disk full)"

    def test_error_inheritance(self):
        """Test that all errors inherit from TunefetchError."""
        for cls in (
            QueryError,
            ParseError,
            PluginError,
            RequestFailedError,
            InvalidURLError,
            ConfigurationError,
        ):
            assert issubclass(cls, TunefetchError)


class TestParseErrors:
    """Test the parse error family."""

    def test_parse_error_kinds(self):
        """Test that every parse error kind is a ParseError."""
        assert issubclass(ParsableTextNotFoundError, ParseError)
        assert issubclass(InvalidResponseTextError, ParseError)
        assert issubclass(JsonUnparsableError, ParseError)

    def test_default_messages(self):
        """Test the default messages of parse errors."""
        assert "doesn't contain text" in str(ParsableTextNotFoundError())
        assert "malformed" in str(InvalidResponseTextError())

    def test_json_unparsable_carries_cause(self):
        """Test that JSON errors carry their cause."""
        error = JsonUnparsableError("Expecting value: line 1 column 1")
        assert error.cause == "Expecting value: line 1 column 1"
        assert "Expecting value" in str(error)


class TestPluginErrors:
    """Test the plugin error family."""

    def test_plugin_error_kinds(self):
        """Test that every registry error kind is a PluginError."""
        for cls in (
            DuplicatedPluginError,
            UnregisteredPluginError,
            NoDefaultPluginError,
            DownloadError,
            StreamError,
        ):
            assert issubclass(cls, PluginError)

    def test_duplicated_plugin(self):
        """Test DuplicatedPluginError keeps the name."""
        error = DuplicatedPluginError("itunes")
        assert error.name == "itunes"
        assert str(error) == "Duplicated plugin: `itunes`"

    def test_unregistered_plugin(self):
        """Test UnregisteredPluginError keeps the name."""
        error = UnregisteredPluginError("deezer")
        assert error.name == "deezer"
        assert str(error) == "Unregistered plugin: `deezer`"

    def test_no_default_plugin(self):
        """Test NoDefaultPluginError message."""
        assert str(NoDefaultPluginError()) == "No plugin has been set as default yet"

    def test_download_and_stream_errors_carry_cause(self):
        """Test that pipeline errors describe their cause."""
        download = DownloadError("exit status 1")
        stream = StreamError("mpv not found")
        assert download.cause == "exit status 1"
        assert "downloading" in str(download)
        assert stream.cause == "mpv not found"
        assert "streaming" in str(stream)


class TestInvalidURLError:
    """Test InvalidURLError class."""

    def test_is_value_error(self):
        """Test that InvalidURLError can be caught as ValueError."""
        with pytest.raises(ValueError):
            raise InvalidURLError("track_url", "/relative")

    def test_keeps_field_and_value(self):
        """Test the field and value attributes."""
        error = InvalidURLError("track_url", "/relative")
        assert error.field == "track_url"
        assert error.value == "/relative"
        assert "track_url" in str(error)
