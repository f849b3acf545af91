"""Tests for response parsing helpers."""

import httpx
import pytest

from tunefetch.exceptions import (
    InvalidResponseTextError,
    JsonUnparsableError,
    ParsableTextNotFoundError,
)
from tunefetch.parsing import decode_json, extract_embedded_text, read_json, require


class TestExtractEmbeddedText:
    """Test extract_embedded_text function."""

    def test_between_markers(self):
        """Test extracting text between two markers."""
        html = '<script>var data = {"a": 1};</script>'
        assert extract_embedded_text(html, "var data = ", ";</script>") == '{"a": 1}'

    def test_without_end_marker(self):
        """Test that the rest of the text is returned without an end marker."""
        assert extract_embedded_text("prefix:payload", "prefix:") == "payload"

    def test_missing_start_marker(self):
        """Test that a missing start marker means no parsable text."""
        with pytest.raises(ParsableTextNotFoundError):
            extract_embedded_text("<html></html>", "var data = ", ";")

    def test_missing_end_marker(self):
        """Test that an unterminated payload is malformed."""
        with pytest.raises(InvalidResponseTextError):
            extract_embedded_text('var data = {"a": 1}', "var data = ", ";</script>")


class TestDecodeJson:
    """Test decode_json function."""

    def test_valid_json(self):
        """Test decoding valid JSON."""
        assert decode_json('{"results": [1, 2]}') == {"results": [1, 2]}

    def test_invalid_json(self):
        """Test that invalid JSON raises with a cause."""
        with pytest.raises(JsonUnparsableError) as exc_info:
            decode_json("{not json")
        assert exc_info.value.cause

    @pytest.mark.parametrize("text", ["", "   \n"])
    def test_blank_text(self, text):
        """Test that blank text has nothing to parse."""
        with pytest.raises(ParsableTextNotFoundError):
            decode_json(text)


class TestReadJson:
    """Test read_json coroutine."""

    async def test_reads_whole_body(self):
        """Test decoding a JSON response body."""
        response = httpx.Response(200, json={"resultCount": 0, "results": []})
        assert await read_json(response) == {"resultCount": 0, "results": []}

    async def test_reads_embedded_json(self):
        """Test decoding JSON embedded in an HTML page."""
        response = httpx.Response(
            200, text='<html><script>window.__DATA__ = {"id": 7};</script></html>'
        )
        data = await read_json(response, "window.__DATA__ = ", ";</script>")
        assert data == {"id": 7}

    async def test_malformed_body(self):
        """Test that a malformed body raises JsonUnparsableError."""
        response = httpx.Response(200, text="<html>oops</html>")
        with pytest.raises(JsonUnparsableError):
            await read_json(response)


class TestRequire:
    """Test require function."""

    def test_nested_path(self):
        """Test walking keys and indexes."""
        payload = {"results": [{"trackName": "Aerodynamic"}]}
        assert require(payload, "results", 0, "trackName") == "Aerodynamic"

    @pytest.mark.parametrize(
        "path",
        [("missing",), ("results", 3), ("results", 0, "artistName"), ("results", 0, "trackName", "x")],
    )
    def test_missing_step(self, path):
        """Test that missing fields raise InvalidResponseTextError."""
        payload = {"results": [{"trackName": "Aerodynamic"}]}
        with pytest.raises(InvalidResponseTextError) as exc_info:
            require(payload, *path)
        assert "missing the field" in str(exc_info.value)
