"""Tests for the progress text scanner."""

import asyncio

import pytest

from tunefetch.transfer.scanner import (
    is_complete,
    iter_chunks,
    parse_progress,
    scan_progress,
)


def make_reader(data: bytes, limit: int = 2 ** 16) -> asyncio.StreamReader:
    """Create a StreamReader pre-filled with data and closed."""
    reader = asyncio.StreamReader(limit=limit)
    reader.feed_data(data)
    reader.feed_eof()
    return reader


class TestParseProgress:
    """Test parse_progress function."""

    @pytest.mark.parametrize(
        "chunk,expected",
        [
            (b"[download]  45.2%", 45.2),
            (b"[download] 100%", 100.0),
            (b"[download] 100.0%", 100.0),
            (b" 7%", 7.0),
            (b"12.%", 12.0),
            (b"\r[download]   0.0%", 0.0),
        ],
    )
    def test_matching_chunks(self, chunk, expected):
        """Test chunks ending with a percentage."""
        assert parse_progress(chunk) == expected

    @pytest.mark.parametrize(
        "chunk",
        [
            b"[youtube] Extracting URL",
            b"%",
            b"[download] Destination: song.webm",
            b"45.2% of 3MiB",
            b"45.25%",
            b"1234.5%",
        ],
    )
    def test_non_matching_chunks(self, chunk):
        """Test chunks without a trailing percentage."""
        assert parse_progress(chunk) is None

    def test_is_complete(self):
        """Test the completion threshold."""
        assert is_complete(100.0)
        assert not is_complete(99.9)


class TestIterChunks:
    """Test iter_chunks async generator."""

    async def test_split_after_delimiter(self):
        """Test that chunks keep their delimiter."""
        reader = make_reader(b"a 1%b 2%tail")
        chunks = [chunk async for chunk in iter_chunks(reader)]
        assert chunks == [b"a 1%", b"b 2%", b"tail"]

    async def test_oversized_text_dropped(self):
        """Test that text beyond the reader limit is skipped."""
        reader = make_reader(b"x" * 100 + b"%" + b" 42.0%", limit=16)
        chunks = [chunk async for chunk in iter_chunks(reader)]
        assert chunks[-1] == b" 42.0%"


class TestScanProgress:
    """Test scan_progress async generator."""

    async def test_yields_values_in_order(self):
        """Test that progress values are produced in output order."""
        output = (
            b"[youtube] abc: Downloading webpage\n"
            b"[download]  10.0% of 3.00MiB at 1.00MiB/s ETA 00:02\n"
            b"[download]  55.5% of 3.00MiB at 1.00MiB/s ETA 00:01\n"
            b"[download] 100.0% of 3.00MiB in 00:03\n"
        )
        values = [value async for value in scan_progress(make_reader(output))]
        assert values == [10.0, 55.5, 100.0]

    async def test_stops_at_completion(self):
        """Test that nothing after 100% is read."""
        reader = make_reader(b" 10.0% 100.0% 50.0%")
        values = [value async for value in scan_progress(reader)]
        assert values == [10.0, 100.0]

    async def test_does_not_wait_after_completion(self):
        """Test that scanning ends without waiting for end of stream."""
        reader = asyncio.StreamReader()
        reader.feed_data(b" 10.0% 100.0%")
        # No EOF is fed: scanning must still finish
        values = await asyncio.wait_for(
            _collect(scan_progress(reader)), timeout=1.0
        )
        assert values == [10.0, 100.0]

    async def test_stops_at_end_of_stream(self):
        """Test that an incomplete transfer ends with the stream."""
        values = [value async for value in scan_progress(make_reader(b" 10.0% 20.0%done"))]
        assert values == [10.0, 20.0]

    async def test_empty_stream(self):
        """Test that empty output yields nothing."""
        assert [value async for value in scan_progress(make_reader(b""))] == []


async def _collect(aiter):
    return [value async for value in aiter]
