"""Tests for the streaming handle and spawn helpers."""

import subprocess
import sys
from unittest.mock import Mock

import pytest

from tunefetch.exceptions import StreamError
from tunefetch.transfer.spawn import popen_spawner
from tunefetch.transfer.streamer import Streamer


class TestStreamer:
    """Test Streamer class."""

    def test_returns_spawned_handle(self):
        """Test that the process handle is returned as is."""
        handle = Mock(pid=99)
        spawn = Mock(return_value=handle)

        assert Streamer(spawn).stream("https://cdn.example.com/a", "song") is handle
        spawn.assert_called_once_with("https://cdn.example.com/a", "song")

    def test_spawn_failure(self):
        """Test that spawn failures become StreamError."""
        spawn = Mock(side_effect=FileNotFoundError("mpv"))

        with pytest.raises(StreamError) as exc_info:
            Streamer(spawn).stream("u", "f")
        assert "mpv" in exc_info.value.cause


class TestPopenSpawner:
    """Test popen_spawner factory."""

    def test_spawns_real_process(self):
        """Test that the built argv is executed."""
        script = "import sys\nsys.exit(0 if sys.argv[1:] == ['u', 'f'] else 3)\n"
        spawn = popen_spawner(lambda url, name: [sys.executable, "-c", script, url, name])

        handle = Streamer(spawn).stream("u", "f")

        assert isinstance(handle, subprocess.Popen)
        assert handle.wait(timeout=10) == 0

    def test_passes_popen_kwargs(self):
        """Test that extra keyword arguments reach Popen."""
        spawn = popen_spawner(
            lambda url, name: [sys.executable, "-c", "print('streaming')"],
            stdout=subprocess.PIPE,
        )

        handle = spawn("u", "f")
        out, _ = handle.communicate(timeout=10)
        assert out.strip() == b"streaming"

    def test_missing_binary(self):
        """Test that a missing player surfaces as StreamError."""
        spawn = popen_spawner(lambda url, name: ["/nonexistent/tunefetch-player", url])

        with pytest.raises(StreamError):
            Streamer(spawn).stream("u", "f")
