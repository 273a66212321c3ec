"""Unit tests for ArchiveFetcher (robot_cli.acquisition.fetcher).

Tests cover:
- Successful download from the canonical source
- Mirror fallback after a 404 or a connection error
- Error classification of the last candidate (404, timeout, HTTP 500, connect)
- Request headers, retry pause and progress messages
- Whole-attempt deadline for slow bodies, unwritable destinations
"""

from __future__ import annotations

import asyncio
import time
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from robot_cli.acquisition import ArchiveFetcher, Candidate
from robot_cli.errors import DownloadTimeout, NetworkFailure, TemplateNotFound, WorkspaceError

SOURCE = "https://github.com/o/r/archive/refs/heads/main.zip"
MIRROR = f"https://ghproxy.net/{SOURCE}"


def _candidates() -> list[Candidate]:
    return [
        Candidate(url=SOURCE, timeout=30),
        Candidate(url=MIRROR, timeout=15, is_mirror=True),
    ]


def _fetcher(hub) -> ArchiveFetcher:
    return ArchiveFetcher(user_agent="Robot-CLI/1.0.0", retry_backoff=0, transport=hub.transport())


class TestFetchSuccess:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_canonical_source(self, hub, tmp_path):
        hub.routes[SOURCE] = b"zip-bytes"
        result = await _fetcher(hub).fetch(_candidates(), tmp_path / "a.zip")
        assert result.url == SOURCE
        assert result.is_mirror is False
        assert result.attempts == 1
        assert result.size == len(b"zip-bytes")
        assert (tmp_path / "a.zip").read_bytes() == b"zip-bytes"
        assert hub.urls == [SOURCE]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_user_agent_header(self, hub, tmp_path):
        hub.routes[SOURCE] = b"x"
        await _fetcher(hub).fetch(_candidates(), tmp_path / "a.zip")
        assert hub.requests[0].headers["User-Agent"] == "Robot-CLI/1.0.0"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_progress_messages(self, hub, tmp_path):
        hub.routes[MIRROR] = b"x"
        messages: list[str] = []
        await _fetcher(hub).fetch(_candidates(), tmp_path / "a.zip", on_progress=messages.append)
        assert messages == [
            "Downloading template from source (1/2)...",
            "Downloading template from mirror (2/2)...",
        ]


class TestMirrorFallback:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_404_falls_through_to_mirror(self, hub, tmp_path):
        hub.routes[SOURCE] = 404
        hub.routes[MIRROR] = b"mirror-bytes"
        result = await _fetcher(hub).fetch(_candidates(), tmp_path / "a.zip")
        assert result.url == MIRROR
        assert result.is_mirror is True
        assert result.attempts == 2
        assert hub.urls == [SOURCE, MIRROR]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connect_error_falls_through(self, hub, tmp_path):
        hub.routes[SOURCE] = httpx.ConnectError("refused")
        hub.routes[MIRROR] = b"ok"
        result = await _fetcher(hub).fetch(_candidates(), tmp_path / "a.zip")
        assert result.is_mirror is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_pause_between_attempts(self, hub, tmp_path):
        hub.routes[MIRROR] = b"ok"
        fetcher = ArchiveFetcher("ua", retry_backoff=1.0, transport=hub.transport())
        with patch("robot_cli.acquisition.fetcher.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await fetcher.fetch(_candidates(), tmp_path / "a.zip")
        sleep.assert_awaited_once_with(1.0)


class TestFetchFailure:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_last_404_is_not_found(self, hub, tmp_path):
        with pytest.raises(TemplateNotFound) as info:
            await _fetcher(hub).fetch(_candidates(), tmp_path / "a.zip")
        assert info.value.url == MIRROR
        assert not (tmp_path / "a.zip").exists()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_last_timeout(self, hub, tmp_path):
        hub.routes[SOURCE] = 404
        hub.routes[MIRROR] = httpx.ReadTimeout("slow")
        with pytest.raises(DownloadTimeout):
            await _fetcher(hub).fetch(_candidates(), tmp_path / "a.zip")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_last_server_error(self, hub, tmp_path):
        hub.routes[SOURCE] = 404
        hub.routes[MIRROR] = 502
        with pytest.raises(NetworkFailure, match="502"):
            await _fetcher(hub).fetch(_candidates(), tmp_path / "a.zip")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_earlier_error_does_not_win(self, hub, tmp_path):
        hub.routes[SOURCE] = httpx.ReadTimeout("slow")
        hub.routes[MIRROR] = 404
        with pytest.raises(TemplateNotFound):
            await _fetcher(hub).fetch(_candidates(), tmp_path / "a.zip")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_candidates(self, hub, tmp_path):
        with pytest.raises(NetworkFailure):
            await _fetcher(hub).fetch([], tmp_path / "a.zip")


# ---------------------------------------------------------------------------
# Attempt deadline and local write failures
# ---------------------------------------------------------------------------


def _trickle(chunks: int, delay: float) -> httpx.Response:
    """A 200 response whose body arrives one byte every ``delay`` seconds."""

    async def body():
        for _ in range(chunks):
            await asyncio.sleep(delay)
            yield b"x"

    return httpx.Response(200, content=body())


class TestAttemptDeadline:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_slow_body_times_out(self, hub, tmp_path):
        hub.routes[SOURCE] = _trickle(chunks=20, delay=0.1)
        started = time.monotonic()
        with pytest.raises(DownloadTimeout) as info:
            await _fetcher(hub).fetch([Candidate(url=SOURCE, timeout=0.3)], tmp_path / "a.zip")
        assert time.monotonic() - started < 1.5
        assert info.value.url == SOURCE
        assert not (tmp_path / "a.zip").exists()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_slow_source_falls_through_to_mirror(self, hub, tmp_path):
        hub.routes[SOURCE] = _trickle(chunks=20, delay=0.1)
        hub.routes[MIRROR] = b"mirror-bytes"
        candidates = [
            Candidate(url=SOURCE, timeout=0.3),
            Candidate(url=MIRROR, timeout=5, is_mirror=True),
        ]
        result = await _fetcher(hub).fetch(candidates, tmp_path / "a.zip")
        assert result.url == MIRROR
        assert (tmp_path / "a.zip").read_bytes() == b"mirror-bytes"


class TestWriteFailure:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unwritable_destination(self, hub, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        hub.routes[SOURCE] = b"zip-bytes"
        with pytest.raises(WorkspaceError) as info:
            await _fetcher(hub).fetch(_candidates(), blocker / "a.zip")
        assert info.value.suggestions
        assert hub.urls == [SOURCE]
