"""Archive download with mirror fallback.

``ArchiveFetcher`` walks an ordered list of candidate URLs and streams the
first successful response to disk.  Each candidate is attempted once, with
its own deadline covering the whole download and a short pause after every
failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import httpx

from robot_cli.errors import (
    AcquisitionError,
    DownloadTimeout,
    NetworkFailure,
    TemplateNotFound,
    WorkspaceError,
)

from .cache import remove_path
from .urls import Candidate

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

ProgressCallback = Callable[[str], None]


@dataclass(frozen=True)
class FetchResult:
    """Where the archive came from and where it was written."""

    url: str
    path: Path
    size: int
    is_mirror: bool
    attempts: int


class ArchiveFetcher:
    """Downloads a zip archive from the first candidate URL that answers.

    Args:
        user_agent: Value of the ``User-Agent`` header sent with every request.
        retry_backoff: Seconds to wait after a failed attempt before the next.
        transport: Optional httpx transport, used by tests to fake the network.
    """

    def __init__(
        self,
        user_agent: str,
        retry_backoff: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.user_agent = user_agent
        self.retry_backoff = retry_backoff
        self.transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` for one attempt."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
            transport=self.transport,
        )

    async def _download(self, candidate: Candidate, destination: Path) -> int:
        written = 0
        async with self._client(candidate.timeout) as client:
            async with client.stream("GET", candidate.url) as response:
                response.raise_for_status()
                with destination.open("wb") as handle:
                    async for chunk in response.aiter_bytes(chunk_size=CHUNK_SIZE):
                        handle.write(chunk)
                        written += len(chunk)
        return written

    @staticmethod
    def _classify(candidate: Candidate, exc: Exception) -> AcquisitionError:
        """Map a failed attempt to the acquisition error it represents."""
        if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError)):
            return DownloadTimeout(
                f"Download timed out after {candidate.timeout:g}s: {candidate.url}",
                url=candidate.url,
            )
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            if status == 404:
                return TemplateNotFound(f"Archive not found (HTTP 404): {candidate.url}", url=candidate.url)
            return NetworkFailure(f"HTTP {status} from {candidate.url}", url=candidate.url)
        return NetworkFailure(f"Cannot reach {candidate.url}: {exc}", url=candidate.url)

    async def fetch(
        self,
        candidates: list[Candidate],
        destination: Path,
        on_progress: ProgressCallback | None = None,
    ) -> FetchResult:
        """Stream the first successful candidate to ``destination``.

        A 404 from a candidate that is not the last one falls through to the
        next, since a mirror may lack a repository the others have.  When
        every candidate fails, the last candidate's failure is raised.

        Raises:
            TemplateNotFound: The last candidate answered 404.
            DownloadTimeout: The last candidate timed out.
            NetworkFailure: The last candidate failed in any other way.
            WorkspaceError: The archive file cannot be written.
        """
        if not candidates:
            raise NetworkFailure("No download candidates to try")

        last_error: AcquisitionError | None = None
        for attempt, candidate in enumerate(candidates, start=1):
            if attempt > 1 and self.retry_backoff > 0:
                await asyncio.sleep(self.retry_backoff)

            if on_progress:
                source = "mirror" if candidate.is_mirror else "source"
                on_progress(f"Downloading template from {source} ({attempt}/{len(candidates)})...")
            logger.debug("Attempt %d: GET %s (timeout %ss)", attempt, candidate.url, candidate.timeout)

            try:
                size = await asyncio.wait_for(
                    self._download(candidate, destination), timeout=candidate.timeout
                )
            except (httpx.HTTPError, asyncio.TimeoutError) as exc:
                last_error = self._classify(candidate, exc)
                logger.debug("Attempt %d failed: %s", attempt, last_error)
                remove_path(destination)
                continue
            except OSError as exc:
                remove_path(destination)
                raise WorkspaceError(
                    f"Cannot write archive to {destination}: {exc}", url=candidate.url
                ) from exc

            logger.debug("Downloaded %d bytes from %s", size, candidate.url)
            return FetchResult(
                url=candidate.url,
                path=destination,
                size=size,
                is_mirror=candidate.is_mirror,
                attempts=attempt,
            )

        assert last_error is not None
        raise last_error
