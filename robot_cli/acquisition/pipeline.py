"""Template acquisition pipeline.

Turns a ``TemplateDescriptor`` into a validated local source tree:

1. reuse a valid cached copy (when caching is on)
2. build the archive URL and its mirror candidates
3. download the first candidate that answers
4. extract into a unique temp directory
5. locate the project root inside the archive
6. validate the project manifest
7. move the root into the cache, or hand it out as an ephemeral tree

Every temp artifact is removed on failure; the downloaded archive is removed
on success too.  Failures caused by the archive content also drop the cache
entry for the template so a retry starts clean.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path

import httpx

from robot_cli.catalog import TemplateDescriptor
from robot_cli.config import Config
from robot_cli.errors import AcquisitionError, ArchiveContentError, InvalidDescriptor, WorkspaceError

from .archive import extract_archive, locate_project_root, validate_manifest
from .cache import TemplateCache, remove_path
from .fetcher import ArchiveFetcher, ProgressCallback
from .urls import build_candidates, cache_key_for, repo_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcquiredTemplate:
    """A validated template tree ready to be copied.

    Attributes:
        path: Project root of the template.
        source_url: Archive URL the tree was downloaded from, or the cache
            path when it was served from the cache.
        from_cache: Served from the cache without any download.
        ephemeral: The caller must pass it to ``AcquisitionPipeline.release``
            after use.
        is_mirror: The archive came from a proxy mirror.
        cleanup_path: Directory to delete when releasing an ephemeral tree.
    """

    path: Path
    source_url: str
    from_cache: bool = False
    ephemeral: bool = False
    is_mirror: bool = False
    cleanup_path: Path | None = None


class AcquisitionPipeline:
    """Resolves template descriptors to local directories.

    Args:
        config: Timeouts, mirrors and directory roots.
        transport: Optional httpx transport handed to the fetcher (tests).
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or Config()
        self.cache = TemplateCache(self.config.cache_dir, self.config.manifest_file)
        self.fetcher = ArchiveFetcher(
            user_agent=self.config.user_agent,
            retry_backoff=self.config.retry_backoff,
            transport=transport,
        )

    async def acquire(
        self,
        descriptor: TemplateDescriptor | None,
        *,
        use_cache: bool = True,
        on_progress: ProgressCallback | None = None,
    ) -> AcquiredTemplate:
        """Return a validated local tree for ``descriptor``.

        Raises:
            InvalidDescriptor, TemplateNotFound, NetworkFailure,
            DownloadTimeout, ExtractionFailure, StructureNotFound,
            IntegrityFailure, WorkspaceError: see ``robot_cli.errors``.
        """
        if descriptor is None:
            raise InvalidDescriptor("No template given")
        key = cache_key_for(descriptor)
        if not descriptor.source_location:
            raise InvalidDescriptor(f"Template {key!r} has no source location", template_key=key)

        def report(message: str) -> None:
            if on_progress:
                on_progress(message)

        if use_cache:
            cached = await self.cache.lookup(key)
            if cached is not None:
                report("Using cached template...")
                logger.debug("Cache hit for %s at %s", key, cached)
                return AcquiredTemplate(path=cached, source_url=str(cached), from_cache=True)

        candidates = build_candidates(
            descriptor.source_location,
            self.config.mirrors,
            source_timeout=self.config.source_timeout,
            mirror_timeout=self.config.mirror_timeout,
        )

        temp_root = self.config.temp_dir
        try:
            await asyncio.to_thread(temp_root.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise WorkspaceError(
                f"Cannot create temp directory {temp_root}: {exc}", template_key=key
            ) from exc
        stamp = int(time.time() * 1000)
        zip_path = temp_root / f"{key}-{stamp}.zip"
        extract_dir = temp_root / f"{key}-extract-{stamp}"

        succeeded = False
        try:
            fetched = await self.fetcher.fetch(candidates, zip_path, on_progress=on_progress)

            report("Extracting template files...")
            await asyncio.to_thread(extract_archive, zip_path, extract_dir)

            root = await asyncio.to_thread(
                locate_project_root, extract_dir, repo_name(descriptor.source_location)
            )
            await asyncio.to_thread(validate_manifest, root, self.config.manifest_file)

            if use_cache:
                report("Saving template to cache...")
                try:
                    cached = await self.cache.store(key, root)
                except OSError as exc:
                    raise WorkspaceError(
                        f"Could not store template in cache: {exc}", template_key=key
                    ) from exc
                await asyncio.to_thread(remove_path, extract_dir)
                result = AcquiredTemplate(
                    path=cached, source_url=fetched.url, is_mirror=fetched.is_mirror
                )
            else:
                result = AcquiredTemplate(
                    path=root,
                    source_url=fetched.url,
                    ephemeral=True,
                    is_mirror=fetched.is_mirror,
                    cleanup_path=extract_dir,
                )
            succeeded = True
            return result
        except ArchiveContentError as exc:
            exc.template_key = key
            await self.cache.invalidate(key)
            raise
        except AcquisitionError as exc:
            exc.template_key = key
            raise
        finally:
            await asyncio.to_thread(remove_path, zip_path)
            if not succeeded:
                await asyncio.to_thread(remove_path, extract_dir)

    async def release(self, acquired: AcquiredTemplate) -> None:
        """Delete an ephemeral tree once it has been copied."""
        if acquired.ephemeral and acquired.cleanup_path is not None:
            await asyncio.to_thread(remove_path, acquired.cleanup_path)

    async def clear_cache(self) -> list[str]:
        return await self.cache.clear()
