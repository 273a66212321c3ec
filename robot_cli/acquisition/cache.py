"""On-disk template cache.

One directory per cache key under ``Config.cache_dir`` holding a complete,
validated template tree.  There is no locking: two concurrent invocations
for the same key may race.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from robot_cli.errors import IntegrityFailure

from .archive import validate_manifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    name: str
    size: int
    modified: datetime


@dataclass
class CacheInfo:
    """Summary of the cache directory, for the ``cache`` command."""

    path: Path
    exists: bool
    entries: list[CacheEntry] = field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(entry.size for entry in self.entries)


def folder_size(path: Path) -> int:
    """Total size in bytes of the regular files under ``path``."""
    total = 0
    for item in Path(path).rglob("*"):
        try:
            if item.is_file() and not item.is_symlink():
                total += item.stat().st_size
        except OSError:
            continue
    return total


def remove_path(path: Path) -> None:
    """Delete a file or directory tree if it exists."""
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path, ignore_errors=True)
    elif path.exists() or path.is_symlink():
        path.unlink(missing_ok=True)


class TemplateCache:
    """Cache of acquired template trees, keyed by template key.

    Args:
        root: Cache directory.
        manifest_file: Manifest that a cached tree must contain to be reused.
    """

    def __init__(self, root: Path, manifest_file: str = "package.json") -> None:
        self.root = Path(root)
        self.manifest_file = manifest_file

    def path_for(self, key: str) -> Path:
        return self.root / key

    async def lookup(self, key: str) -> Path | None:
        """Return the cached tree for ``key`` if it is still valid.

        A cached tree whose manifest is missing or broken is deleted.
        """
        path = self.path_for(key)
        if not await asyncio.to_thread(path.is_dir):
            return None
        try:
            await asyncio.to_thread(validate_manifest, path, self.manifest_file)
        except IntegrityFailure as exc:
            logger.debug("Discarding stale cache entry %s: %s", key, exc)
            await self.invalidate(key)
            return None
        return path

    async def store(self, key: str, tree: Path) -> Path:
        """Move ``tree`` into the cache, replacing any previous entry for ``key``."""
        target = self.path_for(key)
        await asyncio.to_thread(self.root.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(remove_path, target)
        await asyncio.to_thread(shutil.move, str(tree), str(target))
        logger.debug("Cached %s at %s", key, target)
        return target

    async def invalidate(self, key: str) -> None:
        await asyncio.to_thread(remove_path, self.path_for(key))

    async def clear(self) -> list[str]:
        """Remove every cached template and return their names."""
        if not await asyncio.to_thread(self.root.is_dir):
            return []
        names = sorted(p.name for p in await asyncio.to_thread(lambda: list(self.root.iterdir())))
        await asyncio.to_thread(remove_path, self.root)
        await asyncio.to_thread(self.root.mkdir, parents=True, exist_ok=True)
        return names

    async def info(self) -> CacheInfo:
        """Describe every cached template with its size and modification time."""
        return await asyncio.to_thread(self._info)

    def _info(self) -> CacheInfo:
        if not self.root.is_dir():
            return CacheInfo(path=self.root, exists=False)
        entries = [
            CacheEntry(
                name=item.name,
                size=folder_size(item) if item.is_dir() else item.stat().st_size,
                modified=datetime.fromtimestamp(item.stat().st_mtime),
            )
            for item in sorted(self.root.iterdir())
        ]
        return CacheInfo(path=self.root, exists=True, entries=entries)
