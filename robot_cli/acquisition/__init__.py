"""Robot CLI acquisition -- turns a template descriptor into a local tree.

Key classes:
    AcquisitionPipeline - cache, download, extract, validate
    ArchiveFetcher      - mirror-aware archive download
    TemplateCache       - per-key on-disk cache of template trees

Quick usage::

    pipeline = AcquisitionPipeline(Config())
    acquired = await pipeline.acquire(descriptor, use_cache=True)
"""

from .archive import extract_archive, locate_project_root, validate_manifest
from .cache import CacheEntry, CacheInfo, TemplateCache, folder_size, remove_path
from .fetcher import ArchiveFetcher, FetchResult
from .pipeline import AcquiredTemplate, AcquisitionPipeline
from .urls import (
    Candidate,
    HostKind,
    build_archive_url,
    build_candidates,
    cache_key_for,
    classify_host,
    repo_name,
)

__all__ = [
    "AcquisitionPipeline",
    "AcquiredTemplate",
    "ArchiveFetcher",
    "FetchResult",
    "TemplateCache",
    "CacheInfo",
    "CacheEntry",
    "folder_size",
    "remove_path",
    "extract_archive",
    "locate_project_root",
    "validate_manifest",
    "Candidate",
    "HostKind",
    "build_archive_url",
    "build_candidates",
    "cache_key_for",
    "classify_host",
    "repo_name",
]
