"""Archive URL resolution.

Turns a repository address into the URL of a zip snapshot of its default
branch, following the conventions of the supported code hosts, and expands it
into the ordered list of download candidates (canonical source, then proxy
mirrors).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from robot_cli.catalog import TemplateDescriptor
from robot_cli.errors import InvalidDescriptor


class HostKind(str, Enum):
    """Code-host conventions with a known archive URL layout."""
    GITHUB = "github"
    GITEE = "gitee"
    GITLAB = "gitlab"
    UNKNOWN = "unknown"


_HOSTS: dict[str, HostKind] = {
    "github.com": HostKind.GITHUB,
    "gitee.com": HostKind.GITEE,
    "gitlab.com": HostKind.GITLAB,
}


@dataclass(frozen=True)
class Candidate:
    """One URL to try, with the timeout that applies to it."""

    url: str
    timeout: float
    is_mirror: bool = False


def _split_source(source: str) -> tuple[str, list[str]]:
    parts = urlsplit(source.strip())
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidDescriptor(f"Template source is not an http(s) URL: {source!r}", url=source)
    segments = [s for s in parts.path.split("/") if s]
    if segments and segments[-1].endswith(".git"):
        segments[-1] = segments[-1][: -len(".git")]
    if len(segments) < 2:
        raise InvalidDescriptor(
            f"Template source must name an owner and a repository: {source!r}", url=source
        )
    return parts.netloc.lower(), segments


def classify_host(source: str) -> HostKind:
    """Return the host convention for a repository URL."""
    host, _ = _split_source(source)
    if host.startswith("www."):
        host = host[len("www."):]
    return _HOSTS.get(host, HostKind.UNKNOWN)


def repo_name(source: str) -> str:
    """Last path segment of the repository URL, e.g. ``Robot_Admin``."""
    _, segments = _split_source(source)
    return segments[-1]


def normalize_source(source: str) -> str:
    """Canonical ``scheme://host/owner/repo`` form without ``.git`` or trailing slash."""
    parts = urlsplit(source.strip())
    _, segments = _split_source(source)
    return f"{parts.scheme}://{parts.netloc}/{'/'.join(segments)}"


def build_archive_url(source: str) -> str:
    """Zip archive URL of the default branch for ``source``.

    Examples::

        https://github.com/o/r -> https://github.com/o/r/archive/refs/heads/main.zip
        https://gitee.com/o/r  -> https://gitee.com/o/r/repository/archive/master.zip
        https://gitlab.com/o/r -> https://gitlab.com/o/r/-/archive/main/r-main.zip

    Unknown hosts use the GitHub layout.
    """
    base = normalize_source(source)
    kind = classify_host(source)
    if kind is HostKind.GITEE:
        return f"{base}/repository/archive/master.zip"
    if kind is HostKind.GITLAB:
        return f"{base}/-/archive/main/{repo_name(source)}-main.zip"
    return f"{base}/archive/refs/heads/main.zip"


def build_candidates(
    source: str,
    mirrors: list[str] | tuple[str, ...] = (),
    *,
    source_timeout: float = 30.0,
    mirror_timeout: float = 15.0,
) -> list[Candidate]:
    """Ordered download candidates: the canonical archive, then one per mirror.

    Mirrors are proxy prefixes and only apply to GitHub sources.
    """
    archive_url = build_archive_url(source)
    candidates = [Candidate(url=archive_url, timeout=source_timeout)]
    if classify_host(source) is HostKind.GITHUB:
        for prefix in mirrors:
            prefix = prefix if prefix.endswith("/") else prefix + "/"
            candidates.append(
                Candidate(url=f"{prefix}{archive_url}", timeout=mirror_timeout, is_mirror=True)
            )
    return candidates


def cache_key_for(descriptor: TemplateDescriptor) -> str:
    """Deterministic cache key: the descriptor key, else the repository name.

    Raises:
        InvalidDescriptor: Neither is available.
    """
    if descriptor.key:
        key = descriptor.key
    elif descriptor.source_location:
        key = repo_name(descriptor.source_location)
    else:
        raise InvalidDescriptor(f"Template has neither a key nor a source: {descriptor!r}")

    if key in (".", "..") or "/" in key or "\\" in key:
        raise InvalidDescriptor(f"Template key cannot be used as a directory name: {key!r}")
    return key
