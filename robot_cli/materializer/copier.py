"""Recursive template copy with a fixed exclusion set."""

from __future__ import annotations

import fnmatch
import shutil
from pathlib import Path

from robot_cli.errors import CopyFailure

# Matched against each entry's base name at every depth.
EXCLUDED_PATTERNS: tuple[str, ...] = (
    # version control
    ".git", ".svn", ".hg",
    # editors
    ".vscode", ".idea",
    # dependencies and lock files
    "node_modules", "package-lock.json", "yarn.lock", "pnpm-lock.yaml", "bun.lockb",
    # build output
    "dist", "build", ".cache",
    # OS artifacts
    ".DS_Store", "Thumbs.db",
    # logs and local env files
    "*.log", ".env.local", ".env.*.local",
)


def should_skip(name: str, patterns: tuple[str, ...] = EXCLUDED_PATTERNS) -> bool:
    """Return ``True`` if an entry called ``name`` must not be copied."""
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns)


def copy_template(
    source: Path,
    target: Path,
    patterns: tuple[str, ...] = EXCLUDED_PATTERNS,
) -> int:
    """Copy ``source`` into ``target`` recursively, skipping excluded entries.

    ``target`` is created if needed.  Symlinks are copied as links.

    Returns:
        The number of files written.

    Raises:
        CopyFailure: Any filesystem error while reading or writing.
    """
    source = Path(source)
    target = Path(target)
    copied = 0
    try:
        target.mkdir(parents=True, exist_ok=True)
        for entry in sorted(source.iterdir()):
            if should_skip(entry.name, patterns):
                continue
            destination = target / entry.name
            if entry.is_dir() and not entry.is_symlink():
                copied += copy_template(entry, destination, patterns)
            else:
                shutil.copy2(entry, destination, follow_symlinks=False)
                copied += 1
    except CopyFailure:
        raise
    except OSError as exc:
        raise CopyFailure(f"Failed to copy template files: {exc}", path=str(target)) from exc
    return copied
