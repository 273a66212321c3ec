"""Archive extraction and structural validation.

Synchronous helpers; the pipeline runs them through ``asyncio.to_thread``.
"""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Any

from robot_cli.errors import ExtractionFailure, IntegrityFailure, StructureNotFound
from robot_cli.utils import load_json

ROOT_SUFFIXES = ("-main", "-master")


def extract_archive(zip_path: Path, destination: Path) -> int:
    """Extract ``zip_path`` into ``destination`` and return the member count.

    Raises:
        ExtractionFailure: The file is not a readable zip, or a member would
            land outside ``destination``.
    """
    destination = Path(destination)
    try:
        with zipfile.ZipFile(zip_path) as archive:
            members = archive.namelist()
            root = destination.resolve()
            for name in members:
                target = (destination / name).resolve()
                if target != root and root not in target.parents:
                    raise ExtractionFailure(f"Archive member escapes the extraction directory: {name}")
            destination.mkdir(parents=True, exist_ok=True)
            archive.extractall(destination)
    except zipfile.BadZipFile as exc:
        raise ExtractionFailure(f"Downloaded file is not a valid zip archive: {exc}") from exc
    except OSError as exc:
        raise ExtractionFailure(f"Could not extract {zip_path.name}: {exc}") from exc
    return len(members)


def locate_project_root(extract_dir: Path, repository: str) -> Path:
    """Find the project directory inside an extracted archive.

    Code hosts wrap the snapshot in one top-level directory named after the
    repository and branch (``Robot_Admin-main``), after the repository alone,
    or, on GitLab, after the repository, branch and commit
    (``Robot_Admin-main-1a2b3c4d``).

    Raises:
        StructureNotFound: No top-level directory matches these conventions.
    """
    entries = sorted(p for p in Path(extract_dir).iterdir()) if Path(extract_dir).is_dir() else []
    for entry in entries:
        if not entry.is_dir():
            continue
        if entry.name.endswith(ROOT_SUFFIXES) or entry.name == repository:
            return entry
        if any(entry.name.startswith(f"{repository}{suffix}-") for suffix in ROOT_SUFFIXES):
            return entry

    available = ", ".join(p.name for p in entries) or "(empty archive)"
    raise StructureNotFound(f"No project directory found in the archive. Entries: {available}")


def validate_manifest(project_root: Path, manifest_file: str = "package.json") -> dict[str, Any]:
    """Parse and return the project manifest.

    Raises:
        IntegrityFailure: The manifest is missing, unreadable or not a JSON object.
    """
    manifest = Path(project_root) / manifest_file
    if not manifest.is_file():
        raise IntegrityFailure(f"Template is missing its {manifest_file} file")
    try:
        return load_json(manifest)
    except (OSError, ValueError) as exc:
        raise IntegrityFailure(f"Template {manifest_file} is not valid: {exc}") from exc
