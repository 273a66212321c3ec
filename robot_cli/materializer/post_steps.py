"""Optional steps after materialization: VCS init and dependency install.

Both shell out once per step.  Failures are reported as an unsuccessful
``StepResult`` and never abort project creation.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from robot_cli.utils import run_command

from .models import PackageManager

logger = logging.getLogger(__name__)

INITIAL_COMMIT_MESSAGE = "feat: initialize project"

LOCK_FILES: tuple[tuple[str, PackageManager], ...] = (
    ("bun.lockb", PackageManager.BUN),
    ("bun.lock", PackageManager.BUN),
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("yarn.lock", PackageManager.YARN),
)


@dataclass(frozen=True)
class StepResult:
    """Outcome of one post step."""

    name: str
    ok: bool
    message: str = ""


def detect_package_manager(project_path: Path) -> PackageManager:
    """Pick a package manager for ``project_path``.

    A lock file wins; otherwise the first of bun, pnpm and yarn found on
    ``PATH``; npm as the last resort.
    """
    for lock_file, manager in LOCK_FILES:
        if (project_path / lock_file).exists():
            return manager
    for manager in (PackageManager.BUN, PackageManager.PNPM, PackageManager.YARN):
        if shutil.which(manager.value):
            return manager
    return PackageManager.NPM


async def init_vcs(project_path: Path) -> StepResult:
    """Initialise a git repository and record an initial commit."""
    code, _, stderr = await run_command(["git", "--version"], timeout=15)
    if code != 0:
        return StepResult("git", False, "git is not available, repository not initialised")

    for args in (
        ["git", "init"],
        ["git", "add", "."],
        ["git", "commit", "-m", INITIAL_COMMIT_MESSAGE],
    ):
        code, _, stderr = await run_command(args, cwd=project_path, timeout=60)
        if code != 0:
            logger.debug("%s failed: %s", " ".join(args), stderr)
            return StepResult("git", False, f"{' '.join(args)} failed: {stderr or 'exit ' + str(code)}")

    return StepResult("git", True, "Git repository initialised")


async def install_dependencies(
    project_path: Path,
    manager: PackageManager | None = None,
    timeout: int = 300,
) -> StepResult:
    """Run ``<manager> install`` in ``project_path``."""
    manager = manager or detect_package_manager(project_path)
    code, _, stderr = await run_command(manager.install_command, cwd=project_path, timeout=timeout)
    if code != 0:
        detail = stderr.splitlines()[-1] if stderr else f"exit {code}"
        return StepResult("install", False, f"{manager.value} install failed: {detail}")
    return StepResult("install", True, f"Dependencies installed with {manager.value}")
