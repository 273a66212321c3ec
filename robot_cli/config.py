"""Robot CLI configuration.

Centralised, typed configuration for template acquisition and project
creation. All settings use Pydantic v2 models so they can be validated at
construction time and overridden from environment variables without
boiler-plate.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from robot_cli import __version__
from robot_cli.errors import WorkspaceError

DEFAULT_MIRRORS: list[str] = [
    "https://ghproxy.net/",
    "https://mirror.ghproxy.com/",
]


def _default_cache_dir() -> Path:
    return Path.home() / ".robot-cli" / "cache"


def _default_temp_dir() -> Path:
    return Path(tempfile.gettempdir()) / "robot-cli"


class Config(BaseModel):
    """Global Robot CLI configuration.

    Instances are typically created once by the CLI entry point and then
    passed to the acquisition pipeline and the orchestrator.
    """

    cache_dir: Path = Field(default_factory=_default_cache_dir)
    temp_dir: Path = Field(default_factory=_default_temp_dir)
    user_agent: str = Field(default=f"Robot-CLI/{__version__}")

    source_timeout: float = Field(
        default=30.0, gt=0, description="Per-attempt timeout for the canonical source, in seconds"
    )
    mirror_timeout: float = Field(
        default=15.0, gt=0, description="Per-attempt timeout for each proxy mirror, in seconds"
    )
    retry_backoff: float = Field(
        default=1.0, ge=0, description="Delay between two download attempts, in seconds"
    )
    mirrors: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MIRRORS),
        description="Proxy prefixes tried after the canonical GitHub URL",
    )

    manifest_file: str = Field(default="package.json")
    install_timeout: int = Field(
        default=300, ge=10, description="Dependency install timeout in seconds"
    )
    network_probe_url: str = Field(default="https://github.com")

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            ROBOT_CLI_CACHE_DIR, ROBOT_CLI_TEMP_DIR, ROBOT_CLI_SOURCE_TIMEOUT,
            ROBOT_CLI_MIRROR_TIMEOUT, ROBOT_CLI_RETRY_BACKOFF,
            ROBOT_CLI_MIRRORS (comma-separated, empty string disables mirrors),
            ROBOT_CLI_INSTALL_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("ROBOT_CLI_CACHE_DIR"):
            kwargs["cache_dir"] = Path(os.environ["ROBOT_CLI_CACHE_DIR"]).expanduser()
        if os.environ.get("ROBOT_CLI_TEMP_DIR"):
            kwargs["temp_dir"] = Path(os.environ["ROBOT_CLI_TEMP_DIR"]).expanduser()
        if os.environ.get("ROBOT_CLI_SOURCE_TIMEOUT"):
            kwargs["source_timeout"] = float(os.environ["ROBOT_CLI_SOURCE_TIMEOUT"])
        if os.environ.get("ROBOT_CLI_MIRROR_TIMEOUT"):
            kwargs["mirror_timeout"] = float(os.environ["ROBOT_CLI_MIRROR_TIMEOUT"])
        if os.environ.get("ROBOT_CLI_RETRY_BACKOFF"):
            kwargs["retry_backoff"] = float(os.environ["ROBOT_CLI_RETRY_BACKOFF"])
        if "ROBOT_CLI_MIRRORS" in os.environ:
            raw = os.environ["ROBOT_CLI_MIRRORS"]
            kwargs["mirrors"] = [m.strip() for m in raw.split(",") if m.strip()]
        if os.environ.get("ROBOT_CLI_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = int(os.environ["ROBOT_CLI_INSTALL_TIMEOUT"])
        return cls(**kwargs)

    def ensure_directories(self) -> None:
        """Create the cache and temp roots if they do not exist yet.

        Raises:
            WorkspaceError: A root cannot be created.
        """
        for directory in (self.cache_dir, self.temp_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise WorkspaceError(f"Cannot create directory {directory}: {exc}") from exc
