"""Project configuration supplied by the user."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from robot_cli.utils import validate_project_name


class PackageManager(str, Enum):
    """Supported JavaScript package managers, in order of preference."""
    BUN = "bun"
    PNPM = "pnpm"
    YARN = "yarn"
    NPM = "npm"

    @property
    def install_command(self) -> list[str]:
        return [self.value, "install"]


PACKAGE_MANAGER_LABELS: dict[PackageManager, str] = {
    PackageManager.BUN: "bun (recommended - very fast installs)",
    PackageManager.PNPM: "pnpm (recommended - fast, disk efficient)",
    PackageManager.YARN: "yarn (for existing yarn projects)",
    PackageManager.NPM: "npm (Node.js default)",
}


class ProjectConfig(BaseModel):
    """Immutable answers collected before a project is created."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project name, also the target directory name")
    initialize_vcs: bool = Field(default=True, description="Run git init and an initial commit")
    install_dependencies: bool = Field(default=True)
    package_manager: Optional[PackageManager] = Field(
        default=None, description="None means detect from the project and PATH"
    )
    description: str = Field(default="")
    author: str = Field(default="")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        errors = validate_project_name(value)
        if errors:
            raise ValueError("; ".join(errors))
        return value.strip()
