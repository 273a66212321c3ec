"""Metadata rewrites applied to a freshly copied project."""

from __future__ import annotations

import re
from pathlib import Path

from robot_cli.errors import ConfigRewriteFailure
from robot_cli.utils import load_json, write_json

from .models import ProjectConfig

# Staging names used by templates for files that some tooling would
# otherwise act on inside the template repository itself.
DOTFILE_RENAMES: dict[str, str] = {
    "_gitignore": ".gitignore",
    "_env.example": ".env.example",
}

_TITLE_RE = re.compile(r"^# .+$", re.MULTILINE)
_DESCRIPTION_PLACEHOLDER_RE = re.compile(r"(?:Project description|项目描述).*")


def default_description(template_name: str) -> str:
    return f"Project created from {template_name}"


def rewrite_manifest(project_path: Path, config: ProjectConfig, template_name: str) -> bool:
    """Set name, description and author in ``package.json``.

    Returns ``False`` when the project has no manifest.
    """
    manifest = project_path / "package.json"
    if not manifest.is_file():
        return False
    try:
        data = load_json(manifest)
        data["name"] = config.name
        data["description"] = config.description or default_description(template_name)
        if config.author:
            data["author"] = config.author
        write_json(data, manifest)
    except (OSError, ValueError) as exc:
        raise ConfigRewriteFailure(f"Could not update package.json: {exc}", path=str(manifest)) from exc
    return True


def rewrite_readme(project_path: Path, config: ProjectConfig, template_name: str) -> bool:
    """Retitle ``README.md``, fill its description placeholder and credit the author."""
    readme = project_path / "README.md"
    if not readme.is_file():
        return False
    try:
        text = readme.read_text(encoding="utf-8")
        text = _TITLE_RE.sub(lambda _: f"# {config.name}", text, count=1)
        description = config.description or default_description(template_name)
        text = _DESCRIPTION_PLACEHOLDER_RE.sub(lambda _: description, text, count=1)
        if config.author:
            text = text.rstrip("\n") + f"\n\n## Author\n\n{config.author}\n"
        readme.write_text(text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigRewriteFailure(f"Could not update README.md: {exc}", path=str(readme)) from exc
    return True


def rename_dotfiles(project_path: Path) -> list[str]:
    """Rename staged dotfiles to their real names; return the new names."""
    renamed: list[str] = []
    for staged, real in DOTFILE_RENAMES.items():
        source = project_path / staged
        if not source.exists():
            continue
        try:
            source.replace(project_path / real)
        except OSError as exc:
            raise ConfigRewriteFailure(f"Could not rename {staged}: {exc}", path=str(source)) from exc
        renamed.append(real)
    return renamed
