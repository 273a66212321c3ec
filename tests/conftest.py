"""Shared pytest fixtures for the Robot CLI test suite.

Provides reusable fixtures for:
- Isolated configuration (cache and temp directories under tmp_path)
- Catalogs (the shipped one and a small hand-built one)
- A scripted prompter standing in for interactive menus
- In-memory zip archives and a fake HTTP transport
"""

from __future__ import annotations

import io
import json
import zipfile
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import httpx
import pytest

from robot_cli.catalog import (
    Catalog,
    CategoryNode,
    PatternNode,
    StackNode,
    TemplateDescriptor,
    VariantTag,
    default_catalog,
)
from robot_cli.config import Config
from robot_cli.navigation import Choice, real_choices


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Config with private cache/temp roots and no retry pause."""
    return Config(
        cache_dir=tmp_path / "cache",
        temp_dir=tmp_path / "temp",
        retry_backoff=0,
    )


# ---------------------------------------------------------------------------
# Catalogs
# ---------------------------------------------------------------------------

def _template(key: str, name: str, repo: str, features: tuple[str, ...] = (), **kwargs: Any) -> TemplateDescriptor:
    return TemplateDescriptor(
        key=key,
        display_name=name,
        description=f"{name} starter",
        source_location=f"https://github.com/acme/{repo}",
        features=features,
        **kwargs,
    )


@pytest.fixture
def catalog() -> Catalog:
    """The catalog shipped with the CLI."""
    return default_catalog()


@pytest.fixture
def small_catalog() -> Catalog:
    """Two categories; ``tools`` has a single stack, pattern and template.

    web
      vue   -> spa (vue-full, vue-base), ssr (vue-ssr)
      react -> spa (react-full)
    tools
      cli   -> single (cli-tool)
    """
    web = CategoryNode(
        key="web",
        name="Web",
        stacks=(
            StackNode(
                key="vue",
                name="Vue",
                patterns=(
                    PatternNode(
                        key="spa",
                        name="SPA",
                        templates=(
                            _template("vue-full", "Vue Full", "Vue_Full", ("Vue Router", "Pinia")),
                            _template("vue-base", "Vue Base", "Vue_Base", ("Vue Router",), variant_tag=VariantTag.BASE),
                        ),
                    ),
                    PatternNode(
                        key="ssr",
                        name="SSR",
                        templates=(_template("vue-ssr", "Vue SSR", "Vue_SSR", ("Nuxt",)),),
                    ),
                ),
            ),
            StackNode(
                key="react",
                name="React",
                patterns=(
                    PatternNode(
                        key="spa",
                        name="SPA",
                        templates=(_template("react-full", "React Full", "React_Full", ("React Router",)),),
                    ),
                ),
            ),
        ),
    )
    tools = CategoryNode(
        key="tools",
        name="Tools",
        stacks=(
            StackNode(
                key="cli",
                name="CLI",
                patterns=(
                    PatternNode(
                        key="single",
                        name="Single package",
                        templates=(_template("cli-tool", "CLI Tool", "Cli_Tool", ("argparse",)),),
                    ),
                ),
            ),
        ),
    )
    return Catalog([web, tools], recommended_keys=("vue-full", "react-full", "cli-tool", "vue-ssr"))


# ---------------------------------------------------------------------------
# Scripted prompter
# ---------------------------------------------------------------------------

def pick(label_part: str) -> Callable[[Sequence[Choice]], Any]:
    """Scripted ``select`` answer: the first real choice whose label contains ``label_part``."""

    def chooser(choices: Sequence[Choice]) -> Any:
        for choice in real_choices(choices):
            if label_part in choice.label:
                return choice.value
        labels = [c.label for c in real_choices(choices)]
        raise AssertionError(f"No choice containing {label_part!r} in {labels}")

    return chooser


class ScriptedPrompter:
    """``Prompter`` replaying a fixed list of answers.

    ``select`` answers are either a plain value (returned as is) or a callable
    receiving the menu's choices.  ``text`` answers of ``None`` accept the
    default; answers rejected by ``validate`` are recorded and the next one is
    used, like a real re-prompt.
    """

    def __init__(self, *answers: Any) -> None:
        self.answers = list(answers)
        self.calls: list[tuple[str, str, Any]] = []
        self.rejected: list[str] = []

    def _next(self, kind: str, message: str) -> Any:
        if not self.answers:
            raise AssertionError(f"Unexpected {kind} prompt: {message!r}")
        return self.answers.pop(0)

    def select(self, message: str, choices: Sequence[Choice]) -> Any:
        self.calls.append(("select", message, list(choices)))
        answer = self._next("select", message)
        return answer(choices) if callable(answer) else answer

    def text(self, message: str, *, default: str = "", validate=None) -> str:
        self.calls.append(("text", message, default))
        while True:
            answer = self._next("text", message)
            value = default if answer is None else answer
            problem = validate(value) if validate else None
            if problem is None:
                return value
            self.rejected.append(problem)

    def confirm(self, message: str, *, default: bool = True) -> bool:
        self.calls.append(("confirm", message, default))
        answer = self._next("confirm", message)
        return default if answer is None else answer

    @property
    def menus(self) -> list[str]:
        return [message for kind, message, _ in self.calls if kind == "select"]


@pytest.fixture
def make_prompter() -> Callable[..., ScriptedPrompter]:
    return ScriptedPrompter


# ---------------------------------------------------------------------------
# Archives & HTTP
# ---------------------------------------------------------------------------

def build_zip(files: dict[str, str | bytes]) -> bytes:
    """Return the bytes of a zip archive holding ``files`` (path -> content)."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def project_files(root: str, name: str = "template-app") -> dict[str, str]:
    """A minimal template snapshot wrapped in ``root``."""
    return {
        f"{root}/package.json": json.dumps({"name": name, "version": "0.1.0"}),
        f"{root}/README.md": "# Template App\n\nProject description goes here\n",
        f"{root}/src/main.ts": "console.log('hello')\n",
        f"{root}/_gitignore": "node_modules\n",
        f"{root}/.git/HEAD": "ref: refs/heads/main\n",
        f"{root}/node_modules/left-pad/index.js": "module.exports = 1\n",
    }


@pytest.fixture
def template_zip() -> bytes:
    return build_zip(project_files("Robot_Admin-main"))


class FakeHub:
    """``httpx.MockTransport`` handler answering from a url -> response table.

    Values are ``bytes`` (200 with that body), an ``int`` status code, a
    prepared ``httpx.Response``, or an exception instance to raise.  Unknown
    URLs answer 404.
    """

    def __init__(self, routes: dict[str, bytes | int | httpx.Response | Exception] | None = None) -> None:
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.routes.get(str(request.url), 404)
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, httpx.Response):
            return answer
        if isinstance(answer, int):
            return httpx.Response(answer)
        return httpx.Response(200, content=answer)

    @property
    def urls(self) -> list[str]:
        return [str(r.url) for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def hub() -> FakeHub:
    return FakeHub()


# Helper functions exposed as fixtures so test modules need not import conftest.

@pytest.fixture(name="pick")
def pick_fixture() -> Callable[[str], Callable[[Sequence[Choice]], Any]]:
    return pick


@pytest.fixture(name="build_zip")
def build_zip_fixture() -> Callable[[dict[str, str | bytes]], bytes]:
    return build_zip


@pytest.fixture(name="project_files")
def project_files_fixture() -> Callable[..., dict[str, str]]:
    return project_files
