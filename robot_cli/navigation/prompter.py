"""Interactive prompts behind a narrow interface.

The wizard and the orchestrator only talk to a ``Prompter``.  ``RichPrompter``
renders numbered menus on the shared Rich console; tests substitute a
scripted implementation.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from robot_cli.errors import UserCancelled
from robot_cli.utils import console as default_console

SEPARATOR_LABEL = "─" * 21


@dataclass(frozen=True)
class Choice:
    """One menu line.  Disabled choices (headings, separators) cannot be picked."""

    label: str
    value: Any = None
    disabled: bool = False

    @classmethod
    def separator(cls, label: str = SEPARATOR_LABEL) -> "Choice":
        return cls(label=f"[dim]{label}[/dim]", disabled=True)

    @classmethod
    def heading(cls, label: str) -> "Choice":
        return cls(label=f"[bold cyan]{label}[/bold cyan]", disabled=True)


def real_choices(choices: Sequence[Choice]) -> list[Choice]:
    """The choices a user can actually pick."""
    return [c for c in choices if not c.disabled]


class Prompter(Protocol):
    """What the wizard needs from a user interface."""

    def select(self, message: str, choices: Sequence[Choice]) -> Any:
        """Show ``choices`` and return the ``value`` of the picked one."""

    def text(
        self,
        message: str,
        *,
        default: str = "",
        validate: Callable[[str], str | None] | None = None,
    ) -> str:
        """Ask for free text; ``validate`` returns an error message or ``None``."""

    def confirm(self, message: str, *, default: bool = True) -> bool:
        """Ask a yes/no question."""


class RichPrompter:
    """``Prompter`` rendering numbered menus with ``rich.prompt``.

    Ctrl-C or end-of-input at any prompt raises ``UserCancelled``.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    def select(self, message: str, choices: Sequence[Choice]) -> Any:
        selectable = real_choices(choices)
        if not selectable:
            raise ValueError(f"Menu {message!r} has no selectable choice")

        self.console.print()
        number = 0
        numbered: dict[int, Choice] = {}
        for choice in choices:
            if choice.disabled:
                self.console.print(f"     {choice.label}")
                continue
            number += 1
            numbered[number] = choice
            self.console.print(f"  [cyan]{number:>2}[/cyan]) {choice.label}")

        try:
            picked = IntPrompt.ask(
                f"[bold]{message}[/bold]",
                console=self.console,
                choices=[str(n) for n in numbered],
                show_choices=False,
                default=1,
            )
        except (KeyboardInterrupt, EOFError) as exc:
            raise UserCancelled() from exc
        return numbered[picked].value

    def text(
        self,
        message: str,
        *,
        default: str = "",
        validate: Callable[[str], str | None] | None = None,
    ) -> str:
        while True:
            try:
                answer = Prompt.ask(
                    f"[bold]{message}[/bold]",
                    console=self.console,
                    default=default,
                    show_default=bool(default),
                )
            except (KeyboardInterrupt, EOFError) as exc:
                raise UserCancelled() from exc
            answer = (answer or "").strip()
            problem = validate(answer) if validate else None
            if problem is None:
                return answer
            self.console.print(f"[red]{problem}[/red]")

    def confirm(self, message: str, *, default: bool = True) -> bool:
        try:
            return Confirm.ask(f"[bold]{message}[/bold]", console=self.console, default=default)
        except (KeyboardInterrupt, EOFError) as exc:
            raise UserCancelled() from exc
