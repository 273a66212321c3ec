"""Unit tests for RichPrompter (robot_cli.navigation.prompter).

Tests cover:
- Choice helpers (separator, heading, real_choices)
- select: numbering skips disabled lines, empty menus, Ctrl-C
- text: re-prompt on validation errors, Ctrl-C
- confirm
"""

from __future__ import annotations

from io import StringIO
from unittest.mock import patch

import pytest
from rich.console import Console

from robot_cli.errors import UserCancelled
from robot_cli.navigation import Choice, RichPrompter, real_choices

PROMPT = "robot_cli.navigation.prompter"


@pytest.fixture
def prompter() -> RichPrompter:
    return RichPrompter(Console(file=StringIO(), width=100))


class TestChoice:
    @pytest.mark.unit
    def test_separator_and_heading_are_disabled(self):
        assert Choice.separator().disabled is True
        assert Choice.heading("Frontend").disabled is True
        assert "Frontend" in Choice.heading("Frontend").label

    @pytest.mark.unit
    def test_real_choices(self):
        choices = [Choice.heading("H"), Choice("a", 1), Choice.separator(), Choice("b", 2)]
        assert [c.value for c in real_choices(choices)] == [1, 2]


class TestSelect:
    @pytest.mark.unit
    def test_numbers_skip_disabled_lines(self, prompter):
        choices = [Choice.heading("Group"), Choice("first", "a"), Choice.separator(), Choice("second", "b")]
        with patch(f"{PROMPT}.IntPrompt.ask", return_value=2) as ask:
            assert prompter.select("Pick", choices) == "b"
        assert ask.call_args.kwargs["choices"] == ["1", "2"]
        output = prompter.console.file.getvalue()
        assert "1) first" in output
        assert "2) second" in output

    @pytest.mark.unit
    def test_empty_menu(self, prompter):
        with pytest.raises(ValueError):
            prompter.select("Pick", [Choice.separator()])

    @pytest.mark.unit
    def test_ctrl_c_cancels(self, prompter):
        with patch(f"{PROMPT}.IntPrompt.ask", side_effect=KeyboardInterrupt):
            with pytest.raises(UserCancelled):
                prompter.select("Pick", [Choice("a", 1)])


class TestText:
    @pytest.mark.unit
    def test_reprompts_until_valid(self, prompter):
        answers = iter(["", "  ok  "])
        with patch(f"{PROMPT}.Prompt.ask", side_effect=lambda *a, **k: next(answers)):
            value = prompter.text("Name", validate=lambda v: None if v else "required")
        assert value == "ok"
        assert "required" in prompter.console.file.getvalue()

    @pytest.mark.unit
    def test_default_passed_through(self, prompter):
        with patch(f"{PROMPT}.Prompt.ask", return_value="my-app") as ask:
            assert prompter.text("Name", default="my-app") == "my-app"
        assert ask.call_args.kwargs["default"] == "my-app"

    @pytest.mark.unit
    def test_eof_cancels(self, prompter):
        with patch(f"{PROMPT}.Prompt.ask", side_effect=EOFError):
            with pytest.raises(UserCancelled):
                prompter.text("Name")


class TestConfirm:
    @pytest.mark.unit
    def test_confirm(self, prompter):
        with patch(f"{PROMPT}.Confirm.ask", return_value=False) as ask:
            assert prompter.confirm("Sure?", default=True) is False
        assert ask.call_args.kwargs["default"] is True

    @pytest.mark.unit
    def test_ctrl_c_cancels(self, prompter):
        with patch(f"{PROMPT}.Confirm.ask", side_effect=KeyboardInterrupt):
            with pytest.raises(UserCancelled):
                prompter.confirm("Sure?")
