"""Template-selection wizard.

Resolves user intent to exactly one ``TemplateDescriptor``.  The wizard is an
explicit state machine: ``run`` loops over ``NavigationState.level`` and
dispatches to one step per level.  Steps never call each other; they return
a ``Selected``, ``Advance`` or ``BackTo`` result that the loop applies.

Entry points::

    METHOD -> RECOMMENDED
           -> CATEGORY -> STACK -> PATTERN -> TEMPLATE
           -> SEARCH
           -> ALL

Every menu except METHOD offers a way back to METHOD.  In the by-category
chain each menu also offers a way back to every earlier level that showed a
menu; levels with a single real choice are auto-selected and skipped on
the way back.  The user leaves the wizard by picking a template or by
cancelling (``UserCancelled``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from robot_cli.catalog import Catalog, TemplateDescriptor
from robot_cli.errors import UserCancelled
from robot_cli.utils import console, print_warning

from .prompter import Choice, Prompter, real_choices
from .state import (
    LEVEL_LABELS,
    Advance,
    BackTo,
    Level,
    NavigationResult,
    NavigationState,
    Selected,
)

logger = logging.getLogger(__name__)


class MenuAction(str, Enum):
    """Menu values that are neither a selection nor a level transition."""
    RETRY = "retry"
    EXIT = "exit"


METHOD_CHOICES: tuple[tuple[str, Level], ...] = (
    ("Recommended templates (quick pick of the most used)", Level.RECOMMENDED),
    ("Browse by category (project type, stack, architecture)", Level.CATEGORY),
    ("Search templates (keyword)", Level.SEARCH),
    ("All templates", Level.ALL),
)


def template_choice(template: TemplateDescriptor) -> Choice:
    """Menu line for a template; picking it yields ``Selected``."""
    label = f"{template.display_name} - [dim]{template.description}[/dim]"
    if not template.is_available:
        label += " [yellow](coming soon)[/yellow]"
    return Choice(label=label, value=Selected(template))


def back_choice(level: Level) -> Choice:
    return Choice(label=f"[dim]← Back to {LEVEL_LABELS[level]}[/dim]", value=BackTo(level))


class NavigationEngine:
    """Drives the interactive wizard over a ``Catalog``.

    Args:
        catalog: The catalog to browse.
        prompter: User interface used for every question.
    """

    def __init__(self, catalog: Catalog, prompter: Prompter) -> None:
        self.catalog = catalog
        self.prompter = prompter
        self._steps: dict[Level, Callable[[NavigationState], NavigationResult]] = {
            Level.METHOD: self._select_method,
            Level.RECOMMENDED: self._select_recommended,
            Level.CATEGORY: self._select_category,
            Level.STACK: self._select_stack,
            Level.PATTERN: self._select_pattern,
            Level.TEMPLATE: self._select_template,
            Level.SEARCH: self._select_by_search,
            Level.ALL: self._select_from_all,
        }

    # -- Public API --------------------------------------------------------

    def resolve_key(self, template_key: str) -> TemplateDescriptor | None:
        """Look up a key supplied on the command line."""
        template = self.catalog.get(template_key)
        return template.with_key(template_key) if template else None

    def run(self, template_key: str | None = None) -> TemplateDescriptor:
        """Return the template the user picked.

        A known ``template_key`` short-circuits the wizard; an unknown one is
        reported and the full interactive flow starts.

        Raises:
            UserCancelled: The user chose to exit.
        """
        if template_key:
            template = self.resolve_key(template_key)
            if template is not None:
                logger.debug("Template %s resolved from the command line", template_key)
                return template
            print_warning(f'Template "{template_key}" does not exist')
            console.print()

        state = NavigationState()
        while True:
            result = self._steps[state.level](state)
            logger.debug("Wizard %s -> %s", state.level.value, result)
            if isinstance(result, Selected):
                return result.descriptor
            if isinstance(result, BackTo):
                state.rewind(result.level)
            else:
                state.advance(result.level)

    # -- Helpers -----------------------------------------------------------

    def _back_choices(self, state: NavigationState, current: Level) -> list[Choice]:
        choices = [back_choice(level) for level in state.traversed(current)]
        choices.append(back_choice(Level.METHOD))
        return choices

    def _chain_menu(
        self,
        state: NavigationState,
        current: Level,
        message: str,
        options: list[Choice],
    ) -> object:
        """Show a by-category menu, or auto-pick when only one option exists.

        Returns the picked value: an option value or a ``BackTo``.
        """
        if len(real_choices(options)) == 1:
            state.collapsed.add(current)
            logger.debug("Auto-selected the only %s", current.value)
            return real_choices(options)[0].value

        choices = [*options, Choice.separator(), *self._back_choices(state, current)]
        return self.prompter.select(message, choices)

    # -- Steps -------------------------------------------------------------

    def _select_method(self, state: NavigationState) -> NavigationResult:
        choices = [Choice(label=label, value=level) for label, level in METHOD_CHOICES]
        choices.append(Choice.separator())
        choices.append(Choice(label="[dim]Exit[/dim]", value=MenuAction.EXIT))

        answer = self.prompter.select("How would you like to choose a template?", choices)
        if answer is MenuAction.EXIT:
            raise UserCancelled()
        return Advance(answer)

    def _select_recommended(self, state: NavigationState) -> NavigationResult:
        recommended = self.catalog.recommended()
        if not recommended:
            print_warning("No recommended templates available")
            return BackTo(Level.METHOD)

        console.print()
        console.print("[blue]Recommended templates[/blue]")
        choices = [template_choice(t.with_key(k)) for k, t in recommended.items()]
        choices.append(Choice.separator())
        choices.append(back_choice(Level.METHOD))
        return self.prompter.select("Pick a recommended template:", choices)

    def _select_category(self, state: NavigationState) -> NavigationResult:
        options = [Choice(label=c.name, value=c.key) for c in self.catalog.categories()]
        answer = self._chain_menu(state, Level.CATEGORY, "Select a project category:", options)
        if isinstance(answer, BackTo):
            return answer
        state.category = answer
        return Advance(Level.STACK)

    def _select_stack(self, state: NavigationState) -> NavigationResult:
        category = self.catalog.category(state.category)
        if category is None:
            return BackTo(Level.CATEGORY)
        options = [Choice(label=s.name, value=s.key) for s in category.stacks]
        answer = self._chain_menu(state, Level.STACK, "Select a tech stack:", options)
        if isinstance(answer, BackTo):
            return answer
        state.stack = answer
        return Advance(Level.PATTERN)

    def _select_pattern(self, state: NavigationState) -> NavigationResult:
        stack = self.catalog.stack(state.category, state.stack)
        if stack is None:
            return BackTo(Level.STACK)
        options = [Choice(label=p.name, value=p.key) for p in stack.patterns]
        answer = self._chain_menu(state, Level.PATTERN, "Select an architecture pattern:", options)
        if isinstance(answer, BackTo):
            return answer
        state.pattern = answer
        return Advance(Level.TEMPLATE)

    def _select_template(self, state: NavigationState) -> NavigationResult:
        templates = self.catalog.list_by_path(
            state.category or "", state.stack or "", state.pattern or ""
        )
        options = [template_choice(t) for t in templates.values()]
        return self._chain_menu(state, Level.TEMPLATE, "Select a template variant:", options)

    def _select_by_search(self, state: NavigationState) -> NavigationResult:
        keyword = self.prompter.text(
            "Search keyword (name, description, stack):",
            validate=lambda value: None if value.strip() else "Keyword cannot be empty",
        )
        results = self.catalog.search(keyword.strip())

        if not results:
            print_warning("No matching templates found")
            console.print()
            answer = self.prompter.select(
                "What next?",
                [
                    Choice(label="Search again", value=MenuAction.RETRY),
                    back_choice(Level.METHOD),
                ],
            )
        else:
            console.print()
            console.print(f"[green]Found {len(results)} matching template(s)[/green]")
            choices = [template_choice(t) for t in results.values()]
            choices.append(Choice.separator())
            choices.append(Choice(label="Search again", value=MenuAction.RETRY))
            choices.append(back_choice(Level.METHOD))
            answer = self.prompter.select("Pick a template:", choices)

        if answer is MenuAction.RETRY:
            return Advance(Level.SEARCH)
        return answer

    def _select_from_all(self, state: NavigationState) -> NavigationResult:
        all_templates = self.catalog.list_all()
        console.print()
        console.print(f"[blue]All templates ({len(all_templates)})[/blue]")

        choices: list[Choice] = []
        for heading, templates in self.catalog.group_by_category(all_templates).items():
            choices.append(Choice.heading(heading))
            choices.extend(template_choice(t) for t in templates)
        choices.append(Choice.separator())
        choices.append(back_choice(Level.METHOD))
        return self.prompter.select("Pick a template:", choices)
