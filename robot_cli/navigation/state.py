"""Navigation state and the tagged results exchanged by wizard steps.

Each wizard step returns exactly one ``NavigationResult``:

* ``Selected``  -- terminal, carries the chosen descriptor
* ``Advance``   -- move forward to another level
* ``BackTo``    -- move backward, discarding every selection deeper than the target
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from robot_cli.catalog import TemplateDescriptor


class Level(str, Enum):
    """Every menu the wizard can be showing."""
    METHOD = "method"
    RECOMMENDED = "recommended"
    CATEGORY = "category"
    STACK = "stack"
    PATTERN = "pattern"
    TEMPLATE = "template"
    SEARCH = "search"
    ALL = "all"


# The by-category chain, shallowest first.
CATEGORY_CHAIN: tuple[Level, ...] = (Level.CATEGORY, Level.STACK, Level.PATTERN, Level.TEMPLATE)

LEVEL_LABELS: dict[Level, str] = {
    Level.METHOD: "selection method",
    Level.CATEGORY: "project category",
    Level.STACK: "tech stack",
    Level.PATTERN: "architecture pattern",
    Level.TEMPLATE: "template variant",
}


@dataclass(frozen=True)
class Selected:
    descriptor: TemplateDescriptor


@dataclass(frozen=True)
class Advance:
    level: Level


@dataclass(frozen=True)
class BackTo:
    level: Level


NavigationResult = Union[Selected, Advance, BackTo]


@dataclass
class NavigationState:
    """Where the wizard is and what has been chosen on the way.

    ``collapsed`` records chain levels that were auto-selected because they
    offered a single real choice; backward transitions skip them.
    """

    level: Level = Level.METHOD
    category: str | None = None
    stack: str | None = None
    pattern: str | None = None
    collapsed: set[Level] = field(default_factory=set)

    def advance(self, level: Level) -> None:
        self.level = level

    def rewind(self, level: Level) -> None:
        """Re-enter ``level``, dropping selections made at deeper levels."""
        self.level = level
        if level in CATEGORY_CHAIN:
            depth = CATEGORY_CHAIN.index(level)
        else:
            depth = 0

        if depth <= 0:
            self.category = None
        if depth <= 1:
            self.stack = None
        if depth <= 2:
            self.pattern = None
        self.collapsed = {lvl for lvl in self.collapsed if CATEGORY_CHAIN.index(lvl) < depth}

    def traversed(self, current: Level) -> list[Level]:
        """Chain levels before ``current`` that showed a menu, nearest first."""
        if current not in CATEGORY_CHAIN:
            return []
        earlier = CATEGORY_CHAIN[: CATEGORY_CHAIN.index(current)]
        return [lvl for lvl in reversed(earlier) if lvl not in self.collapsed]
