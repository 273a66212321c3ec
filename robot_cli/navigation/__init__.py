"""Robot CLI navigation -- the interactive template-selection wizard.

Key classes:
    NavigationEngine - state-machine driver over a ``Catalog``
    NavigationState  - current level plus partial selections
    RichPrompter     - numbered Rich menus implementing ``Prompter``
"""

from .prompter import Choice, Prompter, RichPrompter, real_choices
from .state import (
    CATEGORY_CHAIN,
    Advance,
    BackTo,
    Level,
    NavigationResult,
    NavigationState,
    Selected,
)
from .wizard import MenuAction, NavigationEngine, template_choice

__all__ = [
    "NavigationEngine",
    "MenuAction",
    "template_choice",
    "NavigationState",
    "NavigationResult",
    "Level",
    "CATEGORY_CHAIN",
    "Selected",
    "Advance",
    "BackTo",
    "Choice",
    "Prompter",
    "RichPrompter",
    "real_choices",
]
