"""Query functions over the template tree.

A ``Catalog`` is an explicitly constructed, immutable value.  The navigation
wizard, the CLI and the tests receive one by reference, so alternate
catalogs can be injected anywhere.  Every query is pure and returns a fresh
``{key: TemplateDescriptor}`` dict in catalog order.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .data import RECOMMENDED_KEYS, build_categories
from .models import CategoryNode, PatternNode, StackNode, TemplateDescriptor

MIN_RECOMMENDED = 4
MAX_RECOMMENDED = 6


class Catalog:
    """The static, hierarchical registry of all template descriptors.

    Args:
        categories: The category nodes, in display order.
        recommended_keys: Curated, priority-ordered keys for ``recommended()``.

    Raises:
        ValueError: If two descriptors share a key.
    """

    def __init__(
        self,
        categories: Iterable[CategoryNode],
        recommended_keys: Iterable[str] = RECOMMENDED_KEYS,
    ) -> None:
        self._categories: tuple[CategoryNode, ...] = tuple(categories)
        self._recommended_keys: tuple[str, ...] = tuple(recommended_keys)
        self._index: dict[str, TemplateDescriptor] = {}
        self._paths: dict[str, tuple[str, str, str]] = {}

        for category, stack, pattern in self._walk_patterns():
            for template in pattern.templates:
                if template.key in self._index:
                    raise ValueError(f"Duplicate template key in catalog: {template.key!r}")
                self._index[template.key] = template
                self._paths[template.key] = (category.key, stack.key, pattern.key)

    def _walk_patterns(self) -> Iterator[tuple[CategoryNode, StackNode, PatternNode]]:
        for category in self._categories:
            for stack in category.stacks:
                for pattern in stack.patterns:
                    yield category, stack, pattern

    # -- Tree access -------------------------------------------------------

    def categories(self) -> tuple[CategoryNode, ...]:
        return self._categories

    def category(self, category_key: str | None) -> CategoryNode | None:
        return next((c for c in self._categories if c.key == category_key), None)

    def stack(self, category_key: str | None, stack_key: str | None) -> StackNode | None:
        category = self.category(category_key)
        return category.stack(stack_key) if category and stack_key else None

    def pattern(
        self, category_key: str | None, stack_key: str | None, pattern_key: str | None
    ) -> PatternNode | None:
        stack = self.stack(category_key, stack_key)
        return stack.pattern(pattern_key) if stack and pattern_key else None

    def locate(self, key: str) -> tuple[str, str, str] | None:
        """Return the ``(category, stack, pattern)`` keys holding template ``key``."""
        return self._paths.get(key)

    # -- Queries -----------------------------------------------------------

    def get(self, key: str) -> TemplateDescriptor | None:
        return self._index.get(key)

    def list_all(self) -> dict[str, TemplateDescriptor]:
        """Flatten the four-level tree into ``{key: descriptor}``."""
        return dict(self._index)

    def list_by_path(
        self, category_key: str, stack_key: str, pattern_key: str
    ) -> dict[str, TemplateDescriptor]:
        """Templates under one (category, stack, pattern) triple.

        An unknown segment anywhere in the path yields an empty dict.
        """
        pattern = self.pattern(category_key, stack_key, pattern_key)
        if pattern is None:
            return {}
        return {template.key: template for template in pattern.templates}

    def search(self, keyword: str) -> dict[str, TemplateDescriptor]:
        """Case-insensitive substring match over name, description and features."""
        needle = keyword.lower()
        return {
            key: template
            for key, template in self._index.items()
            if needle in template.search_text
        }

    def recommended(self) -> dict[str, TemplateDescriptor]:
        """The curated shortlist, topped up in catalog order when it is too short.

        Curated keys missing from the catalog are skipped.  When fewer than
        ``MIN_RECOMMENDED`` remain, other templates are added until
        ``MAX_RECOMMENDED`` is reached.
        """
        result: dict[str, TemplateDescriptor] = {}
        for key in self._recommended_keys:
            if len(result) >= MAX_RECOMMENDED:
                break
            if key in self._index:
                result[key] = self._index[key]

        if len(result) < MIN_RECOMMENDED:
            for key, template in self._index.items():
                if len(result) >= MAX_RECOMMENDED:
                    break
                result.setdefault(key, template)

        return result

    def group_by_category(
        self, templates: dict[str, TemplateDescriptor]
    ) -> dict[str, list[TemplateDescriptor]]:
        """Group templates under their category display name, for listing.

        Presentation only.  Templates the catalog cannot locate are grouped
        by the first dash-separated segment of their key.
        """
        groups: dict[str, list[TemplateDescriptor]] = {}
        for key, template in templates.items():
            path = self.locate(key)
            category = self.category(path[0]) if path else None
            heading = category.name if category else key.split("-")[0].upper()
            groups.setdefault(heading, []).append(template.with_key(key))
        return groups

    # -- Dunder helpers ----------------------------------------------------

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._index)


def default_catalog() -> Catalog:
    """Build the catalog shipped with the CLI."""
    return Catalog(build_categories(), RECOMMENDED_KEYS)
