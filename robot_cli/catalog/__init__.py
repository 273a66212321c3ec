"""Robot CLI template catalog.

Read-only registry of starter templates organised as
category -> stack -> architecture pattern -> template variant.

Quick usage::

    from robot_cli.catalog import default_catalog

    catalog = default_catalog()
    catalog.search("vue")
    catalog.list_by_path("frontend", "vue", "monolith")
"""

from .catalog import MAX_RECOMMENDED, MIN_RECOMMENDED, Catalog, default_catalog
from .data import RECOMMENDED_KEYS, TEMPLATE_TABLE, build_categories
from .models import (
    CategoryNode,
    PatternNode,
    StackNode,
    TemplateDescriptor,
    TemplateStatus,
    VariantTag,
)

__all__ = [
    "Catalog",
    "default_catalog",
    "MIN_RECOMMENDED",
    "MAX_RECOMMENDED",
    "RECOMMENDED_KEYS",
    "TEMPLATE_TABLE",
    "build_categories",
    "CategoryNode",
    "StackNode",
    "PatternNode",
    "TemplateDescriptor",
    "TemplateStatus",
    "VariantTag",
]
