"""Pydantic v2 models for the template catalog.

Defines the immutable four-level hierarchy
``CategoryNode -> StackNode -> PatternNode -> TemplateDescriptor``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class VariantTag(str, Enum):
    """How complete a template is. ``full`` ships every example, ``base`` the core only."""
    FULL = "full"
    BASE = "base"
    MICRO = "micro"


class TemplateStatus(str, Enum):
    """Availability of a template. Presentation only; acquisition ignores it."""
    AVAILABLE = "available"
    COMING_SOON = "coming-soon"


# ---------------------------------------------------------------------------
# Template descriptor
# ---------------------------------------------------------------------------

class TemplateDescriptor(BaseModel):
    """One scaffoldable starter project and its remote source location."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(default="", description="Catalog-wide unique identifier, e.g. 'robot-admin'")
    display_name: str = Field(..., description="Human-readable template name")
    description: str = Field(default="", description="One-line summary")
    source_location: str = Field(
        ..., description="URL of the hosted repository, e.g. 'https://github.com/owner/repo'"
    )
    features: tuple[str, ...] = Field(default=(), description="Capability tags, in display order")
    variant_tag: VariantTag = Field(default=VariantTag.FULL)
    status: TemplateStatus = Field(default=TemplateStatus.AVAILABLE)
    start_command: str = Field(
        default="bun run dev", description="Command suggested to start the generated project"
    )

    @property
    def search_text(self) -> str:
        """Lower-cased haystack used by keyword search."""
        return " ".join([self.display_name, self.description, *self.features]).lower()

    @property
    def is_available(self) -> bool:
        return self.status is TemplateStatus.AVAILABLE

    def with_key(self, key: str) -> "TemplateDescriptor":
        """Return a copy whose ``key`` is set to the lookup key."""
        if self.key == key:
            return self
        return self.model_copy(update={"key": key})


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------

class PatternNode(BaseModel):
    """An architecture pattern (monolith, monorepo, ...) holding template variants."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    templates: tuple[TemplateDescriptor, ...] = ()


class StackNode(BaseModel):
    """A technology stack (Vue, React, NestJS, ...)."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    patterns: tuple[PatternNode, ...] = ()

    def pattern(self, key: str) -> PatternNode | None:
        return next((p for p in self.patterns if p.key == key), None)


class CategoryNode(BaseModel):
    """A project category (frontend, mobile, backend, desktop)."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    stacks: tuple[StackNode, ...] = ()

    def stack(self, key: str) -> StackNode | None:
        return next((s for s in self.stacks if s.key == key), None)
