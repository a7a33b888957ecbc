"""Section, SectionLocale, and EntryType models.

Models are frozen candidates: the service layer validates them and hands
back persisted copies (``model_copy(update={"id": ...})``) rather than
mutating them in place.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from sectionctl.domain.types import HOMEPAGE_URI, SectionType


class SectionLocale(BaseModel):
    """Per-locale settings of a section."""

    model_config = {"frozen": True}

    locale: str
    enabled_by_default: bool = True
    url_format: str | None = None
    nested_url_format: str | None = None

    @property
    def is_homepage(self) -> bool:
        return self.url_format == HOMEPAGE_URI


class Section(BaseModel):
    """A top-level content grouping with per-locale URL behavior.

    Attributes:
        id: Database identifier, ``None`` until persisted.
        name: Display name, unique among sections.
        handle: Machine name, unique among sections.
        type: Single, channel, or structure.
        enable_versioning: Whether entries keep revision history.
        has_urls: Whether entries get their own URLs.
        template: Template rendered for entry URLs (required with URLs).
        max_levels: Depth limit, only meaningful for structures.
        locales: Locale id -> :class:`SectionLocale`.
    """

    model_config = {"frozen": True}

    id: int | None = None
    name: str = ""
    handle: str = ""
    type: SectionType = SectionType.CHANNEL
    enable_versioning: bool = True
    has_urls: bool = True
    template: str | None = None
    max_levels: int | None = None
    locales: dict[str, SectionLocale] = Field(default_factory=dict)

    @property
    def is_homepage(self) -> bool:
        """True when any locale row carries the homepage sentinel."""
        return any(loc.is_homepage for loc in self.locales.values())


class EntryType(BaseModel):
    """A named, ordered content shape belonging to one section."""

    model_config = {"frozen": True}

    id: int | None = None
    section_id: int
    name: str = ""
    handle: str = ""
    has_title_field: bool = True
    title_label: str | None = "Title"
    title_format: str | None = None
    sort_order: int | None = None
    field_layout: dict[str, Any] = Field(default_factory=dict)
