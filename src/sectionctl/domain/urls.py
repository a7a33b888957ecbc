"""LocaleFormatResolver — per-locale URL formats and homepage handling.

The homepage section does not store real URL formats: every one of its
locale rows carries :data:`HOMEPAGE_URI` instead. Resolution is pure and
never fails; an unknown locale resolves to the empty string.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from sectionctl.domain.locales import LocaleRegistry
from sectionctl.domain.models import Section, SectionLocale
from sectionctl.domain.types import HOMEPAGE_URI, SectionType


class LocaleFormatResolver:
    """Resolves and assembles per-locale URL formats for sections."""

    def __init__(self, locales: LocaleRegistry) -> None:
        self._locales = locales

    @property
    def locales(self) -> LocaleRegistry:
        return self._locales

    def resolve_url_format(
        self,
        section: Section,
        locale: str,
        *,
        is_homepage: bool = False,
    ) -> str:
        """Return the URL format *section* uses in *locale*."""
        if is_homepage:
            return HOMEPAGE_URI
        if not section.has_urls:
            return ""
        row = section.locales.get(locale)
        if row is None:
            return ""
        return row.url_format or ""

    def resolve_nested_url_format(
        self,
        section: Section,
        locale: str,
        *,
        is_homepage: bool = False,
    ) -> str | None:
        """Return the nested-entry URL format, or None where it does not apply."""
        if is_homepage or not section.has_urls or section.type != SectionType.STRUCTURE:
            return None
        row = section.locales.get(locale)
        return row.nested_url_format if row is not None else None

    def build_locales(
        self,
        section_type: SectionType,
        *,
        locale_ids: Iterable[str] = (),
        url_formats: Mapping[str, str] | None = None,
        nested_url_formats: Mapping[str, str] | None = None,
        disabled_locales: Iterable[str] = (),
        homepage: bool = False,
    ) -> dict[str, SectionLocale]:
        """Assemble the locale rows of a section candidate from form-style input.

        When the site is not localized only the primary locale is used,
        whatever *locale_ids* says. The homepage flag only takes effect on
        single sections; it forces the sentinel and drops nested formats.
        """
        if self._locales.is_localized:
            ids = list(dict.fromkeys(locale_ids))
        else:
            ids = [self._locales.primary]

        url_formats = url_formats or {}
        nested_url_formats = nested_url_formats or {}
        disabled = set(disabled_locales)
        is_homepage = homepage and section_type == SectionType.SINGLE

        rows: dict[str, SectionLocale] = {}
        for locale_id in ids:
            if is_homepage:
                url_format: str | None = HOMEPAGE_URI
                nested: str | None = None
            else:
                url_format = url_formats.get(locale_id)
                nested = nested_url_formats.get(locale_id)
            rows[locale_id] = SectionLocale(
                locale=locale_id,
                enabled_by_default=locale_id not in disabled,
                url_format=url_format,
                nested_url_format=nested,
            )
        return rows
