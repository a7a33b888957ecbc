"""Connection-scoped repository for sections, locale rows, and entry types.

The caller owns the transaction: pass a ``Connection`` obtained from
``engine.begin()`` (usually via ``Store.transaction()``) so every write
here participates in the same atomic unit as the surrounding work.
"""

from __future__ import annotations

import json
from collections import defaultdict
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select, update

from sectionctl.domain.models import EntryType, Section, SectionLocale
from sectionctl.domain.types import SectionType
from sectionctl.infrastructure.database.schema import entry_types, section_locales, sections

if TYPE_CHECKING:
    from sqlalchemy import Connection, RowMapping


def _section_values(section: Section) -> dict[str, Any]:
    return {
        "name": section.name,
        "handle": section.handle,
        "type": section.type.value,
        "enable_versioning": int(section.enable_versioning),
        "has_urls": int(section.has_urls),
        "template": section.template,
        "max_levels": section.max_levels,
    }


def _entry_type_values(entry_type: EntryType) -> dict[str, Any]:
    return {
        "section_id": entry_type.section_id,
        "name": entry_type.name,
        "handle": entry_type.handle,
        "has_title_field": int(entry_type.has_title_field),
        "title_label": entry_type.title_label,
        "title_format": entry_type.title_format,
        "field_layout": json.dumps(entry_type.field_layout, sort_keys=True),
    }


def _to_section(row: RowMapping, locale_rows: Sequence[RowMapping]) -> Section:
    return Section(
        id=row["id"],
        name=row["name"],
        handle=row["handle"],
        type=SectionType(row["type"]),
        enable_versioning=bool(row["enable_versioning"]),
        has_urls=bool(row["has_urls"]),
        template=row["template"],
        max_levels=row["max_levels"],
        locales={
            loc["locale"]: SectionLocale(
                locale=loc["locale"],
                enabled_by_default=bool(loc["enabled_by_default"]),
                url_format=loc["url_format"],
                nested_url_format=loc["nested_url_format"],
            )
            for loc in locale_rows
        },
    )


def _to_entry_type(row: RowMapping) -> EntryType:
    raw_layout = row["field_layout"]
    return EntryType(
        id=row["id"],
        section_id=row["section_id"],
        name=row["name"],
        handle=row["handle"],
        has_title_field=bool(row["has_title_field"]),
        title_label=row["title_label"],
        title_format=row["title_format"],
        sort_order=row["sort_order"],
        field_layout=json.loads(raw_layout) if raw_layout else {},
    )


class SectionRepository:
    """Encapsulates SQL for section and entry type reads and writes."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def get_section(self, section_id: int) -> Section | None:
        """Fetch one section with its locale rows."""
        section_row = (
            self._conn.execute(select(sections).where(sections.c.id == section_id))
            .mappings()
            .first()
        )
        if section_row is None:
            return None
        locale_rows = (
            self._conn.execute(
                select(section_locales)
                .where(section_locales.c.section_id == section_id)
                .order_by(section_locales.c.locale)
            )
            .mappings()
            .all()
        )
        return _to_section(section_row, locale_rows)

    def list_sections(self) -> list[Section]:
        """All sections in creation order."""
        section_rows = (
            self._conn.execute(select(sections).order_by(sections.c.id)).mappings().all()
        )
        by_section: defaultdict[int, list[RowMapping]] = defaultdict(list)
        for loc in self._conn.execute(
            select(section_locales).order_by(section_locales.c.locale)
        ).mappings():
            by_section[loc["section_id"]].append(loc)
        return [_to_section(row, by_section[row["id"]]) for row in section_rows]

    def section_exists(self, section_id: int) -> bool:
        row = self._conn.execute(select(sections.c.id).where(sections.c.id == section_id)).first()
        return row is not None

    def insert_section(self, section: Section, now: str) -> int:
        """Insert a section and its locale rows. Returns the new id."""
        result = self._conn.execute(
            insert(sections).values(**_section_values(section), created=now, modified=now)
        )
        section_id = int(result.inserted_primary_key[0])
        self._insert_locales(section_id, section)
        return section_id

    def update_section(self, section: Section, now: str) -> None:
        """Overwrite a stored section and replace its locale rows wholesale."""
        assert section.id is not None
        self._conn.execute(
            update(sections)
            .where(sections.c.id == section.id)
            .values(**_section_values(section), modified=now)
        )
        self._conn.execute(
            delete(section_locales).where(section_locales.c.section_id == section.id)
        )
        self._insert_locales(section.id, section)

    def delete_section(self, section_id: int) -> None:
        """Delete a section; locale rows and entry types cascade."""
        self._conn.execute(delete(sections).where(sections.c.id == section_id))

    def _insert_locales(self, section_id: int, section: Section) -> None:
        for loc in section.locales.values():
            self._conn.execute(
                insert(section_locales).values(
                    section_id=section_id,
                    locale=loc.locale,
                    enabled_by_default=int(loc.enabled_by_default),
                    url_format=loc.url_format,
                    nested_url_format=loc.nested_url_format,
                )
            )

    # ------------------------------------------------------------------
    # Entry types
    # ------------------------------------------------------------------

    def get_entry_type(self, entry_type_id: int) -> EntryType | None:
        row = (
            self._conn.execute(select(entry_types).where(entry_types.c.id == entry_type_id))
            .mappings()
            .first()
        )
        return _to_entry_type(row) if row is not None else None

    def list_entry_types(self, section_id: int) -> list[EntryType]:
        """Entry types of a section, by rank."""
        rows = (
            self._conn.execute(
                select(entry_types)
                .where(entry_types.c.section_id == section_id)
                .order_by(entry_types.c.sort_order, entry_types.c.id)
            )
            .mappings()
            .all()
        )
        return [_to_entry_type(row) for row in rows]

    def count_entry_types(self, section_id: int) -> int:
        stmt = select(func.count(entry_types.c.id)).where(entry_types.c.section_id == section_id)
        return int(self._conn.execute(stmt).scalar_one() or 0)

    def next_sort_order(self, section_id: int) -> int:
        stmt = select(func.max(entry_types.c.sort_order)).where(
            entry_types.c.section_id == section_id
        )
        current = self._conn.execute(stmt).scalar_one()
        return int(current or 0) + 1

    def insert_entry_type(self, entry_type: EntryType, sort_order: int, now: str) -> int:
        result = self._conn.execute(
            insert(entry_types).values(
                **_entry_type_values(entry_type),
                sort_order=sort_order,
                created=now,
                modified=now,
            )
        )
        return int(result.inserted_primary_key[0])

    def update_entry_type(self, entry_type: EntryType, now: str) -> None:
        """Overwrite an entry type, keeping its current rank."""
        assert entry_type.id is not None
        self._conn.execute(
            update(entry_types)
            .where(entry_types.c.id == entry_type.id)
            .values(**_entry_type_values(entry_type), modified=now)
        )

    def delete_entry_type(self, entry_type_id: int) -> None:
        self._conn.execute(delete(entry_types).where(entry_types.c.id == entry_type_id))

    def set_sort_orders(self, ordered_ids: Sequence[int]) -> None:
        """Rank *ordered_ids* as ``1..n`` in the given sequence."""
        for rank, entry_type_id in enumerate(ordered_ids, start=1):
            self._conn.execute(
                update(entry_types)
                .where(entry_types.c.id == entry_type_id)
                .values(sort_order=rank)
            )

    def compact_sort_orders(self, section_id: int) -> None:
        """Close gaps left by a delete so ranks stay ``1..n``."""
        self.set_sort_orders([et.id for et in self.list_entry_types(section_id) if et.id])
