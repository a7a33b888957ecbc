"""SQLAlchemy Core table definitions for the sectionctl database.

Sections own their locale rows and entry types; both child tables
declare ``ON DELETE CASCADE`` so a section delete removes them in the
same statement.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

sections = Table(
    "sections",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("handle", Text, nullable=False),
    Column("type", Text, nullable=False),
    Column("enable_versioning", Integer, nullable=False, default=1, server_default="1"),
    Column("has_urls", Integer, nullable=False, default=1, server_default="1"),
    Column("template", Text),
    Column("max_levels", Integer),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
    UniqueConstraint("name", name="uq_sections_name"),
    UniqueConstraint("handle", name="uq_sections_handle"),
)

section_locales = Table(
    "section_locales",
    metadata,
    Column(
        "section_id",
        Integer,
        ForeignKey("sections.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("locale", Text, nullable=False),
    Column("enabled_by_default", Integer, nullable=False, default=1, server_default="1"),
    Column("url_format", Text),
    Column("nested_url_format", Text),
    UniqueConstraint("section_id", "locale", name="uq_section_locales_locale"),
)

entry_types = Table(
    "entry_types",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "section_id",
        Integer,
        ForeignKey("sections.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", Text, nullable=False),
    Column("handle", Text, nullable=False),
    Column("has_title_field", Integer, nullable=False, default=1, server_default="1"),
    Column("title_label", Text),
    Column("title_format", Text),
    Column("sort_order", Integer, nullable=False),
    Column("field_layout", Text),  # JSON object, opaque
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
    UniqueConstraint("section_id", "name", name="uq_entry_types_name"),
    UniqueConstraint("section_id", "handle", name="uq_entry_types_handle"),
)

Index("ix_section_locales_section", section_locales.c.section_id)
Index("ix_entry_types_section_order", entry_types.c.section_id, entry_types.c.sort_order)
