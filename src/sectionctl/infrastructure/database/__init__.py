"""SQLite database engine and schema via SQLAlchemy Core."""

from sectionctl.infrastructure.database.engine import create_db_engine, init_database
from sectionctl.infrastructure.database.schema import (
    entry_types,
    metadata,
    section_locales,
    sections,
)

__all__ = [
    "create_db_engine",
    "entry_types",
    "init_database",
    "metadata",
    "section_locales",
    "sections",
]
