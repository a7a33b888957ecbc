"""Database engine setup for SQLite with WAL mode.

The DB is stored at {root}/.sectionctl/sectionctl.db. WAL mode lets
readers proceed while a writer holds the lock, and foreign keys must be
switched on per connection for the cascading deletes to fire.

SQLAlchemy Core (not ORM) is used: the store maps rows to pydantic
models itself and has no use for an identity map.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from sectionctl.infrastructure.database.schema import metadata

DATA_DIR = ".sectionctl"
DB_FILENAME = "sectionctl.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(root: Path) -> Engine:
    """Initialize the database at ``{root}/.sectionctl/sectionctl.db``.

    Creates the data directory and all tables from :data:`schema.metadata`.
    Idempotent — safe to call on an existing project.

    Returns the engine ready for use.
    """
    data_dir = root / DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(data_dir / DB_FILENAME)
    metadata.create_all(engine)
    return engine
