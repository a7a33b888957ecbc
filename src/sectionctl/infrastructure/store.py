"""Store — repository access with transaction and write-lock coordination.

The Store is the single dependency injected into every service. It owns
the database engine and the per-section write locks:

- **DB**: Native SQLAlchemy ``engine.begin()`` with auto-commit/rollback,
  so a section row, its locale rows, and its entry types commit together
  or not at all.
- **Locks**: Writes touching one section are serialized on a keyed
  ``RLock`` so read-then-write sequences (reorder, cascade delete) see a
  stable entry type set. Writes that can create a homepage also hold
  the store-wide :data:`HOMEPAGE` key. Reads never take a lock; SQLite's WAL mode
  keeps them from observing uncommitted writes.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Hashable, Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sectionctl.infrastructure.database.engine import init_database
from sectionctl.infrastructure.repositories.sections import SectionRepository

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from sectionctl.config.settings import SectionSettings
    from sectionctl.domain.locales import LocaleRegistry

logger = logging.getLogger(__name__)

# Lock key shared by every transaction that creates a new section.
NEW_SECTION = "__new_section__"

# Store-wide lock key held by every write that can make a section the homepage.
HOMEPAGE = "__homepage__"


@dataclass
class StoreTransaction:
    """Active transaction context exposing the connection and repository."""

    conn: Connection

    @property
    def repo(self) -> SectionRepository:
        return SectionRepository(self.conn)


class Store:
    """Repository encapsulating database access and write serialization.

    Constructed once at CLI startup from :class:`SectionSettings` and
    stored on the Click context. Services receive the Store via their
    :class:`BaseService` constructor.
    """

    def __init__(self, settings: SectionSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(self.root)
        self._locale_registry: LocaleRegistry | None = None
        self._plugin_manager: Any | None = None
        self._locks: dict[Hashable, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    @property
    def root(self) -> Path:
        """The project root directory."""
        return self._settings.root

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> SectionSettings:
        """The resolved settings for this store."""
        return self._settings

    @property
    def locales(self) -> LocaleRegistry:
        """Site locale registry built from ``[site]`` config."""
        if self._locale_registry is None:
            self._locale_registry = self._settings.locale_registry()
        return self._locale_registry

    @property
    def plugin_manager(self) -> Any | None:
        """The plugin manager (None if not initialized)."""
        return self._plugin_manager

    def init_plugins(self) -> None:
        """Discover entry-point plugins and attach a plugin manager."""
        from sectionctl.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover_and_load()
        self._plugin_manager = pm

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Locking and transactions
    # ------------------------------------------------------------------

    def _lock_for(self, key: Hashable) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def section_lock(self, key: Hashable) -> Iterator[None]:
        """Serialize writers on *key* (a section id or :data:`NEW_SECTION`)."""
        lock = self._lock_for(key)
        with lock:
            yield

    @contextmanager
    def transaction(
        self, *, lock: Hashable | None = None, guard: Hashable | None = None
    ) -> Iterator[StoreTransaction]:
        """Atomic unit of work, optionally under a section write lock.

        *guard* is a store-wide key (such as :data:`HOMEPAGE`) and is always
        acquired before *lock*, so writers holding both cannot deadlock.

        Commits when the block exits normally and rolls back on any
        exception, so a failed validation or a constraint violation
        leaves the store unchanged.

        Usage::

            with store.transaction(lock=section_id) as txn:
                txn.repo.update_section(section, now)
        """
        with ExitStack() as stack:
            for key in (guard, lock):
                if key is not None:
                    stack.enter_context(self.section_lock(key))
            conn = stack.enter_context(self._engine.begin())
            yield StoreTransaction(conn=conn)

    @contextmanager
    def read(self) -> Iterator[SectionRepository]:
        """Read-only repository on a short-lived connection."""
        with self._engine.connect() as conn:
            yield SectionRepository(conn)
