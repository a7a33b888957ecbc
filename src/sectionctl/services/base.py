"""BaseService — shared foundation for sectionctl services.

Every service receives a :class:`Store` at construction time. Services
own their transaction boundaries via ``self._store.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sectionctl.infrastructure.store import Store

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class SectionService(BaseService):
            def save_section(self, section: Section) -> ServiceResult:
                with self._store.transaction(lock=section.id) as txn:
                    ...
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call a plugin hook after commit. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        pm = self._store.plugin_manager
        if pm is None:
            return
        try:
            pm.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
