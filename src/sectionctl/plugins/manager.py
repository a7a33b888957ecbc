"""Plugin discovery, registration, and hook dispatch.

Discovery: entry_points (pip-installed) in the ``sectionctl.plugins``
group via pluggy's setuptools entrypoint loader.
"""

from __future__ import annotations

import logging
from typing import Any

import pluggy

from sectionctl.plugins.hookspecs import SectionctlHookSpec

PROJECT_NAME = "sectionctl"
ENTRY_POINT_GROUP = "sectionctl.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(SectionctlHookSpec)

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins. Returns the names of all registered plugins."""
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        logger.debug("Loaded %d entry-point plugins", count)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> list[Any]:
        """Call every implementation of *hook_name* with *payload* as kwargs.

        Raises:
            AttributeError: If *hook_name* is not a declared hook.
        """
        caller = getattr(self._pm.hook, hook_name)
        return list(caller(**payload))
