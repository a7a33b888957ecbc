"""Extension layer — plugin system via pluggy.

INVARIANT: Plugin failures are warnings, never errors.
"""

from sectionctl.plugins.hookspecs import hookimpl
from sectionctl.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
