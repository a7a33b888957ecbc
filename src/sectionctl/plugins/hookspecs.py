"""Pluggy hook specifications for sectionctl lifecycle events.

Hooks fire synchronously after the owning transaction commits, so a
plugin always observes committed state.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("sectionctl")
hookimpl = pluggy.HookimplMarker("sectionctl")


class SectionctlHookSpec:
    """Hook specifications for the sectionctl plugin system."""

    @hookspec
    def post_save_section(self, section_id: int, handle: str, created: bool) -> None:
        """Called after a section is created or updated."""

    @hookspec
    def post_delete_section(
        self,
        section_id: int,
        handle: str,
        entry_type_ids: list[int],
    ) -> None:
        """Called after a section and its entry types are deleted."""

    @hookspec
    def post_save_entry_type(
        self,
        entry_type_id: int,
        section_id: int,
        handle: str,
        created: bool,
    ) -> None:
        """Called after an entry type is created or updated."""

    @hookspec
    def post_delete_entry_type(self, entry_type_id: int, section_id: int) -> None:
        """Called after an entry type is deleted."""

    @hookspec
    def post_reorder_entry_types(self, section_id: int, entry_type_ids: list[int]) -> None:
        """Called after a section's entry types are reordered."""
