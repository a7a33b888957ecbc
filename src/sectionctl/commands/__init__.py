"""Subcommand modules for sectionctl.

Provides register_commands() which uses deferred imports to keep
``sectionctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the command groups and standalone commands on the root group."""
    from sectionctl.commands.entrytype import entrytype
    from sectionctl.commands.info import info
    from sectionctl.commands.section import section

    cli.add_command(section)
    cli.add_command(entrytype)
    cli.add_command(info)
