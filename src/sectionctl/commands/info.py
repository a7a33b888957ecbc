"""Command: show system metadata (edition, version, locales, upload limit)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sectionctl.commands._base import SectionCommand

if TYPE_CHECKING:
    from sectionctl.commands._context import AppContext


@click.command(
    cls=SectionCommand,
    examples="""\
  sectionctl info
  sectionctl --json info
  sectionctl info --file-kinds""",
)
@click.option("--file-kinds", is_flag=True, help="List known file kinds instead.")
@click.pass_obj
def info(app: AppContext, file_kinds: bool) -> None:
    """Show edition, version, site, locale, and upload metadata."""
    system = app.system
    app.emit(system.file_kinds() if file_kinds else system.info())
