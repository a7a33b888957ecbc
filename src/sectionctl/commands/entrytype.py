"""Command group: list, show, save, delete, and reorder entry types."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from sectionctl.commands._base import SectionGroup

if TYPE_CHECKING:
    from sectionctl.commands._context import AppContext


def _parse_field_layout(raw: str | None) -> dict[str, Any]:
    if raw is None:
        return {}
    try:
        layout = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON: {exc}"
        raise click.BadParameter(msg, param_hint="--field-layout") from exc
    if not isinstance(layout, dict):
        msg = "Field layout must be a JSON object"
        raise click.BadParameter(msg, param_hint="--field-layout")
    return layout


@click.group(
    cls=SectionGroup,
    examples="""\
  sectionctl entrytype list 1
  sectionctl entrytype save --section-id 1 --name Article --handle article
  sectionctl entrytype save --section-id 1 --name Link --handle link \\
      --no-title-field --title-format "{url}"
  sectionctl entrytype reorder 1 3 1 2
  sectionctl entrytype delete 4""",
)
def entrytype() -> None:
    """Manage entry types."""


@entrytype.command("list")
@click.argument("section_id", type=int)
@click.pass_obj
def list_cmd(app: AppContext, section_id: int) -> None:
    """List a section's entry types by rank."""
    app.emit(app.sections.list_entry_types(section_id))


@entrytype.command("show")
@click.argument("entry_type_id", type=int)
@click.option(
    "--section-id",
    type=int,
    default=None,
    help="Fail unless the entry type belongs to this section.",
)
@click.pass_obj
def show(app: AppContext, entry_type_id: int, section_id: int | None) -> None:
    """Show one entry type."""
    app.emit(app.sections.get_entry_type(entry_type_id, section_id=section_id))


@entrytype.command(
    "save",
    examples="""\
  sectionctl entrytype save --section-id 1 --name Article --handle article
  sectionctl entrytype save --id 4 --section-id 1 --name Post --handle post \\
      --title-label Headline
  sectionctl entrytype save --section-id 1 --name Quote --handle quote \\
      --field-layout '{"tabs": [{"name": "Content", "fields": [3, 5]}]}'""",
)
@click.option("--id", "entry_type_id", type=int, default=None, help="Existing entry type.")
@click.option("--section-id", type=int, required=True, help="Owning section.")
@click.option("--name", required=True, help="Display name.")
@click.option("--handle", required=True, help="Machine name (letters, digits, underscores).")
@click.option(
    "--title-field/--no-title-field",
    default=True,
    help="Show a title field, or generate titles from --title-format.",
)
@click.option("--title-label", default="Title", help="Label of the title field.")
@click.option("--title-format", default=None, help="Template for auto-generated titles.")
@click.option("--field-layout", default=None, help="Field layout as a JSON object.")
@click.pass_obj
def save(
    app: AppContext,
    entry_type_id: int | None,
    section_id: int,
    name: str,
    handle: str,
    title_field: bool,
    title_label: str,
    title_format: str | None,
    field_layout: str | None,
) -> None:
    """Create an entry type, or replace one with --id."""
    from sectionctl.domain.models import EntryType

    candidate = EntryType(
        id=entry_type_id,
        section_id=section_id,
        name=name,
        handle=handle,
        has_title_field=title_field,
        title_label=title_label,
        title_format=title_format,
        field_layout=_parse_field_layout(field_layout),
    )
    app.emit(app.sections.save_entry_type(candidate))


@entrytype.command("delete")
@click.argument("entry_type_id", type=int)
@click.pass_obj
def delete(app: AppContext, entry_type_id: int) -> None:
    """Delete an entry type."""
    app.emit(app.sections.delete_entry_type(entry_type_id))


@entrytype.command(
    "reorder",
    examples="""\
  sectionctl entrytype reorder 1 3 1 2""",
)
@click.argument("section_id", type=int)
@click.argument("entry_type_ids", type=int, nargs=-1, required=True)
@click.pass_obj
def reorder(app: AppContext, section_id: int, entry_type_ids: tuple[int, ...]) -> None:
    """Rank every entry type of SECTION_ID in the order given."""
    app.emit(app.sections.reorder_entry_types(section_id, list(entry_type_ids)))
