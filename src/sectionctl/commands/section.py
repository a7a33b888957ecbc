"""Command group: list, show, save, and delete sections."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sectionctl.commands._base import SectionGroup, parse_pairs
from sectionctl.domain.types import SectionType

if TYPE_CHECKING:
    from sectionctl.commands._context import AppContext


@click.group(
    cls=SectionGroup,
    examples="""\
  sectionctl section list
  sectionctl section show 1
  sectionctl section save --name Blog --handle blog --template blog/_entry \\
      --url-format "en=blog/{slug}"
  sectionctl section save --name Home --handle home --type single \\
      --template index --homepage
  sectionctl section delete 3""",
)
def section() -> None:
    """Manage sections."""


@section.command("list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List all sections in creation order."""
    app.emit(app.sections.list_sections())


@section.command(
    "show",
    examples="""\
  sectionctl section show 1
  sectionctl --json section show 1""",
)
@click.argument("section_id", type=int)
@click.pass_obj
def show(app: AppContext, section_id: int) -> None:
    """Show one section with its locale settings."""
    app.emit(app.sections.get_section(section_id))


@section.command(
    "save",
    examples="""\
  sectionctl section save --name News --handle news --template news/_entry \\
      --url-format "en=news/{slug}"
  sectionctl section save --id 2 --name News --handle news --no-urls
  sectionctl section save --name Docs --handle docs --type structure --max-levels 3 \\
      --template docs/_entry --url-format "en=docs/{slug}" \\
      --nested-url-format "en={parent.uri}/{slug}"
  sectionctl section save --name Blog --handle blog --template blog/_entry \\
      --locale en --locale de --url-format "en=blog/{slug}" \\
      --url-format "de=blog/{slug}" --disabled-locale de""",
)
@click.option("--id", "section_id", type=int, default=None, help="Existing section to replace.")
@click.option("--name", required=True, help="Display name.")
@click.option("--handle", required=True, help="Machine name (letters, digits, underscores).")
@click.option(
    "--type",
    "section_type",
    type=click.Choice([t.value for t in SectionType]),
    default=None,
    help="Section type (default from [sections] default_type).",
)
@click.option("--no-versioning", is_flag=True, help="Disable entry versioning.")
@click.option("--no-urls", is_flag=True, help="Entries in this section have no URLs.")
@click.option("--template", default=None, help="Entry template path.")
@click.option("--max-levels", type=int, default=None, help="Max depth (structures only).")
@click.option("--locale", "locale_ids", multiple=True, help="Enabled locale (repeatable).")
@click.option("--url-format", multiple=True, help="LOCALE=FORMAT (repeatable).")
@click.option("--nested-url-format", multiple=True, help="LOCALE=FORMAT (repeatable).")
@click.option(
    "--disabled-locale",
    multiple=True,
    help="Locale whose new entries start disabled (repeatable).",
)
@click.option("--homepage", is_flag=True, help="Serve this single section at the site root.")
@click.pass_obj
def save(
    app: AppContext,
    section_id: int | None,
    name: str,
    handle: str,
    section_type: str | None,
    no_versioning: bool,
    no_urls: bool,
    template: str | None,
    max_levels: int | None,
    locale_ids: tuple[str, ...],
    url_format: tuple[str, ...],
    nested_url_format: tuple[str, ...],
    disabled_locale: tuple[str, ...],
    homepage: bool,
) -> None:
    """Create a section, or replace one with --id."""
    from sectionctl.domain.models import Section

    service = app.sections
    resolved_type = (
        SectionType(section_type) if section_type else app.settings.sections.default_type
    )

    locales = service.resolver.build_locales(
        resolved_type,
        locale_ids=locale_ids or app.store.locales.locales,
        url_formats=parse_pairs(url_format, "--url-format"),
        nested_url_formats=parse_pairs(nested_url_format, "--nested-url-format"),
        disabled_locales=disabled_locale,
        homepage=homepage,
    )
    if homepage and resolved_type != SectionType.SINGLE:
        click.echo("WARNING: --homepage only applies to single sections; ignored.", err=True)

    candidate = Section(
        id=section_id,
        name=name,
        handle=handle,
        type=resolved_type,
        enable_versioning=not no_versioning,
        has_urls=not no_urls,
        template=template,
        max_levels=max_levels,
        locales=locales,
    )
    app.emit(service.save_section(candidate))


@section.command("delete")
@click.argument("section_id", type=int)
@click.pass_obj
def delete(app: AppContext, section_id: int) -> None:
    """Delete a section and all of its entry types."""
    app.emit(app.sections.delete_section(section_id))
