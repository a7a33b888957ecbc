"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.padding import Padding
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from sectionctl.output.console import create_console, get_output, style_for_type

if TYPE_CHECKING:
    from rich.console import Console

    from sectionctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        ids = [str(item["id"]) for item in items if isinstance(item, dict) and "id" in item]
        return "\n".join(ids)
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="sc.ok")
    op = Text(f"  {result.op}", style="sc.op")
    console.print(label, op)


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="sc.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="sc.id")
    elif key == "handle":
        v = Text(str(value), style="sc.handle")
    elif key == "name":
        v = Text(str(value), style="sc.name")
    else:
        v = Text(str(value))
    console.print(k, v)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block; telemetry renders as a span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            console.print(Padding(_span_tree(value), (0, 0, 0, 4)))
        else:
            console.print(f"    {key}: {value}")


def _span_label(span: dict[str, Any]) -> Text:
    duration = float(span.get("duration_ms", 0.0))
    label = Text(f"{duration:>8.2f}ms", style="yellow" if duration > 100 else "dim")
    label.append(f"  {span.get('name', '?')}")
    annotations = span.get("annotations")
    if annotations:
        label.append("  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")")
    return label


def _span_tree(span: dict[str, Any], tree: Tree | None = None) -> Tree:
    label = _span_label(span)
    node = Tree(label, guide_style="dim") if tree is None else tree.add(label)
    for child in span.get("children", []):
        _span_tree(child, node)
    return node


def _type_text(section_type: str) -> Text:
    return Text(section_type, style=style_for_type(section_type))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="sc.error")
    op = Text(f"  {result.op}", style="sc.op")
    console.print(label, op, Text(" — "), msg)

    if err is None:
        return
    # Field errors are the point of a validation failure; always show them.
    for field, messages in err.detail.get("errors", {}).items():
        for message in messages:
            console.print(Text(f"  {field}: ", style="sc.key"), message)
    if verbose:
        extra = {k: v for k, v in err.detail.items() if k != "errors"}
        if extra:
            console.print(Text("  detail:", style="dim"))
            for k, v in extra.items():
                console.print(f"    {k}: {v}")
        _render_meta(console, result)


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render save/delete/reorder results."""
    _status_line(console, result)
    for key in (
        "id",
        "section_id",
        "handle",
        "created",
        "is_homepage",
        "sort_order",
        "entry_types_deleted",
        "order",
    ):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


# ── Section renderers ─────────────────────────────────────────────────


def _render_section_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="sc.id", no_wrap=True)
    table.add_column("Name", style="sc.name")
    table.add_column("Handle", style="sc.handle")
    table.add_column("Type")
    table.add_column("Entry Types", justify="right")
    if verbose:
        table.add_column("Locales", style="dim")

    for item in items:
        name = Text(str(item.get("name", "")))
        if item.get("is_homepage"):
            name.append(" (homepage)", style="sc.home")
        row: list[Any] = [
            str(item.get("id", "")),
            name,
            str(item.get("handle", "")),
            _type_text(str(item.get("type", ""))),
            str(item.get("entry_types", 0)),
        ]
        if verbose:
            row.append(", ".join(item.get("locales", [])))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} sections")
    if verbose:
        _render_meta(console, result)


def _render_section(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    s = result.data.get("section", {})
    lines = [
        f"handle: {s.get('handle')}",
        f"type: {s.get('type')}",
        f"versioning: {'on' if s.get('enable_versioning') else 'off'}",
        f"has urls: {'yes' if s.get('has_urls') else 'no'}",
    ]
    if s.get("template"):
        lines.append(f"template: {s['template']}")
    if s.get("max_levels") is not None:
        lines.append(f"max levels: {s['max_levels']}")

    locales = s.get("locales", {})
    if locales:
        lines.append("")
        lines.append("locales:")
        for locale_id, loc in sorted(locales.items()):
            status = "enabled" if loc.get("enabled_by_default") else "disabled"
            fmt = loc.get("url_format") or "-"
            line = f"  {locale_id}: {fmt} ({status})"
            if loc.get("nested_url_format"):
                line += f", nested: {loc['nested_url_format']}"
            lines.append(line)

    title = f"{s.get('id', '?')} — {s.get('name', 'Untitled')}"
    style = style_for_type(str(s.get("type", "")))
    console.print(Panel("\n".join(lines), title=title, border_style=style or "dim", expand=False))
    if verbose:
        _render_meta(console, result)


# ── Entry type renderers ──────────────────────────────────────────────


def _render_entry_type_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right")
    table.add_column("ID", style="sc.id", no_wrap=True)
    table.add_column("Name", style="sc.name")
    table.add_column("Handle", style="sc.handle")
    table.add_column("Title Field")
    for item in items:
        table.add_row(
            str(item.get("sort_order", "")),
            str(item.get("id", "")),
            str(item.get("name", "")),
            str(item.get("handle", "")),
            "yes" if item.get("has_title_field") else "no",
        )
    console.print(table)
    console.print(
        f"\n{result.data.get('count', len(items))} entry types "
        f"in section {result.data.get('section_id')}"
    )
    if verbose:
        _render_meta(console, result)


def _render_entry_type(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    et = result.data.get("entry_type", {})
    lines = [
        f"handle: {et.get('handle')}",
        f"section: {et.get('section_id')}",
        f"sort order: {et.get('sort_order')}",
    ]
    if et.get("has_title_field"):
        lines.append(f"title label: {et.get('title_label')}")
    else:
        lines.append(f"title format: {et.get('title_format')}")
    layout = et.get("field_layout") or {}
    if layout:
        lines.append(f"field layout: {len(layout)} keys")
    title = f"{et.get('id', '?')} — {et.get('name', 'Untitled')}"
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))
    if verbose:
        _render_meta(console, result)


# ── System renderers ──────────────────────────────────────────────────


def _render_info(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="sc.key")
    table.add_column()
    rows = [
        ("edition", d.get("edition_name")),
        ("version", f"{d.get('version')} (build {d.get('build')})"),
        ("site", f"{d.get('site_name')} <{d.get('site_url')}>"),
        ("locale", d.get("locale")),
        ("locales", ", ".join(d.get("locales", []))),
        ("system on", "yes" if d.get("system_on") else "no"),
        ("max upload size", f"{d.get('max_upload_size')} bytes"),
    ]
    if d.get("has_wrong_edition"):
        rows.append(("licensed edition", d.get("licensed_edition_name")))
    for key, value in rows:
        table.add_row(key, str(value))
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "save_section": _render_mutation,
    "delete_section": _render_mutation,
    "save_entry_type": _render_mutation,
    "delete_entry_type": _render_mutation,
    "reorder_entry_types": _render_mutation,
    "list_sections": _render_section_table,
    "get_section": _render_section,
    "list_entry_types": _render_entry_type_table,
    "get_entry_type": _render_entry_type,
    "info": _render_info,
}
