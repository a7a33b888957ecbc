"""Rich Console factory and theme for sectionctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SECTION_THEME = Theme(
    {
        "sc.ok": "bold green",
        "sc.error": "bold red",
        "sc.warning": "bold yellow",
        "sc.op": "bold cyan",
        "sc.key": "dim",
        "sc.id": "bold blue",
        "sc.handle": "magenta",
        "sc.name": "bold",
        "sc.home": "bold green",
        "sc.type.single": "green",
        "sc.type.channel": "blue",
        "sc.type.structure": "yellow",
    }
)

_TYPE_STYLES: dict[str, str] = {
    "single": "sc.type.single",
    "channel": "sc.type.channel",
    "structure": "sc.type.structure",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SECTION_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_type(section_type: str) -> str:
    """Return the Rich style name for a section type."""
    return _TYPE_STYLES.get(section_type, "")
