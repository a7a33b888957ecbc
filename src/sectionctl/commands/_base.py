"""Click base classes for sectionctl commands.

Commands and groups built on :class:`SectionCommand` / :class:`SectionGroup`
take an ``examples`` string. It is shown by an eager ``--examples`` flag
instead of being folded into ``--help``.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Adds the ``examples`` keyword and the ``--examples`` flag."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class SectionCommand(_ExamplesMixin, click.Command):
    """A command with an optional ``--examples`` flag."""


class SectionGroup(_ExamplesMixin, click.Group):
    """A group whose subcommands default to :class:`SectionCommand`."""

    command_class = SectionCommand


def parse_pairs(values: tuple[str, ...], option: str) -> dict[str, str]:
    """Turn repeated ``LOCALE=VALUE`` option values into a dict.

    Later values win for a repeated locale.

    Raises:
        click.BadParameter: If a value has no ``=`` or an empty locale.
    """
    pairs: dict[str, str] = {}
    for raw in values:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            msg = f"Expected LOCALE=VALUE, got {raw!r}"
            raise click.BadParameter(msg, param_hint=option)
        pairs[key.strip()] = value
    return pairs
