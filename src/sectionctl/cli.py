"""sectionctl entry point: global options, settings, and the command tree."""

from __future__ import annotations

from pathlib import Path

import click

from sectionctl import __version__
from sectionctl.commands import register_commands
from sectionctl.commands._context import AppContext
from sectionctl.config.logging import bind_log_context
from sectionctl.config.settings import SectionSettings


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="sectionctl")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only IDs.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and per-stage timings.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Use this config file instead of searching for sectionctl.toml.",
)
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project directory (default: the config file's directory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    root: Path | None,
) -> None:
    """sectionctl — manage CMS sections and entry types."""
    settings = SectionSettings.from_cli(
        config_path=config_path,
        root=root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    bind_log_context(command=ctx.invoked_subcommand)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
