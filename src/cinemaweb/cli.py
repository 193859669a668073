"""The ``cinemaweb`` command: global options, then graph/layout subcommands."""

from __future__ import annotations

import click

from cinemaweb import __version__
from cinemaweb.commands import register_commands
from cinemaweb.commands._base import CinemaGroup
from cinemaweb.commands._context import AppContext
from cinemaweb.config.settings import CinemaSettings

_CLI_EXAMPLES = """\
  cinemaweb graph build data.json
  cinemaweb --json layout https://example.com/data.json
  cinemaweb -c ./cinemaweb.toml graph stats"""


@click.group(cls=CinemaGroup, examples=_CLI_EXAMPLES, invoke_without_command=True)
@click.version_option(__version__, prog_name="cinemaweb")
@click.option("-c", "--config", "config_path", help="Use this cinemaweb.toml instead of searching.")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids only.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and extra detail.")
@click.option("--log-json", is_flag=True, help="Emit logs to stderr as JSON lines.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: bool) -> None:
    """cinemaweb: relationship graph of works, cast, and crew."""
    ctx.obj = AppContext(CinemaSettings.from_cli(config_path=config_path, **flags))
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
