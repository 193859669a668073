"""CLI subcommands. Each lives in its own module and is attached by :func:`register_commands`."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach ``graph`` (build, stats) and ``layout`` to the root group."""
    from cinemaweb.commands.graph import graph
    from cinemaweb.commands.layout import layout

    for command in (graph, layout):
        cli.add_command(command)
