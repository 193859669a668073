"""Click command classes that carry usage examples.

``cinemaweb <command> --examples`` prints the example block and exits;
``--help`` only mentions that examples exist.
"""

from __future__ import annotations

from typing import Any

import click


def _attach_examples(command: click.Command, examples: str) -> None:
    """Give *command* an eager ``--examples`` flag that prints *examples*."""

    def print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    command.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=print_examples,
            help="Show usage examples.",
        )
    )


class CinemaCommand(click.Command):
    """A command accepting ``examples=`` in its decorator."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _attach_examples(self, examples)


class CinemaGroup(click.Group):
    """A group accepting ``examples=``; its subcommands default to :class:`CinemaCommand`."""

    command_class = CinemaCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _attach_examples(self, examples)
