"""Command: run the force layout headless."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from cinemaweb.commands._base import CinemaCommand
from cinemaweb.services.layout import LayoutService

if TYPE_CHECKING:
    from cinemaweb.commands._context import AppContext


@click.command(
    cls=CinemaCommand,
    examples="""\
  cinemaweb layout data.json
  cinemaweb layout data.json --width 1280 --height 720
  cinemaweb layout --seed 7 --out positions.json
  cinemaweb --json layout --max-ticks 200""",
)
@click.argument("source", required=False)
@click.option("--width", type=float, default=None, help="Viewport width.")
@click.option("--height", type=float, default=None, help="Viewport height.")
@click.option("--max-ticks", type=click.IntRange(min=1), default=None, help="Tick cap.")
@click.option("--seed", type=int, default=None, help="Seed for reproducible layouts.")
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the final frame as JSON.",
)
@click.pass_obj
def layout(
    app: AppContext,
    source: str | None,
    width: float | None,
    height: float | None,
    max_ticks: int | None,
    seed: int | None,
    out: Path | None,
) -> None:
    """Lay out the graph until it settles and print node positions."""
    app.emit(
        app.service(LayoutService).run(
            source,
            width=width,
            height=height,
            max_ticks=max_ticks,
            seed=seed,
            out=out,
        )
    )
