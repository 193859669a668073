"""Command group: graph construction and summary."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cinemaweb.commands._base import CinemaGroup
from cinemaweb.services.graph import GraphService

if TYPE_CHECKING:
    from cinemaweb.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  cinemaweb graph build data.json
  cinemaweb graph build https://example.com/data.json
  cinemaweb graph stats --top 5
  cinemaweb --json graph build"""


@click.group(cls=CinemaGroup, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Build and inspect the relationship graph."""


@graph.command(
    examples="""\
  cinemaweb graph build data.json
  cinemaweb -v graph build data.json
  cinemaweb --json graph build https://example.com/data.json"""
)
@click.argument("source", required=False)
@click.pass_obj
def build(app: AppContext, source: str | None) -> None:
    """Build the node/link graph from a dataset file or URL."""
    app.emit(app.service(GraphService).build(source))


@graph.command(
    examples="""\
  cinemaweb graph stats data.json
  cinemaweb graph stats --top 5"""
)
@click.argument("source", required=False)
@click.option("--top", default=10, type=int, help="Most connected people to list.")
@click.pass_obj
def stats(app: AppContext, source: str | None, top: int) -> None:
    """Summarize roles, relations, and connectivity."""
    app.emit(app.service(GraphService).stats(source, top=top))
