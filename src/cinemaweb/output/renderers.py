"""Human-readable rendering of ServiceResults with Rich.

:func:`render_result` picks a renderer by ``result.op``; ops without a
dedicated renderer print their data as ``key: value`` lines. Output is
captured from an off-screen console and returned as text.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from cinemaweb.output.console import create_console, get_output, style_for_role

if TYPE_CHECKING:
    from rich.console import Console

    from cinemaweb.services.result import ServiceResult

type Renderer = Callable[..., None]


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    console = create_console()
    if result.ok:
        _OP_RENDERERS.get(result.op, _render_generic)(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One id per line for list-like results, else a one-line status."""
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {message}"
    rows = result.data.get("items") or result.data.get("nodes")
    if isinstance(rows, list) and rows:
        return "\n".join(str(row["id"]) for row in rows if isinstance(row, dict) and "id" in row)
    return f"OK: {result.op}"


# ── Building blocks ───────────────────────────────────────────────────


def _header(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "cw.ok"), (f"  {result.op}", "cw.op")))


def _fields(console: Console, data: dict[str, Any], keys: Iterable[str]) -> None:
    """Print ``key: value`` lines for the *keys* present in *data*."""
    for key in keys:
        if key not in data:
            continue
        value = data[key]
        if isinstance(value, (dict, list)):
            shown = Text(json.dumps(value, separators=(",", ":")))
        else:
            shown = Text(str(value), style="cw.id" if key == "id" or key.endswith("_id") else "")
        console.print(Text.assemble((f"  {key}: ", "cw.key"), shown))


def _role_text(role: str) -> Text:
    return Text(role, style=style_for_role(role))


def _node_table(items: list[dict[str, Any]], *, extra_columns: list[str] | None = None) -> Table:
    """Id / name / role table, plus right-aligned *extra_columns* (floats to 2 places)."""
    extra = extra_columns or []
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="cw.id", no_wrap=True)
    table.add_column("Name", style="cw.name")
    table.add_column("Role")
    for col in extra:
        table.add_column(col.replace("_", " ").title(), justify="right")

    for item in items:
        cells: list[Any] = [
            str(item.get("id", "")),
            str(item.get("name", "")),
            _role_text(str(item.get("role", ""))),
        ]
        for col in extra:
            value = item.get(col, "")
            cells.append(f"{value:.2f}" if isinstance(value, float) else str(value))
        table.add_row(*cells)
    return table


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    console.print(
        Text.assemble(
            ("ERROR", "cw.error"),
            (f"  {result.op}", "cw.op"),
            " - ",
            err.message if err else "Unknown error",
        )
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(f"    {key}: {value}")


# ── Per-op renderers ──────────────────────────────────────────────────


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Counts and the node table; ``-v`` adds the link table."""
    d = result.data
    _header(console, result)
    counts = {"nodes": d.get("node_count", 0), "links": d.get("link_count", 0)}
    _fields(console, counts, counts)

    if d.get("nodes"):
        console.print()
        console.print(_node_table(d["nodes"]))

    if verbose and d.get("links"):
        console.print()
        table = Table(show_header=True, pad_edge=False)
        table.add_column("Source", style="cw.id")
        table.add_column("Target", style="cw.id")
        table.add_column("Relation")
        for link in d["links"]:
            table.add_row(link["source"], link["target"], link["relation"])
        console.print(table)


def _count_table(title: str, label: str, counts: dict[str, int], *, by_role: bool = False) -> Table:
    table = Table(show_header=True, pad_edge=False, title=title)
    table.add_column(label)
    table.add_column("Count", justify="right")
    for name, count in counts.items():
        table.add_row(_role_text(name) if by_role else name, str(count))
    return table


def _render_stats(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _header(console, result)
    _fields(console, d, ("node_count", "link_count", "components", "isolated_works"))

    console.print()
    console.print(_count_table("Roles", "Role", d.get("roles", {}), by_role=True))
    console.print(_count_table("Relations", "Relation", d.get("relations", {})))

    if d.get("items"):
        console.print()
        console.print(Text("  most connected:", style="cw.key"))
        console.print(_node_table(d["items"], extra_columns=["works"]))


def _render_layout(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _header(console, result)
    _fields(console, d, ("ticks", "settled", "alpha", "node_count", "link_count", "output"))

    if d.get("items"):
        console.print()
        console.print(_node_table(d["items"], extra_columns=["x", "y"]))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _header(console, result)
    _fields(console, result.data, result.data.keys())
    if verbose and result.meta:
        console.print(Text("  meta:", style="dim"))
        for key, value in result.meta.items():
            console.print(f"    {key}: {value}")


_OP_RENDERERS: dict[str, Renderer] = {
    "build_graph": _render_build,
    "graph_stats": _render_stats,
    "layout": _render_layout,
}
