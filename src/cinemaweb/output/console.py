"""Off-screen Rich consoles and the cinemaweb color theme.

Renderers print into a console whose file is a StringIO and return the
captured text, so ``format_result()`` stays a plain ``-> str`` function.
Rich drops color codes by itself when stdout is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

from cinemaweb.domain.types import Role

# Node colors follow the role palette of the interactive view.
_ROLE_COLORS: dict[Role, str] = {
    Role.WORK: "green",
    Role.ACTOR: "cyan",
    Role.DIRECTOR: "red",
    Role.CASTING_DIRECTOR: "magenta",
}

CINEMA_THEME = Theme(
    {
        "cw.ok": "bold green",
        "cw.error": "bold red",
        "cw.op": "bold cyan",
        "cw.key": "dim",
        "cw.id": "bold blue",
        "cw.name": "bold",
        **{f"cw.role.{role}": color for role, color in _ROLE_COLORS.items()},
    }
)


def create_console(*, no_color: bool = False, width: int = 120) -> Console:
    return Console(
        file=StringIO(),
        theme=CINEMA_THEME,
        no_color=no_color,
        highlight=False,
        width=width,
    )


def get_output(console: Console) -> str:
    """Everything printed to *console* so far."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console was not created by create_console()")
    return buffer.getvalue()


def style_for_role(role: str) -> str:
    """Theme style for a node role, or ``""`` for an unknown role."""
    return f"cw.role.{role}" if role in {r.value for r in Role} else ""
