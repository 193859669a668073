"""Graph types — nodes, links, and the per-node pin state.

Nodes are mutable records: the layout engine writes positions and
velocities onto them in place every tick. Links reference nodes by id only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from cinemaweb.domain.types import Relation, Role

if TYPE_CHECKING:
    import networkx as nx


def node_id(role: Role, source_id: str) -> str:
    """Compose a graph-unique node id from a role and a collection-local id."""
    return f"{role}:{source_id}"


# ── Pin state ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Free:
    """Position governed by the simulation forces."""


@dataclass(frozen=True)
class Pinned:
    """Position fixed outside simulation control (held by a pointer)."""

    x: float
    y: float


type PinState = Free | Pinned

FREE = Free()


# ── Nodes and links ───────────────────────────────────────────────────


@dataclass(eq=False)
class Node:
    """A typed graph node with a mutable simulated position.

    ``x``/``y`` are NaN until the layout engine places the node.
    """

    id: str
    name: str
    role: Role
    year: int | None = None
    genre: str | None = None
    x: float = math.nan
    y: float = math.nan
    vx: float = 0.0
    vy: float = 0.0
    pin: PinState = FREE

    @property
    def positioned(self) -> bool:
        return not (math.isnan(self.x) or math.isnan(self.y))

    @property
    def pinned(self) -> bool:
        return isinstance(self.pin, Pinned)

    @property
    def tooltip(self) -> str:
        if self.role is Role.WORK:
            return f"{self.name} ({self.year})\nGenre: {self.genre}"
        return self.name


@dataclass(frozen=True)
class Link:
    """A directed work -> person link."""

    source: str
    target: str
    relation: Relation


@dataclass(frozen=True)
class DroppedReference:
    """A work relation whose person id did not resolve in its role collection."""

    work_id: str
    relation: Relation
    person_id: str


@dataclass(frozen=True)
class Graph:
    """Output of one build: ordered nodes, ordered links, skipped references."""

    nodes: tuple[Node, ...] = ()
    links: tuple[Link, ...] = ()
    dropped: tuple[DroppedReference, ...] = field(default=())

    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}

    def link_keys(self) -> list[tuple[str, str, str]]:
        """Links as sortable ``(source, target, relation)`` tuples."""
        return [(lk.source, lk.target, str(lk.relation)) for lk in self.links]

    def get(self, nid: str) -> Node | None:
        for node in self.nodes:
            if node.id == nid:
                return node
        return None

    def to_networkx(self) -> nx.MultiDiGraph[str]:
        """Return a NetworkX view of the graph (parallel links preserved)."""
        import networkx as nx

        g: nx.MultiDiGraph[str] = nx.MultiDiGraph()
        for node in self.nodes:
            attrs: dict[str, Any] = {"name": node.name, "role": str(node.role)}
            if node.role is Role.WORK:
                attrs["year"] = node.year
                attrs["genre"] = node.genre
            g.add_node(node.id, **attrs)
        for link in self.links:
            g.add_edge(link.source, link.target, relation=str(link.relation))
        return g
