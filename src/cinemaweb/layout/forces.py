"""Composable simulation forces.

Each force is initialized with the current node list whenever the node set
is replaced, then applied once per tick with the current alpha. Forces
write velocities (link, charge, collision) or positions (center) onto the
nodes in place.

Pairwise forces are computed exactly (O(n^2)); graphs here are a few
hundred nodes at most.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Callable, Sequence
from typing import Protocol

from cinemaweb.domain.graph import Link, Node

logger = logging.getLogger(__name__)

type RandomSource = Callable[[], float]


def jiggle(random: RandomSource) -> float:
    """Tiny random offset used to separate coincident points."""
    return (random() - 0.5) * 1e-6


class Force(Protocol):
    """Interface every simulation force implements."""

    def initialize(self, nodes: Sequence[Node], random: RandomSource) -> None: ...

    def apply(self, alpha: float) -> None: ...


# ── Link ──────────────────────────────────────────────────────────────


class LinkForce:
    """Spring along every link toward a target distance.

    Strength defaults to ``1 / min(degree(source), degree(target))`` so hubs
    are not yanked around by their many leaves. The correction is split
    between the endpoints by degree (bias).
    """

    def __init__(self, distance: float = 100.0, *, iterations: int = 1) -> None:
        self.distance = distance
        self.iterations = iterations
        self._links: tuple[Link, ...] = ()
        self._resolved: list[tuple[Node, Node, float, float]] = []
        self._random: RandomSource = lambda: 0.5

    @property
    def links(self) -> tuple[Link, ...]:
        return self._links

    def set_links(self, links: Sequence[Link]) -> None:
        """Replace the link set. Takes effect on the next initialize()."""
        self._links = tuple(links)

    def initialize(self, nodes: Sequence[Node], random: RandomSource) -> None:
        self._random = random
        by_id = {n.id: n for n in nodes}
        pairs: list[tuple[Node, Node]] = []
        for link in self._links:
            source = by_id.get(link.source)
            target = by_id.get(link.target)
            if source is None or target is None:
                logger.debug("Skipping link with missing endpoint: %s -> %s", link.source, link.target)
                continue
            pairs.append((source, target))

        degree: Counter[str] = Counter()
        for source, target in pairs:
            degree[source.id] += 1
            degree[target.id] += 1

        self._resolved = []
        for source, target in pairs:
            ds, dt = degree[source.id], degree[target.id]
            strength = 1.0 / min(ds, dt)
            bias = ds / (ds + dt)
            self._resolved.append((source, target, strength, bias))

    def apply(self, alpha: float) -> None:
        for _ in range(self.iterations):
            for source, target, strength, bias in self._resolved:
                x = target.x + target.vx - source.x - source.vx or jiggle(self._random)
                y = target.y + target.vy - source.y - source.vy or jiggle(self._random)
                length = math.sqrt(x * x + y * y)
                length = (length - self.distance) / length * alpha * strength
                x *= length
                y *= length
                target.vx -= x * bias
                target.vy -= y * bias
                source.vx += x * (1 - bias)
                source.vy += y * (1 - bias)


# ── Charge ────────────────────────────────────────────────────────────


class ManyBodyForce:
    """Mutual repulsion (negative strength) or attraction between all nodes.

    The pull/push on a node from each other node is ``strength * alpha /
    distance^2`` along the line between them. Distances below
    ``distance_min`` are softened; pairs beyond ``distance_max`` are ignored.
    """

    def __init__(
        self,
        strength: float = -30.0,
        *,
        distance_min: float = 1.0,
        distance_max: float | None = None,
    ) -> None:
        self.strength = strength
        self.distance_min = distance_min
        self.distance_max = distance_max
        self._nodes: Sequence[Node] = ()
        self._random: RandomSource = lambda: 0.5

    def initialize(self, nodes: Sequence[Node], random: RandomSource) -> None:
        self._nodes = nodes
        self._random = random

    def apply(self, alpha: float) -> None:
        min2 = self.distance_min * self.distance_min
        max2 = math.inf if self.distance_max is None else self.distance_max * self.distance_max
        weight = self.strength * alpha
        nodes = self._nodes
        for node in nodes:
            for other in nodes:
                if other is node:
                    continue
                x = other.x - node.x
                y = other.y - node.y
                dist2 = x * x + y * y
                if dist2 >= max2:
                    continue
                if x == 0:
                    x = jiggle(self._random)
                    dist2 += x * x
                if y == 0:
                    y = jiggle(self._random)
                    dist2 += y * y
                if dist2 < min2:
                    dist2 = math.sqrt(min2 * dist2)
                node.vx += x * weight / dist2
                node.vy += y * weight / dist2


# ── Center ────────────────────────────────────────────────────────────


class CenterForce:
    """Translate all nodes so their mean position sits at ``(x, y)``."""

    def __init__(self, x: float = 0.0, y: float = 0.0, *, strength: float = 1.0) -> None:
        self.x = x
        self.y = y
        self.strength = strength
        self._nodes: Sequence[Node] = ()

    def initialize(self, nodes: Sequence[Node], random: RandomSource) -> None:
        self._nodes = nodes

    def apply(self, alpha: float) -> None:
        n = len(self._nodes)
        if not n:
            return
        sx = sum(node.x for node in self._nodes)
        sy = sum(node.y for node in self._nodes)
        sx = (sx / n - self.x) * self.strength
        sy = (sy / n - self.y) * self.strength
        for node in self._nodes:
            node.x -= sx
            node.y -= sy


# ── Collision ─────────────────────────────────────────────────────────


class CollisionForce:
    """Push apart any two nodes whose centres are closer than their radii sum.

    Works on predicted positions (``x + vx``). Each overlapping pair is
    separated along the line between them, the smaller node moving more.
    """

    def __init__(self, radius: float = 1.0, *, strength: float = 1.0, iterations: int = 1) -> None:
        self.radius = radius
        self.strength = strength
        self.iterations = iterations
        self._nodes: Sequence[Node] = ()
        self._random: RandomSource = lambda: 0.5

    def initialize(self, nodes: Sequence[Node], random: RandomSource) -> None:
        self._nodes = nodes
        self._random = random

    def apply(self, alpha: float) -> None:
        nodes = self._nodes
        ri = rj = self.radius
        reach = ri + rj
        share = (rj * rj) / (ri * ri + rj * rj)
        for _ in range(self.iterations):
            for i, node in enumerate(nodes):
                xi = node.x + node.vx
                yi = node.y + node.vy
                for other in nodes[i + 1 :]:
                    x = xi - other.x - other.vx
                    y = yi - other.y - other.vy
                    dist2 = x * x + y * y
                    if dist2 >= reach * reach:
                        continue
                    if x == 0:
                        x = jiggle(self._random)
                        dist2 += x * x
                    if y == 0:
                        y = jiggle(self._random)
                        dist2 += y * y
                    dist = math.sqrt(dist2)
                    push = (reach - dist) / dist * self.strength
                    x *= push
                    y *= push
                    node.vx += x * share
                    node.vy += y * share
                    other.vx -= x * (1 - share)
                    other.vy -= y * (1 - share)
