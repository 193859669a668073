"""Velocity-Verlet style force simulation with a decaying energy (alpha).

The simulation itself knows nothing about frames or dragging: it holds the
node list, an ordered set of named forces, and the alpha parameters, and
advances by one :meth:`Simulation.tick` at a time.
"""

from __future__ import annotations

import math
import random as _random
from collections.abc import Sequence

from cinemaweb.domain.graph import Node, Pinned
from cinemaweb.layout.forces import Force

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))


def default_alpha_decay(alpha_min: float, ticks: int = 300) -> float:
    """Decay rate that takes alpha from 1 to *alpha_min* in about *ticks* ticks."""
    return 1 - alpha_min ** (1 / ticks)


class Simulation:
    """Discrete many-body simulation over a list of :class:`Node` records.

    Parameters:
        alpha_min: Alpha below which the simulation counts as settled.
        alpha_decay: Fraction of the gap to ``alpha_target`` closed per tick.
        velocity_decay: Fraction of velocity lost per tick (friction).
        seed: Seed for the jiggle random source. ``None`` is non-deterministic.
    """

    def __init__(
        self,
        *,
        alpha_min: float = 0.001,
        alpha_decay: float | None = None,
        velocity_decay: float = 0.4,
        seed: int | None = None,
    ) -> None:
        self.alpha = 1.0
        self.alpha_min = alpha_min
        self.alpha_decay = default_alpha_decay(alpha_min) if alpha_decay is None else alpha_decay
        self.alpha_target = 0.0
        self.velocity_decay = velocity_decay
        self._rng = _random.Random(seed)
        self._nodes: list[Node] = []
        self._forces: dict[str, Force] = {}

    # ------------------------------------------------------------------
    # Nodes and forces
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> list[Node]:
        return self._nodes

    def random(self) -> float:
        return self._rng.random()

    def set_nodes(self, nodes: Sequence[Node]) -> None:
        """Replace the node list, place unpositioned nodes, re-initialize forces."""
        self._nodes = list(nodes)
        self._place(self._nodes)
        for force in self._forces.values():
            force.initialize(self._nodes, self.random)

    def force(self, name: str) -> Force | None:
        return self._forces.get(name)

    def set_force(self, name: str, force: Force) -> None:
        """Register or replace a named force. Replacing keeps its position in the order."""
        force.initialize(self._nodes, self.random)
        self._forces[name] = force

    def remove_force(self, name: str) -> None:
        self._forces.pop(name, None)

    @property
    def force_names(self) -> list[str]:
        return list(self._forces)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    @property
    def settled(self) -> bool:
        return self.alpha < self.alpha_min

    def tick(self) -> None:
        """Advance one step: decay alpha, apply forces, integrate positions."""
        self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay

        for force in self._forces.values():
            force.apply(self.alpha)

        friction = 1 - self.velocity_decay
        for node in self._nodes:
            match node.pin:
                case Pinned(x=px, y=py):
                    node.x, node.y = px, py
                    node.vx = node.vy = 0.0
                case _:
                    node.vx *= friction
                    node.vy *= friction
                    node.x += node.vx
                    node.y += node.vy

    @staticmethod
    def _place(nodes: Sequence[Node]) -> None:
        """Place unpositioned nodes on a phyllotaxis spiral around the origin."""
        for i, node in enumerate(nodes):
            if isinstance(node.pin, Pinned):
                node.x, node.y = node.pin.x, node.pin.y
            if not node.positioned:
                radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
                angle = i * INITIAL_ANGLE
                node.x = radius * math.cos(angle)
                node.y = radius * math.sin(angle)
            if math.isnan(node.vx) or math.isnan(node.vy):
                node.vx = node.vy = 0.0
