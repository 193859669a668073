"""LayoutEngine — a continuously running force layout with drag support.

The engine owns the simulation and the node/link arrays handed to it by
:meth:`LayoutEngine.load`. It advances one tick per frame from an injected
:class:`~cinemaweb.layout.clock.FrameScheduler`, publishes an immutable
:class:`Frame` after every tick, and stops requesting frames once alpha
decays below ``alpha_min``. Any perturbation (rebuild, resize, drag start)
re-energizes it.

Nothing happens at construction time: frames are only requested after
:meth:`LayoutEngine.start`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any

from cinemaweb.config.models import LayoutConfig
from cinemaweb.domain.graph import FREE, Graph, Node, Pinned
from cinemaweb.domain.types import Relation, Role
from cinemaweb.layout.clock import FrameScheduler, FrameSubscription
from cinemaweb.layout.forces import CenterForce, CollisionForce, LinkForce, ManyBodyForce
from cinemaweb.layout.simulation import Simulation

logger = logging.getLogger(__name__)


# ── Published frames ──────────────────────────────────────────────────


@dataclass(frozen=True)
class NodeView:
    id: str
    name: str
    role: Role
    x: float
    y: float
    pinned: bool = False


@dataclass(frozen=True)
class LinkView:
    source_id: str
    target_id: str
    relation: Relation


@dataclass(frozen=True)
class Frame:
    """Positions of every node after one tick, plus the link list."""

    tick: int
    alpha: float
    nodes: tuple[NodeView, ...]
    links: tuple[LinkView, ...]

    def position(self, node_id: str) -> tuple[float, float] | None:
        for view in self.nodes:
            if view.id == node_id:
                return view.x, view.y
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick": self.tick,
            "alpha": self.alpha,
            "nodes": [{**asdict(n), "role": str(n.role)} for n in self.nodes],
            "links": [{**asdict(lk), "relation": str(lk.relation)} for lk in self.links],
        }


type FrameListener = Callable[[Frame], None]
type Point = tuple[float, float]


# ── Engine ────────────────────────────────────────────────────────────


class LayoutEngine:
    """Drag-aware force layout driven by a frame scheduler.

    Parameters:
        scheduler: Host frame source; one tick is computed per frame.
        config: Force parameters and energy schedule.
        width: Viewport width (the center force targets ``width / 2``).
        height: Viewport height.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        *,
        config: LayoutConfig | None = None,
        width: float = 960.0,
        height: float = 600.0,
    ) -> None:
        self._scheduler = scheduler
        self._config = config or LayoutConfig()
        self._width = width
        self._height = height
        self._graph = Graph()
        self._by_id: dict[str, Node] = {}
        self._dragging: str | None = None
        self._listeners: list[FrameListener] = []
        self._subscription: FrameSubscription | None = None
        self._started = False
        self.ticks = 0

        cfg = self._config
        self._simulation = Simulation(
            alpha_min=cfg.alpha_min,
            alpha_decay=cfg.alpha_decay,
            velocity_decay=cfg.velocity_decay,
            seed=cfg.seed,
        )
        self._links = LinkForce(cfg.link_distance)
        self._simulation.set_force("link", self._links)
        self._simulation.set_force(
            "charge",
            ManyBodyForce(cfg.charge_strength, distance_max=cfg.charge_distance_max),
        )
        self._simulation.set_force("center", CenterForce(width / 2, height / 2))
        self._simulation.set_force("collision", CollisionForce(cfg.collision_radius))

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def simulation(self) -> Simulation:
        return self._simulation

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def alpha(self) -> float:
        return self._simulation.alpha

    @property
    def viewport(self) -> tuple[float, float]:
        return self._width, self._height

    @property
    def started(self) -> bool:
        return self._started

    @property
    def stepping(self) -> bool:
        """True while the engine is requesting frames (not yet settled)."""
        return self._subscription is not None and self._subscription.active

    @property
    def dragging(self) -> str | None:
        """Id of the node currently held by the pointer, if any."""
        return self._dragging

    def node(self, node_id: str) -> Node | None:
        return self._by_id.get(node_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin requesting frames. Idempotent."""
        self._started = True
        self._resume()

    def stop(self) -> None:
        """Stop requesting frames. Node state is kept; start() resumes."""
        self._started = False
        self._cancel()

    def subscribe(self, listener: FrameListener) -> Callable[[], None]:
        """Receive every published frame. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Perturbations
    # ------------------------------------------------------------------

    def load(self, graph: Graph) -> None:
        """Replace the node and link sets wholesale and hot-restart.

        Any drag in progress is dropped along with the old node set.
        """
        if self._dragging is not None:
            logger.debug("Dropping drag of %s on reload", self._dragging)
            self._release(self._dragging)
        self._simulation.alpha_target = 0.0

        self._graph = graph
        self._by_id = {n.id: n for n in graph.nodes}
        self._links.set_links(graph.links)
        self._simulation.set_nodes(graph.nodes)
        self._recenter()
        self._simulation.alpha = self._config.restart_alpha
        logger.debug("Loaded %d nodes, %d links", len(graph.nodes), len(graph.links))
        self._resume()

    def resize(self, width: float, height: float) -> None:
        """Re-center on a new viewport, keeping current positions."""
        self._width = width
        self._height = height
        self._recenter()
        self._simulation.alpha = self._config.resize_alpha
        self._resume()

    # ------------------------------------------------------------------
    # Drag state machine
    # ------------------------------------------------------------------

    def drag_start(self, node_id: str, pointer: Point) -> bool:
        """Pin *node_id* to the pointer and hold the energy at the drag floor.

        Returns False (and does nothing) if the node is not in the current set.
        """
        node = self._by_id.get(node_id)
        if node is None:
            logger.debug("drag_start ignored for unknown node %s", node_id)
            return False
        if self._dragging is not None and self._dragging != node_id:
            self._release(self._dragging)
        self._dragging = node_id
        self._pin(node, pointer)
        self._simulation.alpha_target = self._config.drag_alpha_target
        self._resume()
        return True

    def drag_move(self, node_id: str, pointer: Point) -> bool:
        """Move the pin of the node being dragged. Ignored for any other node."""
        if node_id != self._dragging:
            return False
        node = self._by_id[node_id]
        self._pin(node, pointer)
        return True

    def drag_end(self, node_id: str) -> bool:
        """Release the pin; the node rejoins the simulation on the next tick."""
        if node_id != self._dragging:
            return False
        self._release(node_id)
        return True

    def _pin(self, node: Node, pointer: Point) -> None:
        x, y = pointer
        node.pin = Pinned(x, y)
        node.x, node.y = x, y
        node.vx = node.vy = 0.0

    def _release(self, node_id: str) -> None:
        node = self._by_id.get(node_id)
        if node is not None:
            node.pin = FREE
        self._dragging = None
        self._simulation.alpha_target = 0.0

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def frame(self) -> Frame:
        """Snapshot the current positions."""
        return Frame(
            tick=self.ticks,
            alpha=self._simulation.alpha,
            nodes=tuple(
                NodeView(n.id, n.name, n.role, n.x, n.y, n.pinned) for n in self._graph.nodes
            ),
            links=tuple(LinkView(lk.source, lk.target, lk.relation) for lk in self._graph.links),
        )

    def step(self) -> Frame:
        """Compute one tick and publish the resulting frame."""
        self._simulation.tick()
        self.ticks += 1
        frame = self.frame()
        for listener in list(self._listeners):
            listener(frame)
        return frame

    def _on_frame(self, _timestamp: float) -> None:
        self.step()
        if self._simulation.settled:
            logger.debug("Layout settled after %d ticks", self.ticks)
            self._cancel()

    def _resume(self) -> None:
        if self._started and not self.stepping:
            self._subscription = self._scheduler.on_frame(self._on_frame)

    def _cancel(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def _recenter(self) -> None:
        self._simulation.set_force("center", CenterForce(self._width / 2, self._height / 2))
