"""Visualization — wires a dataset source, the builder, and the layout engine.

One instance per rendering surface, constructed with everything it needs
and driven through an explicit ``start``/``stop`` lifecycle. Interaction
events from the host (drag, reload, resize) are forwarded here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from cinemaweb.config.models import LayoutConfig, ViewportConfig
from cinemaweb.domain.builder import build
from cinemaweb.layout.engine import Frame, LayoutEngine, Point

if TYPE_CHECKING:
    from collections.abc import Callable

    from cinemaweb.domain.graph import Graph
    from cinemaweb.infrastructure.sources import DatasetSource
    from cinemaweb.layout.clock import FrameScheduler

logger = logging.getLogger(__name__)


class RenderSurface(Protocol):
    """Paints a frame. How nodes, links, and labels look is its own concern."""

    def draw(self, frame: Frame) -> None: ...


class Visualization:
    """An interactive relationship graph bound to one surface.

    Parameters:
        source: Where the dataset document is fetched from on start/reload.
        surface: Receives every published frame.
        scheduler: Host frame source driving the layout engine.
        layout: Force parameters.
        viewport: Initial surface size.
    """

    def __init__(
        self,
        source: DatasetSource,
        surface: RenderSurface,
        scheduler: FrameScheduler,
        *,
        layout: LayoutConfig | None = None,
        viewport: ViewportConfig | None = None,
    ) -> None:
        viewport = viewport or ViewportConfig()
        self._source = source
        self._surface = surface
        self.engine = LayoutEngine(
            scheduler,
            config=layout,
            width=viewport.width,
            height=viewport.height,
        )
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def graph(self) -> Graph:
        return self.engine.graph

    @property
    def running(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> None:
        """Fetch and build the graph, then start the layout.

        Raises:
            DatasetLoadError: If the first fetch fails. Nothing is started.
        """
        if self.running:
            return
        self._load()
        self._unsubscribe = self.engine.subscribe(self._surface.draw)
        self.engine.start()

    def stop(self) -> None:
        self.engine.stop()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def reload(self) -> None:
        """Fetch the dataset again and hot-restart on the rebuilt graph.

        Raises:
            DatasetLoadError: If the fetch fails. The current graph stays loaded.
        """
        self._load()

    def resize(self, width: float, height: float) -> None:
        self.engine.resize(width, height)

    def drag_start(self, node_id: str, pointer: Point) -> bool:
        return self.engine.drag_start(node_id, pointer)

    def drag_move(self, node_id: str, pointer: Point) -> bool:
        return self.engine.drag_move(node_id, pointer)

    def drag_end(self, node_id: str) -> bool:
        return self.engine.drag_end(node_id)

    def _load(self) -> None:
        dataset = self._source.fetch()
        graph = build(dataset)
        logger.info(
            "Built graph from %s: %d nodes, %d links",
            self._source.location,
            len(graph.nodes),
            len(graph.links),
        )
        self.engine.load(graph)
