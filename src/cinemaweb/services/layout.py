"""LayoutService — run the force layout headless and report positions.

Drives a :class:`LayoutEngine` from a :class:`ManualFrameClock` until the
simulation settles or the tick cap is reached. Layouts are not
deterministic across runs unless a seed is configured or passed.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from cinemaweb.layout.clock import ManualFrameClock
from cinemaweb.layout.engine import LayoutEngine
from cinemaweb.services.base import BaseService
from cinemaweb.services.result import ErrorCode, ServiceResult

logger = logging.getLogger(__name__)


class LayoutService(BaseService):
    """Computes settled layouts for a dataset."""

    def run(
        self,
        location: str | None = None,
        *,
        width: float | None = None,
        height: float | None = None,
        max_ticks: int | None = None,
        seed: int | None = None,
        out: Path | None = None,
    ) -> ServiceResult:
        """Lay out the graph of the dataset at *location*.

        Args:
            location: Dataset path or URL (defaults to ``[data] source``).
            width: Viewport width override.
            height: Viewport height override.
            max_ticks: Stop after this many ticks even if not settled.
            seed: Jiggle seed override for reproducible runs.
            out: If given, write the final frame as JSON to this path.
        """
        graph = self._build_graph("layout", location)
        if isinstance(graph, ServiceResult):
            return graph

        cfg = self._settings.layout
        if seed is not None:
            cfg = cfg.model_copy(update={"seed": seed})
        cap = max_ticks or cfg.max_ticks
        vw = width or self._settings.viewport.width
        vh = height or self._settings.viewport.height

        clock = ManualFrameClock()
        engine = LayoutEngine(clock, config=cfg, width=vw, height=vh)
        engine.load(graph)
        engine.start()
        while engine.stepping and engine.ticks < cap:
            clock.advance()
        settled = not engine.stepping
        engine.stop()

        frame = engine.frame()
        warnings = self._dropped_warnings(graph)
        if not settled:
            warnings.append(f"Layout did not settle within {cap} ticks (alpha={frame.alpha:.4f})")
        logger.debug("Layout finished: ticks=%d settled=%s", frame.tick, settled)

        data: dict[str, Any] = {
            "ticks": frame.tick,
            "settled": settled,
            "alpha": round(frame.alpha, 6),
            "viewport": {"width": vw, "height": vh},
            "node_count": len(frame.nodes),
            "link_count": len(frame.links),
            "items": [
                {
                    "id": n.id,
                    "name": n.name,
                    "role": str(n.role),
                    "x": round(n.x, 2),
                    "y": round(n.y, 2),
                }
                for n in frame.nodes
            ],
        }

        if out is not None:
            try:
                out.parent.mkdir(parents=True, exist_ok=True)
                out.write_text(json.dumps(frame.to_dict(), indent=2), encoding="utf-8")
            except OSError as exc:
                return ServiceResult.failure(
                    "layout",
                    ErrorCode.WRITE_FAILED,
                    f"Cannot write {out}: {exc.strerror or exc}",
                    path=str(out),
                )
            data["output"] = str(out)

        return ServiceResult(ok=True, op="layout", data=data, warnings=warnings)
