"""Tests for LayoutEngine — lifecycle, restarts, and the drag state machine."""

from __future__ import annotations

import math

import pytest

from cinemaweb.config.models import LayoutConfig
from cinemaweb.domain.builder import build
from cinemaweb.domain.graph import FREE, Graph, Pinned
from cinemaweb.domain.records import Dataset
from cinemaweb.layout.clock import ManualFrameClock
from cinemaweb.layout.engine import Frame, LayoutEngine
from cinemaweb.layout.simulation import INITIAL_ANGLE, INITIAL_RADIUS

WIDTH, HEIGHT = 800.0, 600.0


def _engine(clock: ManualFrameClock) -> LayoutEngine:
    config = LayoutConfig(seed=7)
    return LayoutEngine(clock, config=config, width=WIDTH, height=HEIGHT)


def _settle(clock: ManualFrameClock, engine: LayoutEngine, cap: int = 2000) -> None:
    while engine.stepping and engine.ticks < cap:
        clock.advance()


def _mean(frame: Frame) -> tuple[float, float]:
    n = len(frame.nodes)
    return sum(v.x for v in frame.nodes) / n, sum(v.y for v in frame.nodes) / n


@pytest.fixture
def clock() -> ManualFrameClock:
    return ManualFrameClock()


@pytest.fixture
def engine(clock: ManualFrameClock, dataset: Dataset) -> LayoutEngine:
    eng = _engine(clock)
    eng.load(build(dataset))
    eng.start()
    return eng


class TestLifecycle:
    def test_construction_has_no_side_effects(self, clock: ManualFrameClock) -> None:
        eng = _engine(clock)
        assert clock.pending == 0
        assert not eng.started
        assert not eng.stepping

    def test_load_before_start_does_not_step(
        self, clock: ManualFrameClock, dataset: Dataset
    ) -> None:
        eng = _engine(clock)
        eng.load(build(dataset))
        assert clock.advance(5) == 0
        eng.start()
        assert eng.stepping
        clock.advance(5)
        assert eng.ticks == 5

    def test_start_is_idempotent(self, clock: ManualFrameClock, engine: LayoutEngine) -> None:
        engine.start()
        assert clock.pending == 1

    def test_stop_cancels_frames(self, clock: ManualFrameClock, engine: LayoutEngine) -> None:
        clock.advance(3)
        engine.stop()
        assert clock.advance(3) == 0
        assert engine.ticks == 3

    def test_one_frame_per_tick(self, clock: ManualFrameClock, engine: LayoutEngine) -> None:
        frames: list[Frame] = []
        engine.subscribe(frames.append)
        clock.advance(4)
        assert [f.tick for f in frames] == [1, 2, 3, 4]
        assert frames[-1].alpha < frames[0].alpha

    def test_unsubscribe(self, clock: ManualFrameClock, engine: LayoutEngine) -> None:
        frames: list[Frame] = []
        unsubscribe = engine.subscribe(frames.append)
        clock.advance()
        unsubscribe()
        clock.advance()
        assert len(frames) == 1

    def test_frames_are_snapshots(self, clock: ManualFrameClock, engine: LayoutEngine) -> None:
        frames: list[Frame] = []
        engine.subscribe(frames.append)
        clock.advance(2)
        assert frames[0].nodes != frames[1].nodes

    def test_frame_exposes_nodes_and_links(self, engine: LayoutEngine) -> None:
        frame = engine.frame()
        assert [v.id for v in frame.nodes][:2] == ["work:p1", "actor:a1"]
        assert len(frame.links) == 8
        assert frame.links[0].source_id == "work:p1"
        data = frame.to_dict()
        assert data["nodes"][0]["role"] == "work"
        assert data["links"][0]["relation"] == "cast"


class TestConvergence:
    def test_settles_and_stops_requesting_frames(
        self, clock: ManualFrameClock, engine: LayoutEngine
    ) -> None:
        _settle(clock, engine)
        assert not engine.stepping
        assert engine.alpha < engine.simulation.alpha_min
        assert 299 <= engine.ticks <= 302
        assert clock.pending == 0

    def test_settled_layout_is_centered(
        self, clock: ManualFrameClock, engine: LayoutEngine
    ) -> None:
        _settle(clock, engine)
        mx, my = _mean(engine.frame())
        assert mx == pytest.approx(WIDTH / 2, abs=1.0)
        assert my == pytest.approx(HEIGHT / 2, abs=1.0)

    def test_settled_nodes_do_not_overlap(
        self, clock: ManualFrameClock, engine: LayoutEngine
    ) -> None:
        _settle(clock, engine)
        views = engine.frame().nodes
        for i, a in enumerate(views):
            for b in views[i + 1 :]:
                assert math.hypot(a.x - b.x, a.y - b.y) > 30.0

    def test_linked_nodes_near_link_distance(
        self, clock: ManualFrameClock, engine: LayoutEngine
    ) -> None:
        _settle(clock, engine)
        frame = engine.frame()
        work = frame.position("work:p1")
        actor = frame.position("actor:a1")
        assert work is not None and actor is not None
        assert math.hypot(work[0] - actor[0], work[1] - actor[1]) < 250.0

    def test_empty_graph(self, clock: ManualFrameClock) -> None:
        eng = _engine(clock)
        eng.load(Graph())
        eng.start()
        _settle(clock, eng)
        assert not eng.stepping
        assert eng.frame().nodes == ()

    def test_graph_without_links(self, clock: ManualFrameClock) -> None:
        lone = Dataset.from_document(
            {
                "projects": [
                    {"id": "p1", "title": "A", "year": 2000, "genre": "G"},
                    {"id": "p2", "title": "B", "year": 2001, "genre": "G"},
                ],
                "actors": [],
                "directors": [],
            }
        )
        eng = _engine(clock)
        eng.load(build(lone))
        eng.start()
        _settle(clock, eng)
        frame = eng.frame()
        (ax, ay), (bx, by) = ((v.x, v.y) for v in frame.nodes)
        assert math.hypot(ax - bx, ay - by) > 60.0


class TestRestart:
    def test_load_hot_restarts(
        self, clock: ManualFrameClock, engine: LayoutEngine, dataset: Dataset
    ) -> None:
        _settle(clock, engine)
        engine.load(build(dataset))
        assert engine.alpha == 1.0
        assert engine.stepping

    def test_load_resets_positions(
        self, clock: ManualFrameClock, engine: LayoutEngine, dataset: Dataset
    ) -> None:
        _settle(clock, engine)
        engine.load(build(dataset))
        node = engine.node("work:p1")
        assert node is not None
        assert (node.x, node.y) == pytest.approx(
            (INITIAL_RADIUS * math.sqrt(0.5), 0.0)
        )

    def test_load_replaces_node_set(
        self, clock: ManualFrameClock, engine: LayoutEngine, document: dict[str, object]
    ) -> None:
        document["projects"] = document["projects"][:1]  # type: ignore[index]
        smaller = build(Dataset.from_document(document))
        engine.load(smaller)
        assert engine.graph is smaller
        assert engine.node("work:p2") is None
        clock.advance()
        assert {v.id for v in engine.frame().nodes} == smaller.node_ids()

    def test_resize_recenters_and_keeps_positions(
        self, clock: ManualFrameClock, engine: LayoutEngine
    ) -> None:
        _settle(clock, engine)
        before = {v.id: (v.x, v.y) for v in engine.frame().nodes}
        engine.resize(1200.0, 900.0)
        assert engine.alpha == pytest.approx(0.3)
        assert engine.stepping
        assert {v.id: (v.x, v.y) for v in engine.frame().nodes} == before
        _settle(clock, engine, cap=5000)
        mx, my = _mean(engine.frame())
        assert mx == pytest.approx(600.0, abs=1.0)
        assert my == pytest.approx(450.0, abs=1.0)

    def test_resize_before_start_does_not_step(self, clock: ManualFrameClock) -> None:
        eng = _engine(clock)
        eng.resize(100.0, 100.0)
        assert eng.viewport == (100.0, 100.0)
        assert clock.pending == 0


class TestDrag:
    def test_pin_follows_pointer(self, clock: ManualFrameClock, engine: LayoutEngine) -> None:
        clock.advance(10)
        assert engine.drag_start("actor:a1", (500.0, 400.0))
        node = engine.node("actor:a1")
        assert node is not None
        assert (node.x, node.y) == (500.0, 400.0)
        clock.advance(5)
        assert engine.frame().position("actor:a1") == (500.0, 400.0)

        assert engine.drag_move("actor:a1", (10.0, 20.0))
        assert engine.frame().position("actor:a1") == (10.0, 20.0)
        for _ in range(3):
            clock.advance()
            assert engine.frame().position("actor:a1") == (10.0, 20.0)

    def test_only_dragged_node_is_pinned(
        self, clock: ManualFrameClock, engine: LayoutEngine
    ) -> None:
        engine.drag_start("actor:a1", (0.0, 0.0))
        clock.advance()
        pinned = [v.id for v in engine.frame().nodes if v.pinned]
        assert pinned == ["actor:a1"]
        assert engine.dragging == "actor:a1"

    def test_dragged_node_perturbs_neighbors(
        self, clock: ManualFrameClock, engine: LayoutEngine
    ) -> None:
        _settle(clock, engine)
        before = engine.frame().position("work:p1")
        engine.drag_start("actor:a1", (0.0, 0.0))
        clock.advance(20)
        assert engine.frame().position("work:p1") != before

    def test_drag_holds_energy_floor(
        self, clock: ManualFrameClock, engine: LayoutEngine
    ) -> None:
        _settle(clock, engine)
        engine.drag_start("actor:a1", (0.0, 0.0))
        assert engine.stepping
        clock.advance(1000)
        assert engine.stepping
        assert engine.alpha == pytest.approx(0.3, rel=1e-3)

    def test_drag_end_releases(self, clock: ManualFrameClock, engine: LayoutEngine) -> None:
        engine.drag_start("actor:a1", (10.0, 20.0))
        clock.advance(3)
        assert engine.drag_end("actor:a1")
        node = engine.node("actor:a1")
        assert node is not None
        assert node.pin == FREE
        assert engine.dragging is None
        assert engine.simulation.alpha_target == 0.0
        clock.advance()
        assert engine.frame().position("actor:a1") != (10.0, 20.0)

    def test_settles_after_drag_end(
        self, clock: ManualFrameClock, engine: LayoutEngine
    ) -> None:
        engine.drag_start("actor:a1", (10.0, 20.0))
        clock.advance(50)
        engine.drag_end("actor:a1")
        _settle(clock, engine, cap=5000)
        assert not engine.stepping

    def test_unknown_node_ignored(self, engine: LayoutEngine) -> None:
        assert not engine.drag_start("actor:nobody", (0.0, 0.0))
        assert engine.dragging is None
        assert engine.simulation.alpha_target == 0.0

    def test_move_and_end_ignore_other_nodes(self, engine: LayoutEngine) -> None:
        engine.drag_start("actor:a1", (1.0, 1.0))
        assert not engine.drag_move("actor:a2", (5.0, 5.0))
        assert not engine.drag_end("actor:a2")
        a2 = engine.node("actor:a2")
        assert a2 is not None
        assert a2.pin == FREE
        assert engine.dragging == "actor:a1"

    def test_second_drag_releases_first(self, engine: LayoutEngine) -> None:
        engine.drag_start("actor:a1", (1.0, 1.0))
        engine.drag_start("actor:a2", (2.0, 2.0))
        a1, a2 = engine.node("actor:a1"), engine.node("actor:a2")
        assert a1 is not None and a2 is not None
        assert a1.pin == FREE
        assert a2.pin == Pinned(2.0, 2.0)
        assert engine.dragging == "actor:a2"

    def test_reload_drops_drag(
        self, clock: ManualFrameClock, engine: LayoutEngine, dataset: Dataset
    ) -> None:
        engine.drag_start("actor:a1", (500.0, 400.0))
        clock.advance(5)
        engine.load(build(dataset))
        assert engine.dragging is None
        assert engine.simulation.alpha_target == 0.0
        node = engine.node("actor:a1")
        assert node is not None
        assert node.pin == FREE
        # Index 1 on the default spiral, not the last drag position.
        radius = INITIAL_RADIUS * math.sqrt(1.5)
        assert (node.x, node.y) == pytest.approx(
            (radius * math.cos(INITIAL_ANGLE), radius * math.sin(INITIAL_ANGLE))
        )
        # Late events for the dropped drag are ignored.
        assert not engine.drag_move("actor:a1", (1.0, 1.0))
        assert not engine.drag_end("actor:a1")

    def test_reloading_same_graph_unpins_dragged_node(
        self, clock: ManualFrameClock, engine: LayoutEngine
    ) -> None:
        engine.drag_start("actor:a1", (500.0, 500.0))
        engine.load(engine.graph)
        clock.advance(5)
        node = engine.node("actor:a1")
        assert node is not None
        assert node.pin == FREE
        assert not node.pinned
        assert (node.x, node.y) != (500.0, 500.0)
        assert not engine.drag_end("actor:a1")
