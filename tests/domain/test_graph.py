"""Tests for graph types — pin state, tooltips, NetworkX view."""

from __future__ import annotations

from cinemaweb.domain.builder import build
from cinemaweb.domain.graph import FREE, Node, Pinned
from cinemaweb.domain.records import Dataset
from cinemaweb.domain.types import Role


class TestNode:
    def test_defaults(self) -> None:
        node = Node(id="actor:a1", name="Ana", role=Role.ACTOR)
        assert node.pin == FREE
        assert not node.pinned
        assert not node.positioned

    def test_pinned(self) -> None:
        node = Node(id="actor:a1", name="Ana", role=Role.ACTOR, pin=Pinned(1.0, 2.0))
        assert node.pinned
        assert node.pin == Pinned(1.0, 2.0)

    def test_work_tooltip(self) -> None:
        node = Node(id="work:p1", name="Night Train", role=Role.WORK, year=2019, genre="Drama")
        assert node.tooltip == "Night Train (2019)\nGenre: Drama"

    def test_person_tooltip(self) -> None:
        assert Node(id="director:d1", name="Dana", role=Role.DIRECTOR).tooltip == "Dana"


class TestNetworkx:
    def test_view_preserves_parallel_links(self, dataset: Dataset) -> None:
        graph = build(dataset)
        g = graph.to_networkx()
        assert g.number_of_nodes() == len(graph.nodes)
        assert g.number_of_edges() == len(graph.links)
        assert g.number_of_edges("work:p1", "actor:a1") == 2
        assert g.nodes["work:p1"]["year"] == 2019
        assert g.nodes["actor:a1"]["role"] == "actor"
