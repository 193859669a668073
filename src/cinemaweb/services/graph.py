"""GraphService — build the relationship graph and summarize it.

``build()`` returns the node and link lists exactly as the layout engine
receives them. ``stats()`` runs a few NetworkX measures over the same graph.
"""

from __future__ import annotations

from collections import Counter
from typing import Any

import networkx as nx

from cinemaweb.domain.graph import Graph
from cinemaweb.domain.types import Relation, Role
from cinemaweb.services.base import BaseService
from cinemaweb.services.result import ServiceResult


class GraphService(BaseService):
    """Handles graph construction and analysis."""

    # ------------------------------------------------------------------
    # build
    # ------------------------------------------------------------------

    def build(self, location: str | None = None) -> ServiceResult:
        """Fetch the dataset at *location* and build its graph.

        Unresolved person references are reported as warnings; they never
        fail the operation.
        """
        graph = self._build_graph("build_graph", location)
        if isinstance(graph, ServiceResult):
            return graph

        nodes: list[dict[str, Any]] = []
        for node in graph.nodes:
            item: dict[str, Any] = {"id": node.id, "name": node.name, "role": str(node.role)}
            if node.role is Role.WORK:
                item["year"] = node.year
                item["genre"] = node.genre
            nodes.append(item)

        links = [
            {"source": lk.source, "target": lk.target, "relation": str(lk.relation)}
            for lk in graph.links
        ]

        return ServiceResult(
            ok=True,
            op="build_graph",
            data={
                "node_count": len(nodes),
                "link_count": len(links),
                "nodes": nodes,
                "links": links,
            },
            warnings=self._dropped_warnings(graph),
        )

    # ------------------------------------------------------------------
    # stats
    # ------------------------------------------------------------------

    def stats(self, location: str | None = None, *, top: int = 10) -> ServiceResult:
        """Summarize the graph: counts, components, most connected people."""
        graph = self._build_graph("graph_stats", location)
        if isinstance(graph, ServiceResult):
            return graph

        g = graph.to_networkx()
        roles = Counter(str(n.role) for n in graph.nodes)
        relations = Counter(str(lk.relation) for lk in graph.links)

        return ServiceResult(
            ok=True,
            op="graph_stats",
            data={
                "node_count": g.number_of_nodes(),
                "link_count": g.number_of_edges(),
                "roles": {str(r): roles.get(str(r), 0) for r in Role},
                "relations": {str(r): relations.get(str(r), 0) for r in Relation},
                "components": nx.number_weakly_connected_components(g),
                "isolated_works": sum(
                    1 for nid in nx.isolates(g) if g.nodes[nid]["role"] == str(Role.WORK)
                ),
                "items": self._most_connected(graph, g, top),
            },
            warnings=self._dropped_warnings(graph),
        )

    @staticmethod
    def _most_connected(
        graph: Graph, g: nx.MultiDiGraph[str], top: int
    ) -> list[dict[str, Any]]:
        """People ranked by the number of distinct works they are linked to."""
        people = [n for n in graph.nodes if n.role is not Role.WORK]
        ranked = sorted(
            ((n, len(set(g.predecessors(n.id)))) for n in people),
            key=lambda pair: (-pair[1], pair[0].id),
        )
        return [
            {"id": n.id, "name": n.name, "role": str(n.role), "works": count}
            for n, count in ranked[:top]
        ]
