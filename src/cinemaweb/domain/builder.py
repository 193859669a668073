"""Graph builder — relational dataset to deduplicated node/link graph.

Pure function, no infrastructure dependencies. Unresolved person ids are
not errors: the relation simply does not materialize (no node, no link).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from cinemaweb.domain.graph import DroppedReference, Graph, Link, Node, node_id
from cinemaweb.domain.records import Dataset, Person, Work
from cinemaweb.domain.types import RELATION_ROLES, Relation, Role

logger = logging.getLogger(__name__)


def _index(people: Iterable[Person]) -> dict[str, Person]:
    """Index a role collection by id. The first record with a given id wins."""
    index: dict[str, Person] = {}
    for person in people:
        index.setdefault(person.id, person)
    return index


class _Builder:
    """Accumulates nodes and links for a single build() call."""

    def __init__(self) -> None:
        self.nodes: dict[str, Node] = {}
        self.links: list[Link] = []
        self.dropped: list[DroppedReference] = []

    def add_work(self, work: Work) -> str:
        nid = node_id(Role.WORK, work.id)
        if nid not in self.nodes:
            self.nodes[nid] = Node(
                id=nid,
                name=work.title,
                role=Role.WORK,
                year=work.year,
                genre=work.genre,
            )
        return nid

    def relate(
        self,
        work: Work,
        work_node: str,
        relation: Relation,
        person_id: str,
        index: dict[str, Person],
    ) -> None:
        person = index.get(person_id)
        if person is None:
            self.dropped.append(DroppedReference(work.id, relation, person_id))
            return
        role = RELATION_ROLES[relation]
        nid = node_id(role, person.id)
        if nid not in self.nodes:
            self.nodes[nid] = Node(id=nid, name=person.name, role=role)
        self.links.append(Link(source=work_node, target=nid, relation=relation))


def build(dataset: Dataset) -> Graph:
    """Build the node/link graph for *dataset*.

    Works are visited in document order; per work the cast is linked first
    (in cast order), then the director, then the casting director. A
    casting-director relation only materializes when the dataset carries a
    ``castingDirectors`` collection.

    Every call allocates fresh nodes, so positions never carry over between
    builds.
    """
    actors = _index(dataset.actors)
    directors = _index(dataset.directors)
    casting_directors = (
        _index(dataset.casting_directors) if dataset.casting_directors is not None else None
    )

    b = _Builder()
    for work in dataset.works:
        work_node = b.add_work(work)
        for actor_id in work.cast:
            b.relate(work, work_node, Relation.CAST, actor_id, actors)
        if work.director:
            b.relate(work, work_node, Relation.DIRECTOR, work.director, directors)
        if work.casting_director and casting_directors is not None:
            b.relate(
                work,
                work_node,
                Relation.CASTING_DIRECTOR,
                work.casting_director,
                casting_directors,
            )

    for ref in b.dropped:
        logger.debug(
            "Dropped %s reference %r on work %r", ref.relation, ref.person_id, ref.work_id
        )

    return Graph(nodes=tuple(b.nodes.values()), links=tuple(b.links), dropped=tuple(b.dropped))
