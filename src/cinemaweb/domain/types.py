"""Node roles and link relations.

The data model is fixed-shape: three person role collections hang off
works, each contributing one relation type.
"""

from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    """Role tag carried by every node."""

    WORK = "work"
    ACTOR = "actor"
    DIRECTOR = "director"
    CASTING_DIRECTOR = "castingDirector"


class Relation(StrEnum):
    """Relation tag carried by every link (always work -> person)."""

    CAST = "cast"
    DIRECTOR = "director"
    CASTING_DIRECTOR = "castingDirector"


# Person role reached through each relation.
RELATION_ROLES: dict[Relation, Role] = {
    Relation.CAST: Role.ACTOR,
    Relation.DIRECTOR: Role.DIRECTOR,
    Relation.CASTING_DIRECTOR: Role.CASTING_DIRECTOR,
}
