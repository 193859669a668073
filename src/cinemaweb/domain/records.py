"""Input records — the relational dataset document.

Mirrors the JSON document shape exactly (``projects``, ``actors``,
``directors``, optional ``castingDirectors``). Python attribute names are
snake_case; the JSON keys are kept as aliases.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Person(BaseModel):
    """A person within one role collection. Ids are unique per collection only."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class Work(BaseModel):
    """A creative work (film, show), listed under ``projects`` in the document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    year: int
    genre: str
    cast: list[str] = Field(default_factory=list)
    director: str | None = None
    casting_director: str | None = Field(default=None, alias="castingDirector")


class Dataset(BaseModel):
    """The full document: works plus the three person collections.

    ``casting_directors`` is ``None`` when the collection is absent from the
    document, which disables the casting-director relation entirely. An
    empty list is a present (but empty) collection.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    works: list[Work] = Field(default_factory=list, alias="projects")
    actors: list[Person] = Field(default_factory=list)
    directors: list[Person] = Field(default_factory=list)
    casting_directors: list[Person] | None = Field(default=None, alias="castingDirectors")

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Dataset:
        """Validate a decoded JSON document.

        Raises:
            pydantic.ValidationError: If the document does not have the
                expected shape.
        """
        return cls.model_validate(document)

    def to_document(self) -> dict[str, Any]:
        """Serialize back to the JSON document shape."""
        return self.model_dump(by_alias=True, exclude_none=True)
