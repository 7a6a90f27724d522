"""View models handed to the rendering layer.

All instances are frozen; every aggregation call builds a fresh tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterator, Union
from uuid import UUID

__all__ = [
    "PersonId",
    "Ministry",
    "MinistryAssociation",
    "CollabGrade",
    "Person",
    "CareerEvent",
    "Pole",
    "RosterMember",
    "Roster",
    "PersonSheet",
]

PersonId = Union[UUID, int, str]


@dataclass(slots=True, frozen=True)
class Ministry:
    id: Any
    name: str | None
    short_name: str | None = None
    category: str | None = None


@dataclass(slots=True, frozen=True)
class MinistryAssociation:
    ministry_id: Any
    is_primary: bool
    role_label: str | None
    ministry: Ministry | None = None


@dataclass(slots=True, frozen=True)
class CollabGrade:
    label: str | None
    precedence: int | None = None


@dataclass(slots=True, frozen=True)
class Person:
    id: PersonId
    full_name: str
    photo_url: str
    role: str
    description: str | None
    superior_id: PersonId | None = None
    cabinet_role: str | None = None
    cabinet_order: int | None = None
    collab_grade: Any | None = None
    grade: CollabGrade | None = None
    ministries: tuple[MinistryAssociation, ...] = ()
    display_grade: str | None = None

    @property
    def grade_label(self) -> str | None:
        return self.grade.label if self.grade is not None else None

    def primary_ministry(self) -> MinistryAssociation | None:
        """Return the association flagged primary, else the first one returned."""
        for association in self.ministries:
            if association.is_primary:
                return association
        return self.ministries[0] if self.ministries else None


@dataclass(slots=True, frozen=True)
class CareerEvent:
    id: Any
    person_id: PersonId
    event_date: date | None
    start_date: date | None
    end_date: date | None
    event_text: str | None
    title: str | None
    organisation: str | None
    sort_index: int | None
    period_label: str
    heading: str


@dataclass(slots=True, frozen=True)
class Pole:
    leader: Person
    members: tuple[Person, ...] = ()


@dataclass(slots=True, frozen=True)
class RosterMember:
    person: Person
    ministry: Ministry | None
    role_label: str | None
    ministry_label: str


@dataclass(slots=True, frozen=True)
class Roster:
    president: RosterMember | None
    prime_minister: RosterMember | None
    others: tuple[RosterMember, ...] = ()

    def __iter__(self) -> Iterator[RosterMember]:
        """Grid order: president, prime minister, then the other ministers."""
        if self.president is not None:
            yield self.president
        if self.prime_minister is not None:
            yield self.prime_minister
        yield from self.others


@dataclass(slots=True, frozen=True)
class PersonSheet:
    person: Person
    career: tuple[CareerEvent, ...]
    cabinet: tuple[Person, ...]
    poles: tuple[Pole, ...]
    headline: str
    biography: str
    ministry_badges: tuple[str, ...] = ()
