"""Sort rules for roster, cabinet and career sequences.

The gateway already requests these orders from the database; they are applied
again here (stable sorts) so the view models keep their ordering whatever the
data source returns.
"""

from __future__ import annotations

import unicodedata
from typing import Iterable, TypeVar

from src.roster.models import CareerEvent, Person

T = TypeVar("T")

__all__ = ["name_key", "sort_by_name", "sort_ministers", "sort_cabinet", "sort_career"]


def name_key(name: str | None) -> tuple[str, str, str]:
    """Collation key for display names.

    Accents and case are ignored first, then case-insensitive accented form,
    then the raw text, so "Élodie" sorts next to "Elodie" rather than after "Z".
    """
    raw = name or ""
    decomposed = unicodedata.normalize("NFKD", raw)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return base, unicodedata.normalize("NFC", raw).casefold(), raw


def _nulls_last(value: int | None) -> tuple[bool, int]:
    return value is None, value if value is not None else 0


def sort_by_name(people: Iterable[Person]) -> list[Person]:
    return sorted(people, key=lambda person: name_key(person.full_name))


def sort_ministers(people: Iterable[T]) -> list[T]:
    """Order by `cabinet_order` ascending (missing last), then by name.

    Accepts either persons or objects exposing a `person` attribute.
    """

    def key(item: T) -> tuple[tuple[bool, int], tuple[str, str, str]]:
        person: Person = getattr(item, "person", item)  # type: ignore[assignment]
        return _nulls_last(person.cabinet_order), name_key(person.full_name)

    return sorted(people, key=key)


def sort_cabinet(people: Iterable[Person]) -> list[Person]:
    """Order by grade precedence then `cabinet_order`, both ascending, missing last."""

    def key(person: Person) -> tuple[tuple[bool, int], tuple[bool, int]]:
        precedence = person.grade.precedence if person.grade is not None else None
        return _nulls_last(precedence), _nulls_last(person.cabinet_order)

    return sorted(people, key=key)


def sort_career(events: Iterable[CareerEvent]) -> list[CareerEvent]:
    """Order by `sort_index` ascending, ties by `event_date` descending; missing last."""
    items = list(events)
    dated = sorted(
        (event for event in items if event.event_date is not None),
        key=lambda event: event.event_date,  # type: ignore[arg-type, return-value]
        reverse=True,
    )
    undated = [event for event in items if event.event_date is None]
    return sorted(dated + undated, key=lambda event: _nulls_last(event.sort_index))
