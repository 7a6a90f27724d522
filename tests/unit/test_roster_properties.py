"""Property-based tests for the roster grid split using Hypothesis."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest
from hypothesis import given
from hypothesis import strategies as st

from src.config.settings import RosterSettings
from src.roster.models import Roster
from src.roster.services import RosterService
from tests.fixtures.roster_rows import FakePool, person_row

ROLE_LABELS = [
    None,
    "",
    "Président",
    "président",
    "PRÉSIDENT",
    "Président ",
    " président",
    "Présidente de la commission",
    "Premier ministre",
    "Premier Ministre du Gouvernement",
    "Premier secrétaire",
    "Ministre de la Santé",
    "Ministre délégué",
    "Ministre-présidente",
    "Secrétaire d'État",
    "Conseillère spéciale",
]

roles = st.lists(st.sampled_from(ROLE_LABELS), max_size=12)


def _assemble(role_list: list[str | None]) -> tuple[list[dict[str, object]], Roster]:
    rows = [person_row(f"Personne {i}", role=role) for i, role in enumerate(role_list)]
    conn = AsyncMock()
    conn.fetch = AsyncMock(return_value=rows)
    service = RosterService(FakePool(conn), settings=RosterSettings())
    return rows, asyncio.run(service.assemble_roster())


def _folded(role: str | None) -> str:
    return (role or "").casefold()


@given(roles)
@pytest.mark.unit
def test_grid_slots_are_unique_and_first_match_wins(role_list: list[str | None]) -> None:
    """Property: one president, one prime minister, both taken from the first match."""
    rows, roster = _assemble(role_list)

    president_rows = [row for row in rows if _folded(row["role"]) == "président"]
    if president_rows:
        assert roster.president is not None
        assert roster.president.person.id == president_rows[0]["id"]
    else:
        assert roster.president is None

    premier_rows = [
        row
        for row in rows
        if "premier" in _folded(row["role"]) and _folded(row["role"]) != "président"
    ]
    if premier_rows:
        assert roster.prime_minister is not None
        assert roster.prime_minister.person.id == premier_rows[0]["id"]
    else:
        assert roster.prime_minister is None


@given(roles)
@pytest.mark.unit
def test_others_hold_only_remaining_ministers(role_list: list[str | None]) -> None:
    """Property: `others` is every other "ministre" row, never a grid head."""
    rows, roster = _assemble(role_list)

    heads = {member.person.id for member in (roster.president, roster.prime_minister) if member}
    other_ids = [member.person.id for member in roster.others]

    assert heads.isdisjoint(other_ids)
    assert len(other_ids) == len(set(other_ids))
    assert all("ministre" in _folded(member.person.role) for member in roster.others)
    expected = {
        row["id"]
        for row in rows
        if "ministre" in _folded(row["role"]) and row["id"] not in heads
    }
    assert set(other_ids) == expected
    assert len(list(roster)) == len(heads) + len(other_ids)
