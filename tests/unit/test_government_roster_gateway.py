from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock
from uuid import uuid4

import asyncpg
import pytest

from src.db.gateway.government_roster import GovernmentRosterGateway
from src.infra.result import DataSourceError, NotFoundError, get_error_metrics
from tests.fixtures.roster_rows import career_row, ministry_link, person_row, sql_of


def _pg_error(sqlstate: str) -> asyncpg.PostgresError:
    error = asyncpg.PostgresError(f"error-{sqlstate}")
    error.sqlstate = sqlstate
    return error


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fetch_persons_embeds_ministries(mock_conn: AsyncMock) -> None:
    gateway = GovernmentRosterGateway()
    mock_conn.fetch.return_value = [
        person_row(
            "Inès Bernard",
            role="Ministre de la Santé",
            ministries=[ministry_link("Santé", is_primary=True, role_label="Ministre")],
        ),
        person_row("Louis Martin", role="Premier ministre"),
    ]

    result = await gateway.fetch_persons(mock_conn)

    assert result.is_ok()
    records = result.unwrap()
    assert [r.full_name for r in records] == ["Inès Bernard", "Louis Martin"]
    association = records[0].ministries[0]
    assert association.is_primary is True
    assert association.role_label == "Ministre"
    assert association.ministry is not None
    assert association.ministry.short_name == "Santé"
    assert records[1].ministries == ()

    sql = sql_of(mock_conn.fetch.await_args)
    assert "FROM public.persons AS p" in sql
    assert "json_agg" in sql
    assert "public.person_ministries" in sql


@pytest.mark.unit
@pytest.mark.asyncio
async def test_schema_is_applied_to_every_table(mock_conn: AsyncMock) -> None:
    gateway = GovernmentRosterGateway(schema="gouv")

    await gateway.fetch_subordinates(mock_conn, superior_id=uuid4())

    sql = sql_of(mock_conn.fetch.await_args)
    assert "gouv.persons" in sql
    assert "gouv.collab_grades" in sql
    assert "public." not in sql


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fetch_person_requires_exactly_one_row(mock_conn: AsyncMock) -> None:
    gateway = GovernmentRosterGateway()
    person_id = uuid4()
    mock_conn.fetch.return_value = [person_row("Camille Durand", id=person_id, role="Président")]

    result = await gateway.fetch_person(mock_conn, person_id=person_id)

    assert result.unwrap().id == person_id
    assert mock_conn.fetch.await_args.args[1] == person_id
    sql = sql_of(mock_conn.fetch.await_args)
    assert "WHERE p.id = $1" in sql
    assert "LIMIT 2" in sql


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("matched", [0, 2])
async def test_fetch_person_not_found_when_not_single(mock_conn: AsyncMock, matched: int) -> None:
    gateway = GovernmentRosterGateway()
    mock_conn.fetch.return_value = [person_row(f"Doublon {i}") for i in range(matched)]

    result = await gateway.fetch_person(mock_conn, person_id="dup")

    assert result.is_err()
    error = result.unwrap_err()
    assert isinstance(error, NotFoundError)
    assert error.context["matched_rows"] == matched
    assert error.context["person_id"] == "dup"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fetch_career_orders_by_index_then_date(mock_conn: AsyncMock) -> None:
    gateway = GovernmentRosterGateway()
    person_id = uuid4()
    mock_conn.fetch.return_value = [
        career_row(person_id, id=1, event_date=date(2022, 5, 20), sort_index=1),
    ]

    result = await gateway.fetch_career(mock_conn, person_id=person_id)

    records = result.unwrap()
    assert records[0].event_date == date(2022, 5, 20)
    assert records[0].sort_index == 1
    sql = sql_of(mock_conn.fetch.await_args)
    assert "ORDER BY sort_index ASC NULLS LAST, event_date DESC NULLS LAST" in sql


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fetch_subordinates_orders_by_grade_then_cabinet_order(mock_conn: AsyncMock) -> None:
    gateway = GovernmentRosterGateway()
    mock_conn.fetch.return_value = [
        person_row("Paul Roux", grade_label="Directeur de cabinet", grade_precedence=1),
    ]

    result = await gateway.fetch_subordinates(mock_conn, superior_id="root")

    record = result.unwrap()[0]
    assert record.grade_label == "Directeur de cabinet"
    assert record.has_grade is True
    sql = sql_of(mock_conn.fetch.await_args)
    assert "WHERE p.superior_id = $1" in sql
    assert "ORDER BY g.precedence ASC NULLS LAST, p.cabinet_order ASC NULLS LAST" in sql


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fetch_pole_leaders_passes_pattern_and_embeds_members(
    mock_conn: AsyncMock,
) -> None:
    gateway = GovernmentRosterGateway()
    member_id = uuid4()
    mock_conn.fetch.return_value = [
        person_row(
            "Yasmine Faure",
            cabinet_role="Chef de pôle Économie",
            subordinates=[
                {"id": str(member_id), "full_name": "Wassim Girard", "grade_label": None},
            ],
        )
    ]

    result = await gateway.fetch_pole_leaders(
        mock_conn, superior_id="root", pole_pattern="%pôle%"
    )

    leader = result.unwrap()[0]
    assert leader.subordinates[0].full_name == "Wassim Girard"
    assert leader.subordinates[0].id == str(member_id)
    assert mock_conn.fetch.await_args.args[1:] == ("root", "%pôle%")
    sql = sql_of(mock_conn.fetch.await_args)
    assert "(normalize(p.cabinet_role, NFC) ILIKE $2 OR normalize(g.label, NFC) ILIKE $2)" in sql
    assert "ORDER BY s.full_name ASC" in sql
    assert sql.endswith("ORDER BY p.full_name ASC")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_postgres_error_becomes_data_source_error(mock_conn: AsyncMock) -> None:
    gateway = GovernmentRosterGateway()
    mock_conn.fetch.side_effect = _pg_error("42P01")

    result = await gateway.fetch_persons(mock_conn)

    assert result.is_err()
    error = result.unwrap_err()
    assert isinstance(error, DataSourceError)
    assert error.context["sqlstate"] == "42P01"
    assert error.context["error_type"] == "undefined_table"
    assert get_error_metrics()["DataSourceError"] == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unexpected_exception_becomes_data_source_error(mock_conn: AsyncMock) -> None:
    gateway = GovernmentRosterGateway()
    mock_conn.fetch.side_effect = ConnectionResetError("peer gone")

    result = await gateway.fetch_career(mock_conn, person_id=1)

    error = result.unwrap_err()
    assert isinstance(error, DataSourceError)
    assert isinstance(error.cause, ConnectionResetError)
