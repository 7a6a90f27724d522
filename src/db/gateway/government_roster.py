"""Gateway for the government roster tables.

Owns every SQL statement issued against ``persons``, ``person_ministries``,
``ministries``, ``collab_grades`` and ``person_careers``. Each method returns
``Result[T, Error]``; asyncpg failures are mapped to ``DataSourceError`` and a
single-row lookup that does not match exactly one row yields ``NotFoundError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Sequence

from src.infra.db_errors import map_data_source_error
from src.infra.result import (
    DataSourceError,
    Err,
    Error,
    NotFoundError,
    Ok,
    Result,
    async_returns_result,
)
from src.infra.types.db import ConnectionProtocol
from src.roster.models import Ministry, MinistryAssociation, PersonId

__all__ = [
    "CareerRecord",
    "GovernmentRosterGateway",
    "PersonRecord",
]


@dataclass(slots=True, frozen=True)
class PersonRecord:
    """Raw projection of a ``persons`` row; fallbacks are not applied yet."""

    id: PersonId
    full_name: str | None
    photo_url: str | None = None
    role: str | None = None
    description: str | None = None
    superior_id: PersonId | None = None
    cabinet_role: str | None = None
    cabinet_order: int | None = None
    collab_grade: Any | None = None
    grade_label: str | None = None
    grade_precedence: int | None = None
    ministries: tuple[MinistryAssociation, ...] = ()
    subordinates: tuple["PersonRecord", ...] = ()

    @property
    def has_grade(self) -> bool:
        return self.grade_label is not None or self.grade_precedence is not None


@dataclass(slots=True, frozen=True)
class CareerRecord:
    id: Any
    person_id: PersonId
    event_date: date | None
    start_date: date | None
    end_date: date | None
    event_text: str | None
    title: str | None
    organisation: str | None
    sort_index: int | None


def _row_to_ministry_association(item: Mapping[str, Any]) -> MinistryAssociation:
    raw_ministry = item.get("ministries")
    ministry = None
    if raw_ministry:
        ministry = Ministry(
            id=raw_ministry.get("id"),
            name=raw_ministry.get("name"),
            short_name=raw_ministry.get("short_name"),
            category=raw_ministry.get("category"),
        )
    return MinistryAssociation(
        ministry_id=item.get("ministry_id"),
        is_primary=bool(item.get("is_primary")),
        role_label=item.get("role_label"),
        ministry=ministry,
    )


def _row_to_person(row: Mapping[str, Any]) -> PersonRecord:
    """Turn a database row (or a json_agg embedded object) into a PersonRecord."""
    data = dict(row)
    links = data.get("person_ministries") or ()
    subordinates = data.get("subordinates") or ()
    return PersonRecord(
        id=data["id"],
        full_name=data.get("full_name"),
        photo_url=data.get("photo_url"),
        role=data.get("role"),
        description=data.get("description"),
        superior_id=data.get("superior_id"),
        cabinet_role=data.get("cabinet_role"),
        cabinet_order=data.get("cabinet_order"),
        collab_grade=data.get("collab_grade"),
        grade_label=data.get("grade_label"),
        grade_precedence=data.get("grade_precedence"),
        ministries=tuple(_row_to_ministry_association(item) for item in links),
        subordinates=tuple(_row_to_person(item) for item in subordinates),
    )


def _row_to_career(row: Mapping[str, Any]) -> CareerRecord:
    data = dict(row)
    return CareerRecord(
        id=data.get("id"),
        person_id=data["person_id"],
        event_date=data.get("event_date"),
        start_date=data.get("start_date"),
        end_date=data.get("end_date"),
        event_text=data.get("event_text"),
        title=data.get("title"),
        organisation=data.get("organisation"),
        sort_index=data.get("sort_index"),
    )


class GovernmentRosterGateway:
    """Encapsulate read-only queries over the roster tables."""

    def __init__(self, *, schema: str = "public") -> None:
        self._schema = schema

    def _ministries_join(self, person_alias: str) -> str:
        # One row per person; associations keep the order the database returns them in.
        return f"""
        LEFT JOIN LATERAL (
            SELECT json_agg(
                json_build_object(
                    'ministry_id', pm.ministry_id,
                    'is_primary', pm.is_primary,
                    'role_label', pm.role_label,
                    'ministries', CASE WHEN m.id IS NULL THEN NULL ELSE json_build_object(
                        'id', m.id,
                        'name', m.name,
                        'short_name', m.short_name,
                        'category', m.category
                    ) END
                )
            ) AS person_ministries
            FROM {self._schema}.person_ministries AS pm
            LEFT JOIN {self._schema}.ministries AS m ON m.id = pm.ministry_id
            WHERE pm.person_id = {person_alias}.id
        ) AS links ON TRUE
        """

    @async_returns_result(DataSourceError, mapper=map_data_source_error)
    async def fetch_persons(
        self, connection: ConnectionProtocol
    ) -> Result[Sequence[PersonRecord], Error]:
        """Fetch every person with their ministry associations."""
        sql = f"""
        SELECT p.id, p.full_name, p.photo_url, p.role, p.description,
               p.cabinet_role, p.cabinet_order,
               COALESCE(links.person_ministries, '[]'::json) AS person_ministries
        FROM {self._schema}.persons AS p
        {self._ministries_join("p")}
        """
        rows = await connection.fetch(sql)
        return Ok([_row_to_person(row) for row in rows])

    @async_returns_result(DataSourceError, mapper=map_data_source_error)
    async def fetch_person(
        self, connection: ConnectionProtocol, *, person_id: PersonId
    ) -> Result[PersonRecord, Error]:
        """Fetch one person; the id must match exactly one row.

        Args:
            connection: database connection
            person_id: person id

        Returns:
            Result[PersonRecord, Error]: NotFoundError when zero or several rows match
        """
        sql = f"""
        SELECT p.id, p.full_name, p.photo_url, p.role, p.description, p.superior_id,
               COALESCE(links.person_ministries, '[]'::json) AS person_ministries
        FROM {self._schema}.persons AS p
        {self._ministries_join("p")}
        WHERE p.id = $1
        LIMIT 2
        """
        rows = await connection.fetch(sql, person_id)
        if len(rows) != 1:
            return Err(
                NotFoundError(
                    f"Expected exactly one person with id {person_id}, got {len(rows)}",
                    context={"person_id": str(person_id), "matched_rows": len(rows)},
                )
            )
        return Ok(_row_to_person(rows[0]))

    @async_returns_result(DataSourceError, mapper=map_data_source_error)
    async def fetch_career(
        self, connection: ConnectionProtocol, *, person_id: PersonId
    ) -> Result[Sequence[CareerRecord], Error]:
        """Fetch career events by sort_index ascending, then event_date descending (nulls last)."""
        sql = f"""
        SELECT id, person_id, event_date, start_date, end_date,
               event_text, title, organisation, sort_index
        FROM {self._schema}.person_careers
        WHERE person_id = $1
        ORDER BY sort_index ASC NULLS LAST, event_date DESC NULLS LAST
        """
        rows = await connection.fetch(sql, person_id)
        return Ok([_row_to_career(row) for row in rows])

    @async_returns_result(DataSourceError, mapper=map_data_source_error)
    async def fetch_subordinates(
        self, connection: ConnectionProtocol, *, superior_id: PersonId
    ) -> Result[Sequence[PersonRecord], Error]:
        """Fetch direct subordinates (one level) by grade precedence, then cabinet_order."""
        sql = f"""
        SELECT p.id, p.full_name, p.role, p.photo_url, p.description,
               p.cabinet_role, p.cabinet_order, p.collab_grade,
               g.label AS grade_label, g.precedence AS grade_precedence
        FROM {self._schema}.persons AS p
        LEFT JOIN {self._schema}.collab_grades AS g ON g.id = p.collab_grade
        WHERE p.superior_id = $1
        ORDER BY g.precedence ASC NULLS LAST, p.cabinet_order ASC NULLS LAST
        """
        rows = await connection.fetch(sql, superior_id)
        return Ok([_row_to_person(row) for row in rows])

    @async_returns_result(DataSourceError, mapper=map_data_source_error)
    async def fetch_pole_leaders(
        self,
        connection: ConnectionProtocol,
        *,
        superior_id: PersonId,
        pole_pattern: str,
    ) -> Result[Sequence[PersonRecord], Error]:
        """Fetch the pole leaders among direct subordinates, each with their own
        direct subordinates embedded (one level further).

        Both labels are brought to NFC before matching so that decomposed
        accents still match the composed pattern. `normalize()` needs
        PostgreSQL 13 or later.

        Args:
            connection: database connection
            superior_id: id of the superior
            pole_pattern: ILIKE pattern applied to cabinet_role or the grade label
        """
        sql = f"""
        SELECT p.id, p.full_name, p.description, p.photo_url, p.cabinet_role, p.role,
               p.collab_grade, g.label AS grade_label,
               COALESCE(subs.subordinates, '[]'::json) AS subordinates
        FROM {self._schema}.persons AS p
        LEFT JOIN {self._schema}.collab_grades AS g ON g.id = p.collab_grade
        LEFT JOIN LATERAL (
            SELECT json_agg(
                json_build_object(
                    'id', s.id,
                    'full_name', s.full_name,
                    'role', s.role,
                    'cabinet_role', s.cabinet_role,
                    'photo_url', s.photo_url,
                    'description', s.description,
                    'collab_grade', s.collab_grade,
                    'grade_label', sg.label
                )
                ORDER BY s.full_name ASC
            ) AS subordinates
            FROM {self._schema}.persons AS s
            LEFT JOIN {self._schema}.collab_grades AS sg ON sg.id = s.collab_grade
            WHERE s.superior_id = p.id
        ) AS subs ON TRUE
        WHERE p.superior_id = $1
          AND (normalize(p.cabinet_role, NFC) ILIKE $2 OR normalize(g.label, NFC) ILIKE $2)
        ORDER BY p.full_name ASC
        """
        rows = await connection.fetch(sql, superior_id, pole_pattern)
        return Ok([_row_to_person(row) for row in rows])
