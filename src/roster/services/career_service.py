from __future__ import annotations

from datetime import date
from typing import Any

import structlog

from src.db.gateway.government_roster import CareerRecord
from src.roster.models import CareerEvent, PersonId
from src.roster.ordering import sort_career
from src.roster.services.base import RosterServiceBase

LOGGER = structlog.get_logger(__name__)


def _format_date(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class CareerService(RosterServiceBase):
    """Load a person's career timeline."""

    async def load_career(self, person_id: PersonId) -> tuple[CareerEvent, ...]:
        """Return career events ordered by `sort_index`, then most recent first.

        An empty timeline is a valid result.
        """
        records = await self._query(
            "career.load",
            lambda connection: self._gateway.fetch_career(connection, person_id=person_id),
            person_id=str(person_id),
        )
        events = sort_career(self._to_event(record) for record in records)
        LOGGER.debug("career.load.done", person_id=str(person_id), events=len(events))
        return tuple(events)

    def _to_event(self, record: CareerRecord) -> CareerEvent:
        period = _format_date(record.event_date) or _format_date(record.start_date)
        return CareerEvent(
            id=record.id,
            person_id=record.person_id,
            event_date=record.event_date,
            start_date=record.start_date,
            end_date=record.end_date,
            event_text=record.event_text,
            title=record.title,
            organisation=record.organisation,
            sort_index=record.sort_index,
            period_label=period or self._settings.default_career_period,
            heading=record.event_text or record.title or self._settings.default_career_heading,
        )
