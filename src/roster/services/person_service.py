from __future__ import annotations

import structlog

from src.roster.models import Person, PersonId
from src.roster.services.base import RosterServiceBase

LOGGER = structlog.get_logger(__name__)


class PersonDetailService(RosterServiceBase):
    """Load one person's profile with every ministry association."""

    async def load_person(self, person_id: PersonId) -> Person:
        """Return the person; associations are kept as returned, not resolved.

        Raises:
            NotFoundError: zero or several rows match `person_id`.
            DataSourceError: the query failed.
        """
        record = await self._query(
            "person.load",
            lambda connection: self._gateway.fetch_person(connection, person_id=person_id),
            person_id=str(person_id),
        )
        LOGGER.debug("person.load.done", person_id=str(person_id), ministries=len(record.ministries))
        return self._build_person(record)
