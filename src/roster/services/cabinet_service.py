from __future__ import annotations

import structlog

from src.db.gateway.government_roster import PersonRecord
from src.roster.models import Person, PersonId
from src.roster.ordering import sort_cabinet
from src.roster.services.base import RosterServiceBase, id_key

LOGGER = structlog.get_logger(__name__)


class CabinetService(RosterServiceBase):
    """Load the direct staff of a person (one level down, never recursive)."""

    async def load_cabinet(self, person_id: PersonId) -> tuple[Person, ...]:
        """Return direct subordinates ordered by grade precedence then cabinet order.

        Pole leaders stay in the cabinet unless
        `cabinet_excludes_pole_leaders` is set.
        """
        records = await self._query(
            "cabinet.load",
            lambda connection: self._gateway.fetch_subordinates(connection, superior_id=person_id),
            person_id=str(person_id),
        )

        root = id_key(person_id)
        staff: list[PersonRecord] = []
        for record in records:
            if id_key(record.id) == root:
                LOGGER.warning("cabinet.load.self_reference", person_id=root)
                continue
            if self._settings.cabinet_excludes_pole_leaders and self._is_pole_leader(record):
                continue
            staff.append(record)

        cabinet = sort_cabinet(
            self._build_person(record, display_grade=self._display_grade(record))
            for record in staff
        )
        LOGGER.debug("cabinet.load.done", person_id=root, members=len(cabinet))
        return tuple(cabinet)

    def _display_grade(self, record: PersonRecord) -> str:
        return (
            record.grade_label
            or record.cabinet_role
            or self._settings.default_collaborator_grade
        )
