"""Poles: informal delegation groups led by a member of someone's staff.

A pole leader is a direct subordinate whose cabinet role or grade label
mentions "pôle"; the pole's members are that leader's own direct
subordinates. Nothing is traversed deeper than these two levels.
"""

from __future__ import annotations

import structlog

from src.db.gateway.government_roster import PersonRecord
from src.roster.models import PersonId, Pole
from src.roster.ordering import name_key, sort_by_name
from src.roster.services.base import RosterServiceBase, id_key

LOGGER = structlog.get_logger(__name__)


class PoleService(RosterServiceBase):
    async def load_poles(self, person_id: PersonId) -> tuple[Pole, ...]:
        """Return the poles under `person_id`, leaders and members ordered by name.

        Members that are pole leaders themselves are left out of the member
        list. A person without poles yields an empty tuple.
        """
        records = await self._query(
            "poles.load",
            lambda connection: self._gateway.fetch_pole_leaders(
                connection,
                superior_id=person_id,
                pole_pattern=self._classifier.pole_pattern,
            ),
            person_id=str(person_id),
        )

        root = id_key(person_id)
        leaders = [
            record
            for record in records
            if id_key(record.id) != root and self._is_pole_leader(record)
        ]

        poles: list[Pole] = []
        for leader_record in leaders:
            visited = {root, id_key(leader_record.id)}
            members = [
                self._build_person(member, display_grade=self._member_grade(member))
                for member in leader_record.subordinates
                if id_key(member.id) not in visited and not self._is_pole_leader(member)
            ]
            leader = self._build_person(
                leader_record, display_grade=self._leader_grade(leader_record)
            )
            poles.append(Pole(leader=leader, members=tuple(sort_by_name(members))))

        poles.sort(key=lambda pole: name_key(pole.leader.full_name))
        LOGGER.debug("poles.load.done", person_id=root, poles=len(poles))
        return tuple(poles)

    def _leader_grade(self, record: PersonRecord) -> str:
        return (
            record.cabinet_role
            or record.grade_label
            or self._settings.default_pole_leader_grade
        )

    def _member_grade(self, record: PersonRecord) -> str:
        return (
            record.cabinet_role
            or record.grade_label
            or record.role
            or self._settings.default_pole_member_grade
        )
