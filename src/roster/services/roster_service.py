"""Assemble the government grid: president, prime minister, then ministers."""

from __future__ import annotations

import structlog

from src.db.gateway.government_roster import PersonRecord
from src.roster.classification import RoleKind
from src.roster.models import Roster, RosterMember
from src.roster.ordering import sort_ministers
from src.roster.services.base import RosterServiceBase

LOGGER = structlog.get_logger(__name__)


class RosterService(RosterServiceBase):
    """Load every person once and split them into the grid's three slots."""

    async def assemble_roster(self) -> Roster:
        """Return the roster view model.

        The first person whose role is exactly "président" becomes the
        president and the first whose role contains "premier" the prime
        minister. Everyone else whose role contains "ministre" lands in
        `others`, sorted by cabinet order then name. Anyone else is dropped.

        Raises:
            DataSourceError: the person query failed.
        """
        records = await self._query(
            "roster.assemble",
            lambda connection: self._gateway.fetch_persons(connection),
        )

        president: PersonRecord | None = None
        prime_minister: PersonRecord | None = None
        others: list[PersonRecord] = []
        dropped = 0
        for record in records:
            kind = self._classifier.classify(record.role)
            if kind is RoleKind.PRESIDENT and president is None:
                president = record
            elif kind is RoleKind.PRIME_MINISTER and prime_minister is None:
                prime_minister = record
            elif self._classifier.is_minister(record.role):
                others.append(record)
            else:
                dropped += 1

        roster = Roster(
            president=self._to_member(president) if president is not None else None,
            prime_minister=self._to_member(prime_minister) if prime_minister is not None else None,
            others=tuple(sort_ministers(self._to_member(record) for record in others)),
        )
        LOGGER.info(
            "roster.assemble.done",
            total=len(records),
            has_president=roster.president is not None,
            has_prime_minister=roster.prime_minister is not None,
            others=len(roster.others),
            dropped=dropped,
        )
        return roster

    def _to_member(self, record: PersonRecord) -> RosterMember:
        person = self._build_person(record)
        primary = person.primary_ministry()
        ministry = primary.ministry if primary is not None else None
        role_label = primary.role_label if primary is not None else None
        ministry_label = (
            (ministry.short_name if ministry is not None else None)
            or role_label
            or self._settings.default_ministry_label
        )
        return RosterMember(
            person=person,
            ministry=ministry,
            role_label=role_label,
            ministry_label=ministry_label,
        )
