"""Detail sheet: four concurrent loads merged into one view model."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable

import structlog

from src.config.settings import RosterSettings, get_settings
from src.db.gateway.government_roster import GovernmentRosterGateway
from src.infra.result import Error
from src.infra.types.db import PoolProtocol
from src.roster.classification import RoleClassifier
from src.roster.models import Person, PersonId, PersonSheet
from src.roster.services.cabinet_service import CabinetService
from src.roster.services.career_service import CareerService
from src.roster.services.person_service import PersonDetailService
from src.roster.services.pole_service import PoleService

LOGGER = structlog.get_logger(__name__)


async def _gather_all_or_nothing(*aws: Awaitable[Any]) -> list[Any]:
    """Await every awaitable; on the first failure cancel the rest and re-raise it."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        # Drain the cancelled siblings so none is left with an unretrieved exception.
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class PersonSheetService:
    """Merge profile, career, cabinet and poles for one person."""

    def __init__(
        self,
        pool: PoolProtocol,
        *,
        gateway: GovernmentRosterGateway | None = None,
        settings: RosterSettings | None = None,
        classifier: RoleClassifier | None = None,
        details: PersonDetailService | None = None,
        career: CareerService | None = None,
        cabinet: CabinetService | None = None,
        poles: PoleService | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        options: dict[str, Any] = {
            "gateway": gateway,
            "settings": self._settings,
            "classifier": classifier,
        }
        self._details = details or PersonDetailService(pool, **options)
        self._career = career or CareerService(pool, **options)
        self._cabinet = cabinet or CabinetService(pool, **options)
        self._poles = poles or PoleService(pool, **options)
        self._latest_request = 0

    async def load_person_sheet(self, person_id: PersonId) -> PersonSheet:
        """Load the four parts concurrently and merge them.

        All-or-nothing: the first failing part fails the whole sheet and no
        partial view model is produced.

        Raises:
            NotFoundError: the person does not exist.
            DataSourceError: any of the four queries failed.
        """
        try:
            person, career, cabinet, poles = await _gather_all_or_nothing(
                self._details.load_person(person_id),
                self._career.load_career(person_id),
                self._cabinet.load_cabinet(person_id),
                self._poles.load_poles(person_id),
            )
        except Error as error:
            LOGGER.warning(
                "sheet.load.failed",
                person_id=str(person_id),
                error_type=type(error).__name__,
                error=str(error),
            )
            raise

        sheet = PersonSheet(
            person=person,
            career=career,
            cabinet=cabinet,
            poles=poles,
            headline=self._headline(person),
            biography=person.description or self._settings.default_description,
            ministry_badges=self._badges(person),
        )
        LOGGER.info(
            "sheet.load.done",
            person_id=str(person_id),
            career=len(career),
            cabinet=len(cabinet),
            poles=len(poles),
        )
        return sheet

    async def open_sheet(self, person_id: PersonId) -> PersonSheet | None:
        """Load a sheet for display, dropping results superseded by a newer call.

        Each call takes a request token. When another `open_sheet` call starts
        before this one completes, this call's outcome (sheet or error) is
        discarded and None is returned.
        """
        self._latest_request += 1
        token = self._latest_request
        with structlog.contextvars.bound_contextvars(sheet_request=token):
            try:
                sheet = await self.load_person_sheet(person_id)
            except Error:
                if token != self._latest_request:
                    LOGGER.info("sheet.open.stale_discarded", person_id=str(person_id))
                    return None
                raise
            if token != self._latest_request:
                LOGGER.info("sheet.open.stale_discarded", person_id=str(person_id))
                return None
            return sheet

    def _headline(self, person: Person) -> str:
        first = person.ministries[0] if person.ministries else None
        return (first.role_label if first is not None else None) or person.role

    @staticmethod
    def _badges(person: Person) -> tuple[str, ...]:
        badges: list[str] = []
        for association in person.ministries:
            short_name = association.ministry.short_name if association.ministry else None
            label = short_name or association.role_label
            if label:
                badges.append(label)
        return tuple(badges)
