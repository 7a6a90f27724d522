"""Shared plumbing for the roster loaders.

Every loader receives the data-source handle (a pool) explicitly, acquires its
own connection per call and turns gateway ``Err`` results into raised errors.
"""

from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

import structlog

from src.config.settings import RosterSettings, get_settings
from src.db.gateway.government_roster import GovernmentRosterGateway, PersonRecord
from src.infra.db_errors import map_data_source_error
from src.infra.result import Error, Result
from src.infra.types.db import ConnectionProtocol, PoolProtocol
from src.roster.classification import DEFAULT_CLASSIFIER, RoleClassifier
from src.roster.models import CollabGrade, Person, PersonId

LOGGER = structlog.get_logger(__name__)

T = TypeVar("T")


def id_key(person_id: PersonId | None) -> str:
    """Comparable form of an id; embedded JSON rows carry ids as strings."""
    return str(person_id)


class RosterServiceBase:
    def __init__(
        self,
        pool: PoolProtocol,
        *,
        gateway: GovernmentRosterGateway | None = None,
        settings: RosterSettings | None = None,
        classifier: RoleClassifier | None = None,
    ) -> None:
        self._pool = pool
        self._settings = settings or get_settings()
        self._gateway = gateway or GovernmentRosterGateway(schema=self._settings.db_schema)
        self._classifier = classifier or DEFAULT_CLASSIFIER

    async def _query(
        self,
        operation: str,
        call: Callable[[ConnectionProtocol], Awaitable[Result[T, Error]]],
        **log_fields: object,
    ) -> T:
        """Run one gateway call on a freshly acquired connection.

        Raises the carried ``Error`` when the gateway returns ``Err``; failures
        while acquiring the connection are mapped to ``DataSourceError``.
        """
        try:
            async with self._pool.acquire() as connection:
                result = await call(connection)
        except Error:
            raise
        except Exception as exc:
            error = map_data_source_error(exc)
            LOGGER.warning(
                f"{operation}.failed",
                error_type=type(error).__name__,
                error=str(error),
                **log_fields,
            )
            raise error from exc

        if result.is_err():
            error = result.unwrap_err()
            LOGGER.warning(
                f"{operation}.failed",
                error_type=type(error).__name__,
                error=str(error),
                **log_fields,
            )
            raise error
        return result.unwrap()

    def _build_person(self, record: PersonRecord, *, display_grade: str | None = None) -> Person:
        """Resolve a raw record into a view-model person with fallbacks applied."""
        settings = self._settings
        grade = (
            CollabGrade(label=record.grade_label, precedence=record.grade_precedence)
            if record.has_grade
            else None
        )
        return Person(
            id=record.id,
            full_name=record.full_name or "",
            photo_url=record.photo_url or settings.placeholder_photo_url,
            role=record.role or settings.default_role_label,
            description=record.description,
            superior_id=record.superior_id,
            cabinet_role=record.cabinet_role,
            cabinet_order=record.cabinet_order,
            collab_grade=record.collab_grade,
            grade=grade,
            ministries=record.ministries,
            display_grade=display_grade,
        )

    def _is_pole_leader(self, record: PersonRecord) -> bool:
        return self._classifier.is_pole_leader(record.cabinet_role, record.grade_label)
