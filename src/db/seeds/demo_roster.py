"""Seed a small demo government: a president, a prime minister, two ministers
and the president's cabinet with one pole."""

from __future__ import annotations

from typing import Any

import structlog
from dotenv import load_dotenv

from src.config.db_settings import PoolConfig
from src.config.settings import get_settings
from src.db.pool import close_pool, init_pool

LOGGER = structlog.get_logger(__name__)

_GRADES = (
    ("Directeur de cabinet", 1),
    ("Conseiller", 3),
    ("Chef de pôle", 2),
)

_MINISTRIES = (
    ("health", "Ministère de la Santé", "Santé", "social"),
    ("education", "Ministère de l'Éducation nationale", "Éducation", "social"),
)


async def seed_demo_roster(connection: Any, *, schema: str = "public") -> dict[str, Any]:
    """Insert the demo rows and return the generated ids keyed by slug."""
    ids: dict[str, Any] = {}

    for label, precedence in _GRADES:
        ids[f"grade:{label}"] = await connection.fetchval(
            f"""
            INSERT INTO {schema}.collab_grades (label, precedence)
            VALUES ($1, $2)
            ON CONFLICT (label) DO UPDATE SET precedence = EXCLUDED.precedence
            RETURNING id
            """,
            label,
            precedence,
        )

    for slug, name, short_name, category in _MINISTRIES:
        ids[f"ministry:{slug}"] = await connection.fetchval(
            f"""
            INSERT INTO {schema}.ministries (name, short_name, category)
            VALUES ($1, $2, $3)
            RETURNING id
            """,
            name,
            short_name,
            category,
        )

    async def add_person(
        slug: str,
        full_name: str,
        role: str,
        *,
        superior: str | None = None,
        cabinet_role: str | None = None,
        cabinet_order: int | None = None,
        grade: str | None = None,
    ) -> None:
        ids[slug] = await connection.fetchval(
            f"""
            INSERT INTO {schema}.persons
                (full_name, role, superior_id, cabinet_role, cabinet_order, collab_grade)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING id
            """,
            full_name,
            role,
            ids.get(superior) if superior else None,
            cabinet_role,
            cabinet_order,
            ids.get(f"grade:{grade}") if grade else None,
        )

    await add_person("president", "Camille Durand", "Président")
    await add_person("prime_minister", "Louis Martin", "Premier Ministre du Gouvernement")
    await add_person("health", "Inès Bernard", "Ministre de la Santé", cabinet_order=2)
    await add_person("education", "Élodie Petit", "Ministre de l'Éducation", cabinet_order=1)
    await add_person(
        "chief_of_staff",
        "Paul Roux",
        "Collaborateur",
        superior="president",
        cabinet_order=1,
        grade="Directeur de cabinet",
    )
    await add_person(
        "pole_economy",
        "Yasmine Faure",
        "Collaborateur",
        superior="president",
        cabinet_role="Chef de pôle Économie",
        cabinet_order=2,
    )
    await add_person(
        "adviser",
        "Hugo Lambert",
        "Collaborateur",
        superior="president",
        cabinet_role="Conseiller",
        cabinet_order=3,
        grade="Conseiller",
    )
    await add_person(
        "pole_member",
        "Wassim Girard",
        "Collaborateur",
        superior="pole_economy",
        cabinet_role="Conseiller budgétaire",
    )

    for slug in ("health", "education"):
        await connection.execute(
            f"""
            INSERT INTO {schema}.person_ministries (person_id, ministry_id, is_primary, role_label)
            VALUES ($1, $2, true, $3)
            """,
            ids[slug],
            ids[f"ministry:{slug}"],
            "Ministre",
        )

    await connection.execute(
        f"""
        INSERT INTO {schema}.person_careers
            (person_id, event_date, event_text, organisation, sort_index)
        VALUES
            ($1, DATE '2022-05-20', 'Nomination au gouvernement', 'Gouvernement', 1),
            ($1, DATE '2017-06-18', 'Élection à l''Assemblée nationale', NULL, 2),
            ($1, NULL, 'Avocate au barreau de Lyon', NULL, NULL)
        """,
        ids["health"],
    )

    LOGGER.info("db.seed.demo_roster.done", persons=8, schema=schema)
    return ids


async def main() -> None:
    load_dotenv(override=False)
    pool = await init_pool(PoolConfig.model_validate({}))  # Load from environment variables
    try:
        async with pool.acquire() as conn:
            async with conn.transaction():
                await seed_demo_roster(conn, schema=get_settings().db_schema)
    finally:
        await close_pool()


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())
