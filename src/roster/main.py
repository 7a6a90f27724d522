from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from typing import Any, Sequence
from uuid import UUID

import asyncpg
import structlog
from dotenv import load_dotenv
from pydantic import ValidationError

from src.config.settings import get_settings
from src.db import pool as db_pool
from src.infra.db_errors import map_data_source_error
from src.infra.logging.config import configure_logging
from src.infra.result import Error
from src.roster.models import PersonId
from src.roster.services import PersonSheetService, RosterService

LOGGER = structlog.get_logger(__name__)


def parse_person_id(raw: str) -> PersonId:
    """Accept UUID and integer identifiers; anything else is passed through as text."""
    value = raw.strip()
    try:
        return UUID(value)
    except ValueError:
        pass
    try:
        return int(value)
    except ValueError:
        return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roster",
        description="Print government roster view models as JSON.",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("roster", help="Assemble the grid: president, prime minister, ministers")

    sheet = sub.add_parser("sheet", help="Load one person's detail sheet")
    sheet.add_argument("person_id", type=parse_person_id)
    return parser


async def _run(args: argparse.Namespace) -> Any:
    try:
        pool = await db_pool.init_pool()
    except (OSError, asyncpg.PostgresError) as exc:
        raise map_data_source_error(exc) from exc
    settings = get_settings()
    try:
        if args.command == "roster":
            return await RosterService(pool, settings=settings).assemble_roster()
        return await PersonSheetService(pool, settings=settings).load_person_sheet(args.person_id)
    finally:
        await db_pool.close_pool()


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point invoked via `python -m src.roster.main`."""
    load_dotenv(override=False)
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level, stream=sys.stderr)

    try:
        result = asyncio.run(_run(args))
    except Error as error:
        LOGGER.error("roster.cli.failed", command=args.command, **error.to_dict())
        return 1
    except ValidationError as exc:
        LOGGER.error("roster.cli.config_invalid", errors=exc.errors(include_url=False))
        return 2
    except KeyboardInterrupt:
        LOGGER.warning("roster.cli.interrupted")
        return 130

    json.dump(asdict(result), sys.stdout, ensure_ascii=False, indent=2, default=str)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
