from __future__ import annotations

import os
from logging.config import fileConfig
from typing import Any

import structlog
from alembic import context
from dotenv import load_dotenv
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import Engine

from src.config.db_settings import PoolConfig

# Alembic Config object, provides access to `.ini` values.
config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

LOGGER = structlog.get_logger(__name__)


def _database_url() -> str:
    load_dotenv(override=False)
    return PoolConfig.model_validate({}).sqlalchemy_url


def _schema() -> str:
    return os.getenv("ROSTER_DB_SCHEMA", "public")


def run_migrations_offline() -> None:
    """Emit SQL without connecting."""
    context.configure(
        url=_database_url(),
        target_metadata=None,
        literal_binds=True,
        version_table_schema=_schema(),
    )

    with context.begin_transaction():
        context.run_migrations()
        LOGGER.info("alembic.migrations.run", mode="offline")


def run_migrations_online() -> None:
    configuration: dict[str, Any] = dict(config.get_section(config.config_ini_section) or {})
    configuration["sqlalchemy.url"] = _database_url()

    connectable: Engine = create_engine(
        configuration["sqlalchemy.url"],
        poolclass=pool.NullPool,
    )

    schema = _schema()
    with connectable.connect() as connection:
        if schema != "public":
            connection.exec_driver_sql(f'CREATE SCHEMA IF NOT EXISTS "{schema}"')
            connection.exec_driver_sql(f'SET search_path TO "{schema}", public')
            connection.commit()
        context.configure(
            connection=connection,
            target_metadata=None,
            version_table_schema=schema,
        )

        with context.begin_transaction():
            context.run_migrations()
            LOGGER.info("alembic.migrations.run", mode="online", schema=schema)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
