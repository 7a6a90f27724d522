from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_POSTGRES_SCHEMES = ("postgresql://", "postgres://")


class PoolConfig(BaseSettings):
    """Connection settings for the roster data source.

    One object feeds both the asyncpg pool (`pool_kwargs`) and the Alembic
    engine (`sqlalchemy_url`), so the two never read the environment apart.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    database_url: str = Field(..., alias="DATABASE_URL", min_length=1)
    min_size: int = Field(default=1, alias="DB_POOL_MIN_SIZE", ge=1)
    max_size: int = Field(default=10, alias="DB_POOL_MAX_SIZE", ge=1)
    command_timeout: float | None = Field(default=None, alias="DB_POOL_TIMEOUT_SECONDS", gt=0)
    application_name: str = Field(default="gouv-roster", alias="DB_APPLICATION_NAME")

    @field_validator("database_url")
    @classmethod
    def _require_postgres_url(cls, value: str) -> str:
        url = value.strip()
        if not url.startswith(_POSTGRES_SCHEMES):
            raise ValueError("DATABASE_URL must be a postgresql:// (or postgres://) URL")
        return url

    @model_validator(mode="after")
    def _check_sizes(self) -> "PoolConfig":
        if self.max_size < self.min_size:
            raise ValueError("DB_POOL_MAX_SIZE must be greater than or equal to DB_POOL_MIN_SIZE")
        return self

    @property
    def dsn(self) -> str:
        return self.database_url

    @property
    def sqlalchemy_url(self) -> str:
        # SQLAlchemy only knows the full dialect name; asyncpg takes both.
        if self.database_url.startswith("postgres://"):
            return "postgresql://" + self.database_url[len("postgres://") :]
        return self.database_url

    def pool_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for `asyncpg.create_pool`."""
        return {
            "dsn": self.dsn,
            "min_size": self.min_size,
            "max_size": self.max_size,
            "command_timeout": self.command_timeout,
            "server_settings": {"application_name": self.application_name},
        }
