from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RosterSettings(BaseSettings):
    """Display fallbacks and data-source options for the roster view models.

    Every fallback is applied while the view model is assembled, so the
    rendering layer never has to null-check.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROSTER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    db_schema: str = Field(default="public", min_length=1)
    placeholder_photo_url: str = "https://via.placeholder.com/400x260?text=Portrait"
    default_role_label: str = "Rôle"
    default_ministry_label: str = "Ministère"
    default_description: str = "Aucune biographie courte renseignée."
    default_collaborator_grade: str = "Collaborateur"
    default_pole_leader_grade: str = "Chef de pôle"
    default_pole_member_grade: str = "Membre"
    default_career_period: str = "Date non précisée"
    default_career_heading: str = "Mission"
    cabinet_excludes_pole_leaders: bool = False

    @field_validator("db_schema")
    @classmethod
    def validate_db_schema(cls, v: str) -> str:
        # Interpolated into SQL as an identifier.
        schema = v.strip()
        if not schema.replace("_", "").isalnum():
            raise ValueError("ROSTER_DB_SCHEMA must be a plain SQL identifier")
        return schema


@lru_cache(maxsize=1)
def get_settings() -> RosterSettings:
    return RosterSettings()
