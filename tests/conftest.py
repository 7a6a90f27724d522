from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock

import pytest
from faker import Faker

from src.config.settings import RosterSettings, get_settings
from src.infra.result import reset_error_metrics
from tests.fixtures.roster_rows import FakePool


@pytest.fixture
def faker() -> Faker:
    """Provide a Faker instance with French and English locales for test data generation."""
    return Faker(["fr_FR", "en_US"])


@pytest.fixture
def settings() -> RosterSettings:
    return RosterSettings()


@pytest.fixture
def mock_conn() -> AsyncMock:
    """Connection double; tests set `fetch` return values or side effects."""
    conn = AsyncMock()
    conn.fetch = AsyncMock(return_value=[])
    return conn


@pytest.fixture
def fake_pool(mock_conn: AsyncMock) -> FakePool:
    return FakePool(mock_conn)


@pytest.fixture(autouse=True)
def _reset_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    # Keep tests independent from a developer's .env / shell.
    for key in (
        "ROSTER_DB_SCHEMA",
        "ROSTER_CABINET_EXCLUDES_POLE_LEADERS",
        "DB_APPLICATION_NAME",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    reset_error_metrics()
    yield
    get_settings.cache_clear()
