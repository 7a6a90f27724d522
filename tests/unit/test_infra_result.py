"""Unit tests for the Result types and error classification."""

from __future__ import annotations

import pytest

from src.infra.result import (
    DataSourceError,
    Err,
    Error,
    NotFoundError,
    Ok,
    async_returns_result,
    get_error_metrics,
)


class TestBasicResult:
    def test_ok_behaviour(self) -> None:
        result = Ok[int, Error](42)
        assert result.is_ok() is True
        assert result.is_err() is False
        assert result.unwrap() == 42
        with pytest.raises(RuntimeError):
            result.unwrap_err()

    def test_err_behaviour(self) -> None:
        error = NotFoundError("missing", context={"person_id": "42"})
        result = Err[int, NotFoundError](error)

        assert result.is_err() is True
        assert result.unwrap_err() is error
        with pytest.raises(RuntimeError):
            result.unwrap()


class TestErrors:
    def test_error_hierarchy(self) -> None:
        assert issubclass(DataSourceError, Error)
        assert issubclass(NotFoundError, Error)
        assert isinstance(NotFoundError("x"), Exception)

    def test_to_dict(self) -> None:
        cause = ValueError("bad")
        error = DataSourceError("query failed", context={"sqlstate": "42P01"}, cause=cause)

        payload = error.to_dict()

        assert payload == {
            "type": "DataSourceError",
            "message": "query failed",
            "context": {"sqlstate": "42P01"},
            "cause": repr(cause),
        }
        assert str(error) == "query failed"

    def test_log_safe_context_masks_secrets(self) -> None:
        error = DataSourceError(
            "connect failed",
            context={"dsn": "postgresql://u:p@h/db", "details": {"password": "p", "host": "h"}},
        )

        safe = error.log_safe_context()

        assert safe["dsn"] == "***redacted***"
        assert safe["details"] == {"password": "***redacted***", "host": "h"}
        assert error.context["dsn"] == "postgresql://u:p@h/db"


class TestAsyncReturnsResult:
    @pytest.mark.asyncio
    async def test_wraps_plain_value(self) -> None:
        @async_returns_result(DataSourceError)
        async def load() -> int:
            return 7

        assert (await load()).unwrap() == 7

    @pytest.mark.asyncio
    async def test_passes_results_through(self) -> None:
        error = NotFoundError("gone")

        @async_returns_result(DataSourceError)
        async def load() -> object:
            return Err(error)

        result = await load()
        assert result.unwrap_err() is error

    @pytest.mark.asyncio
    async def test_maps_exceptions_and_counts_them(self) -> None:
        @async_returns_result(DataSourceError, mapper=lambda exc: NotFoundError(f"missing {exc}"))
        async def lookup() -> int:
            raise KeyError("id")

        @async_returns_result(DataSourceError)
        async def broken() -> int:
            raise RuntimeError("boom")

        missing = (await lookup()).unwrap_err()
        failed = (await broken()).unwrap_err()

        assert isinstance(missing, NotFoundError)
        assert isinstance(failed, DataSourceError)
        assert isinstance(failed.cause, RuntimeError)
        metrics = get_error_metrics()
        assert metrics["NotFoundError"] == 1
        assert metrics["DataSourceError"] == 1
        assert metrics["__total__"] == 2

    @pytest.mark.asyncio
    async def test_raised_error_kept_as_is(self) -> None:
        error = NotFoundError("gone")

        @async_returns_result(DataSourceError, mapper=lambda exc: DataSourceError(str(exc)))
        async def load() -> int:
            raise error

        assert (await load()).unwrap_err() is error

    @pytest.mark.asyncio
    async def test_mapper_is_used_for_foreign_exceptions(self) -> None:
        @async_returns_result(DataSourceError, mapper=lambda exc: NotFoundError(f"mapped {exc}"))
        async def load() -> int:
            raise LookupError("x")

        error = (await load()).unwrap_err()
        assert isinstance(error, NotFoundError)
        assert error.message == "mapped x"
