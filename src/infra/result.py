"""Result / Err wrappers and the error types raised by roster queries.

This module provides:
- Ok / Err wrappers and the Result union
- the base error hierarchy (DataSourceError / NotFoundError)
- an async decorator turning raised exceptions into Result values
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Generic,
    Mapping,
    ParamSpec,
    TypeVar,
    Union,
    cast,
)

import structlog

LOGGER = structlog.get_logger(__name__)

T = TypeVar("T")
E = TypeVar("E")

P = ParamSpec("P")


_SENSITIVE_KEYS: tuple[str, ...] = (
    "password",
    "passwd",
    "secret",
    "token",
    "dsn",
    "authorization",
)

_ERROR_COUNTERS: Counter[str] = Counter()


def _sanitize_context(context: Mapping[str, Any] | None) -> dict[str, Any]:
    """Mask sensitive values in an error context.

    - only keys whose name contains a sensitive marker are masked
    - nested dicts are handled recursively
    """
    if not context:
        return {}

    def _sanitize(value: Any) -> Any:
        if isinstance(value, dict):
            mapping = cast(Mapping[str, Any], value)
            return {
                k: "***redacted***" if _is_sensitive(k) else _sanitize(v)
                for k, v in mapping.items()
            }
        return value

    return {
        key: "***redacted***" if _is_sensitive(key) else _sanitize(value)
        for key, value in context.items()
    }


def _is_sensitive(key: object) -> bool:
    key_lower = str(key).lower()
    return any(sk in key_lower for sk in _SENSITIVE_KEYS)


def _record_error(error: "Error") -> None:
    key = type(error).__name__
    _ERROR_COUNTERS[key] += 1
    _ERROR_COUNTERS["__total__"] += 1


def get_error_metrics() -> dict[str, int]:
    """Current error counts, grouped by error type name."""
    return dict(_ERROR_COUNTERS)


def reset_error_metrics() -> None:
    """Clear the error counts (test helper)."""
    _ERROR_COUNTERS.clear()


# --- Error hierarchy ---


class Error(Exception):
    """Base error carried by Result: a message, an optional context and a cause."""

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})
        self.cause: BaseException | None = cause

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": type(self).__name__,
            "message": self.message,
            "context": dict(self.context),
            "cause": repr(self.cause) if self.cause is not None else None,
        }

    def __str__(self) -> str:  # pragma: no cover - delegates to message
        return self.message

    def log_safe_context(self) -> dict[str, Any]:
        """Context with sensitive values masked, safe to write to the logs."""
        return _sanitize_context(self.context)


class DataSourceError(Error):
    """The data source (query or connection) reported a failure."""


class NotFoundError(Error):
    """A single-row lookup matched zero rows or more than one."""


# --- Result / Ok / Err ---


@dataclass(slots=True)
class Ok(Generic[T, E]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> E:
        raise RuntimeError("Called unwrap_err() on Ok value.")


@dataclass(slots=True)
class Err(Generic[T, E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        raise RuntimeError(f"Called unwrap() on Err value: {self.error!r}")

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T, E], Err[T, E]]


# --- Decorator ---


def async_returns_result(
    error_type: type[Error] = Error,
    *,
    mapper: Callable[[Exception], Error] | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[Result[T, Error]]]]:
    """Wrap an async function that may raise so that it returns a Result.

    - A plain return value `T` becomes `Ok(T)`.
    - An `Ok` / `Err` returned by the function passes through unwrapped.
    - A raised `Error` goes into `Err` as is; any other exception goes
      through `mapper`, or becomes `error_type` when no mapper is given.
    """

    def decorator(
        func: Callable[P, Awaitable[T]],
    ) -> Callable[P, Awaitable[Result[T, Error]]]:
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T, Error]:
            try:
                value = await func(*args, **kwargs)
                if isinstance(value, (Ok, Err)):
                    return cast(Result[T, Error], value)
                return Ok(value)
            except Exception as exc:
                if isinstance(exc, Error):
                    error_obj = exc
                elif mapper is not None:
                    error_obj = mapper(exc)
                else:
                    error_obj = error_type(str(exc), cause=exc)
                _record_error(error_obj)
                LOGGER.error(
                    "result.async_returns_result.error",
                    function=getattr(func, "__name__", "<unknown>"),
                    error_type=type(error_obj).__name__,
                    error=str(error_obj),
                    context=error_obj.log_safe_context(),
                )
                return cast(Result[T, Error], Err(error_obj))

        wrapper.__name__ = getattr(func, "__name__", wrapper.__name__)
        wrapper.__doc__ = func.__doc__
        return wrapper

    return decorator


__all__ = [
    "Ok",
    "Err",
    "Result",
    "Error",
    "DataSourceError",
    "NotFoundError",
    "async_returns_result",
    "get_error_metrics",
    "reset_error_metrics",
]
