"""Map asyncpg and PostgreSQL failures to ``DataSourceError``.

Every failure raised while talking to the relational data source ends up as a
single error kind for callers; the mapping keeps the SQLSTATE and related
metadata in the error context for observability.
"""

from __future__ import annotations

from typing import Any, Dict

import asyncpg

from src.infra.result import DataSourceError, Error

# asyncpg does not expose PoolError in its type stubs; look it up at runtime.
PoolError: type[BaseException] | None = getattr(asyncpg, "PoolError", None)

# PostgreSQL error codes that we label
POSTGRES_ERROR_CODES = {
    # Connection errors
    "08000": "connection_exception",
    "08003": "connection_does_not_exist",
    "08006": "connection_failure",
    "08001": "sqlclient_unable_to_establish_sqlconnection",
    "08004": "sqlserver_rejected_establishment_of_sqlconnection",
    # Access errors
    "28000": "invalid_authorization_specification",
    "28P01": "invalid_password",
    "42501": "insufficient_privilege",
    # Query errors
    "22P02": "invalid_text_representation",
    "42601": "syntax_error",
    "57014": "query_canceled",
    # Configuration errors
    "3F000": "invalid_schema_name",
    "42P01": "undefined_table",
    "42703": "undefined_column",
    "42883": "undefined_function",
    "42704": "undefined_object",
}


def map_postgres_error(error: asyncpg.PostgresError) -> DataSourceError:
    """Map a PostgreSQL error to ``DataSourceError`` with SQLSTATE context."""
    raw_sqlstate = getattr(error, "sqlstate", None)
    sqlstate: str | None = str(raw_sqlstate) if raw_sqlstate is not None else None
    message = str(error)

    context: Dict[str, Any] = {
        "sqlstate": sqlstate,
        "error_type": (
            POSTGRES_ERROR_CODES.get(sqlstate, "unknown_postgres_error")
            if sqlstate is not None
            else "unknown_postgres_error"
        ),
        "original_message": message,
    }

    table_name = getattr(error, "table_name", None)
    if table_name:
        context["table_name"] = table_name
    schema_name = getattr(error, "schema_name", None)
    if schema_name:
        context["schema_name"] = schema_name
    column_name = getattr(error, "column_name", None)
    if column_name:
        context["column_name"] = column_name

    if sqlstate == "57014":
        context["timeout"] = True
    elif sqlstate is not None and sqlstate.startswith("08"):
        context["connection_error"] = True

    return DataSourceError(message=message, context=context, cause=error)


def map_data_source_error(error: Exception) -> Error:
    """Map any exception raised by a data-source call to an ``Error``.

    Errors that are already classified pass through untouched.
    """
    if isinstance(error, Error):
        return error
    if isinstance(error, asyncpg.PostgresError):
        return map_postgres_error(error)
    if PoolError is not None and isinstance(error, PoolError):
        return DataSourceError(
            message=f"Connection pool error: {error}",
            context={
                "error_type": type(error).__name__,
                "original_message": str(error),
                "pool_error": True,
            },
            cause=error,
        )
    if isinstance(error, asyncpg.InterfaceError):
        return DataSourceError(
            message=f"Database interface error: {error}",
            context={"interface_error": True, "original_message": str(error)},
            cause=error,
        )
    if isinstance(error, TimeoutError):
        return DataSourceError(
            message=f"Database operation timed out: {error}",
            context={"timeout": True, "original_message": str(error)},
            cause=error,
        )
    return DataSourceError(
        message=f"Database error: {error}",
        context={"error_type": type(error).__name__, "original_message": str(error)},
        cause=error,
    )


__all__ = ["POSTGRES_ERROR_CODES", "map_data_source_error", "map_postgres_error"]
