"""AsyncPG adapter helpers."""

import re
from typing import TYPE_CHECKING, Any, Final, NoReturn, Optional

import asyncpg

from sqlraw.exceptions import (
    CheckViolationError,
    DatabaseConnectionError,
    DataError,
    ForeignKeyViolationError,
    IntegrityError,
    MissingObjectError,
    NotNullViolationError,
    QueryError,
    SQLParsingError,
    SQLRawError,
    UniqueViolationError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ("collect_rows", "parse_status", "raise_asyncpg_exception")

ASYNC_PG_STATUS_REGEX: Final = re.compile(r"^([A-Z]+)(?:\s+(\d+))?\s+(\d+)$", re.IGNORECASE)
EXPECTED_REGEX_GROUPS = 3
MISSING_OBJECT_CODES: Final = frozenset({"42P01", "42703", "42883", "42704", "3F000"})


def parse_status(status: "Optional[str]") -> int:
    """Parse an asyncpg status string to extract the row count.

    Args:
        status: Status string like "INSERT 0 1", "UPDATE 3", "DELETE 2"

    Returns:
        Number of affected rows, or 0 if it cannot be parsed.
    """
    if not status:
        return 0
    match = ASYNC_PG_STATUS_REGEX.match(status.strip())
    if match and len(match.groups()) >= EXPECTED_REGEX_GROUPS:
        return int(match.groups()[-1])
    return 0


def collect_rows(records: "Iterable[Any]", column_names: "list[str]") -> "list[dict[str, Any]]":
    """Collect AsyncPG records into dictionaries keyed by column name."""
    return [dict(zip(column_names, record.values())) for record in records]


def _raise_postgres_error(
    error: BaseException, code: "Optional[str]", error_class: "type[SQLRawError]", description: str
) -> NoReturn:
    msg = f"PostgreSQL {description} [{code}]: {error}" if code else f"PostgreSQL {description}: {error}"
    raise error_class(msg) from error


def raise_asyncpg_exception(error: BaseException) -> NoReturn:
    """Raise the sqlraw exception matching an asyncpg error, keyed on SQLSTATE."""
    if isinstance(error, (asyncpg.exceptions.ConnectionDoesNotExistError, OSError)):
        _raise_postgres_error(error, None, DatabaseConnectionError, "connection error")

    error_code: "Optional[str]" = getattr(error, "sqlstate", None)
    if not error_code:
        if isinstance(error, asyncpg.InterfaceError) and "closed" in str(error).lower():
            _raise_postgres_error(error, None, DatabaseConnectionError, "connection error")
        if isinstance(error, ValueError):
            _raise_postgres_error(error, None, DataError, "data error")
        _raise_postgres_error(error, None, QueryError, "database error")

    if error_code == "23505":
        _raise_postgres_error(error, error_code, UniqueViolationError, "unique constraint violation")
    if error_code == "23503":
        _raise_postgres_error(error, error_code, ForeignKeyViolationError, "foreign key constraint violation")
    if error_code == "23502":
        _raise_postgres_error(error, error_code, NotNullViolationError, "not-null constraint violation")
    if error_code == "23514":
        _raise_postgres_error(error, error_code, CheckViolationError, "check constraint violation")
    if error_code.startswith("23"):
        _raise_postgres_error(error, error_code, IntegrityError, "integrity constraint violation")
    if error_code in MISSING_OBJECT_CODES:
        _raise_postgres_error(error, error_code, MissingObjectError, "missing schema object")
    if error_code.startswith("42"):
        _raise_postgres_error(error, error_code, SQLParsingError, "SQL syntax error")
    if error_code.startswith("08"):
        _raise_postgres_error(error, error_code, DatabaseConnectionError, "connection error")
    if error_code.startswith("22"):
        _raise_postgres_error(error, error_code, DataError, "data error")
    _raise_postgres_error(error, error_code, QueryError, "database error")
