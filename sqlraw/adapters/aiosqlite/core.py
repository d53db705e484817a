"""AIOSQLite adapter helpers."""

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, NoReturn, Optional

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
    from collections.abc import Callable, Iterable, Mapping, Sequence

__all__ = (
    "aiosqlite_type_coercion_map",
    "is_closed_connection_error",
    "process_sqlite_result",
    "raise_aiosqlite_exception",
)

SQLITE_CONSTRAINT_UNIQUE_CODE = 2067
SQLITE_CONSTRAINT_PRIMARYKEY_CODE = 1555
SQLITE_CONSTRAINT_FOREIGNKEY_CODE = 787
SQLITE_CONSTRAINT_NOTNULL_CODE = 1299
SQLITE_CONSTRAINT_CHECK_CODE = 275
SQLITE_CONSTRAINT_CODE = 19
SQLITE_CANTOPEN_CODE = 14
SQLITE_MISMATCH_CODE = 20
SQLITE_TOOBIG_CODE = 18
SQLITE_RANGE_CODE = 25

_UNIQUE_CODES = frozenset({SQLITE_CONSTRAINT_UNIQUE_CODE, SQLITE_CONSTRAINT_PRIMARYKEY_CODE})
_DATA_ERROR_CODES = frozenset({SQLITE_MISMATCH_CODE, SQLITE_TOOBIG_CODE, SQLITE_RANGE_CODE})
_MISSING_OBJECT_MARKERS = ("no such table", "no such column", "has no column named", "no such function", "no such view")
_CLOSED_MARKERS = ("closed database", "connection closed", "no active connection")


def _to_iso(value: "date | datetime") -> str:
    return value.isoformat()


aiosqlite_type_coercion_map: "Mapping[type, Callable[[Any], Any]]" = {
    bool: int,
    datetime: _to_iso,
    date: _to_iso,
    Decimal: str,
}


def process_sqlite_result(
    fetched_data: "Iterable[Any]", description: "Optional[Sequence[Any]]"
) -> "tuple[list[dict[str, Any]], list[str]]":
    """Convert raw rows and a cursor description into dictionaries.

    Args:
        fetched_data: Raw rows from ``cursor.fetchall()``
        description: Cursor description, ``None`` for statements without a result set

    Returns:
        Tuple of (data, column_names)
    """
    if not description:
        return [], []
    column_names = [col[0] for col in description]
    return [dict(zip(column_names, row)) for row in fetched_data], column_names


def is_closed_connection_error(error: BaseException) -> bool:
    """Check whether an error reports a closed connection."""
    error_msg = str(error).lower()
    return any(marker in error_msg for marker in _CLOSED_MARKERS)


def _raise_aiosqlite_error(
    error: BaseException, code: "Optional[int]", error_class: "type[SQLRawError]", description: str
) -> NoReturn:
    msg = f"AIOSQLite {description} [code {code}]: {error}" if code else f"AIOSQLite {description}: {error}"
    raise error_class(msg) from error


def raise_aiosqlite_exception(error: BaseException) -> NoReturn:
    """Raise the sqlraw exception matching an aiosqlite/sqlite3 error.

    Extended result codes are used when the interpreter exposes them; the
    error text is the fallback.
    """
    error_code: "Optional[int]" = getattr(error, "sqlite_errorcode", None)
    error_msg = str(error).lower()

    if is_closed_connection_error(error):
        _raise_aiosqlite_error(error, None, DatabaseConnectionError, "connection error")
    if error_code == SQLITE_CANTOPEN_CODE or "unable to open database" in error_msg:
        _raise_aiosqlite_error(error, error_code, DatabaseConnectionError, "connection error")

    if error_code in _UNIQUE_CODES or "unique constraint" in error_msg:
        _raise_aiosqlite_error(error, error_code, UniqueViolationError, "unique constraint violation")
    if error_code == SQLITE_CONSTRAINT_FOREIGNKEY_CODE or "foreign key constraint" in error_msg:
        _raise_aiosqlite_error(error, error_code, ForeignKeyViolationError, "foreign key constraint violation")
    if error_code == SQLITE_CONSTRAINT_NOTNULL_CODE or "not null constraint" in error_msg:
        _raise_aiosqlite_error(error, error_code, NotNullViolationError, "not-null constraint violation")
    if error_code == SQLITE_CONSTRAINT_CHECK_CODE or "check constraint" in error_msg:
        _raise_aiosqlite_error(error, error_code, CheckViolationError, "check constraint violation")
    if (error_code is not None and error_code & 0xFF == SQLITE_CONSTRAINT_CODE) or "constraint failed" in error_msg:
        _raise_aiosqlite_error(error, error_code, IntegrityError, "integrity constraint violation")

    if any(marker in error_msg for marker in _MISSING_OBJECT_MARKERS):
        _raise_aiosqlite_error(error, error_code, MissingObjectError, "missing schema object")
    if "syntax error" in error_msg or "incomplete input" in error_msg or "unrecognized token" in error_msg:
        _raise_aiosqlite_error(error, error_code, SQLParsingError, "SQL syntax error")
    if error_code in _DATA_ERROR_CODES or "datatype mismatch" in error_msg:
        _raise_aiosqlite_error(error, error_code, DataError, "data error")
    _raise_aiosqlite_error(error, error_code, QueryError, "database error")
