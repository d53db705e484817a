from typing import Any

__all__ = (
    "CheckViolationError",
    "DataError",
    "DatabaseConnectionError",
    "ExtraParameterError",
    "ForeignKeyViolationError",
    "ImproperConfigurationError",
    "IntegrityError",
    "MissingDependencyError",
    "MissingObjectError",
    "MissingParameterError",
    "MultipleResultsFoundError",
    "NotFoundError",
    "NotNullViolationError",
    "ParameterError",
    "QueryError",
    "SQLFileNotFoundError",
    "SQLFileParseError",
    "SQLLoadingError",
    "SQLParsingError",
    "SQLRawError",
    "UniqueViolationError",
)


class SQLRawError(Exception):
    """Base exception class from which all sqlraw exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLRawError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(SQLRawError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: "str | None" = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install sqlraw[{install_package or package}]' to install sqlraw with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(SQLRawError):
    """Improper Configuration error.

    Raised when a database configuration or URL cannot be turned into a connection.
    """


class DatabaseConnectionError(SQLRawError, ConnectionError):
    """No usable connection is available.

    Raised when the executor has been shut down, or when the driver reports
    the connection as closed or unreachable. Also a builtin :class:`ConnectionError`.
    """


# -- Query Errors --
class QueryError(SQLRawError):
    """Base class for errors raised by a statement the database rejected."""


class SQLParsingError(QueryError):
    """Issues parsing SQL statements."""

    def __init__(self, message: "str | None" = None) -> None:
        if message is None:
            message = "Issues parsing SQL statement."
        super().__init__(message)


class MissingObjectError(QueryError):
    """A referenced table, column or other schema object does not exist."""


class DataError(QueryError):
    """A value could not be stored in or compared against its column."""


class IntegrityError(QueryError):
    """Data integrity constraint violation."""


class UniqueViolationError(IntegrityError):
    """A unique or primary key constraint was violated."""


class ForeignKeyViolationError(IntegrityError):
    """A foreign key constraint was violated."""


class NotNullViolationError(IntegrityError):
    """A not-null constraint was violated."""


class CheckViolationError(IntegrityError):
    """A check constraint was violated."""


# -- Parameter Errors --
class ParameterError(QueryError):
    """Base class for parameter-related errors."""

    sql: "str | None"

    def __init__(self, message: str, sql: "str | None" = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MissingParameterError(ParameterError):
    """Raised when fewer values than placeholders are supplied."""


class ExtraParameterError(ParameterError):
    """Raised when more values than placeholders are supplied."""


# -- Loader Errors --
class SQLLoadingError(SQLRawError):
    """Issues loading referenced SQL file."""

    def __init__(self, message: "str | None" = None) -> None:
        if message is None:
            message = "Issues loading referenced SQL file."
        super().__init__(message)


class SQLFileNotFoundError(SQLLoadingError):
    """A SQL file or a named statement could not be found."""


class SQLFileParseError(SQLLoadingError):
    """A SQL file could not be split into named statements."""


# -- Result Errors --
class NotFoundError(SQLRawError):
    """A single row was required but none was returned."""


class MultipleResultsFoundError(SQLRawError):
    """A single row was required but more than one were returned."""
