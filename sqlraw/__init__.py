"""sqlraw: run hand-written SQL with positional parameters."""

from sqlraw import exceptions
from sqlraw.__metadata__ import __version__
from sqlraw.config import AsyncDatabaseConfig, config_from_url
from sqlraw.exceptions import DatabaseConnectionError, QueryError, SQLRawError
from sqlraw.executor import QueryExecutor
from sqlraw.loader import SQLFileLoader
from sqlraw.result import ResultSet, Row
from sqlraw.statement import ParameterStyle, QuerySpec

__all__ = (
    "AsyncDatabaseConfig",
    "DatabaseConnectionError",
    "ParameterStyle",
    "QueryError",
    "QueryExecutor",
    "QuerySpec",
    "ResultSet",
    "Row",
    "SQLFileLoader",
    "SQLRawError",
    "__version__",
    "config_from_url",
    "exceptions",
)
