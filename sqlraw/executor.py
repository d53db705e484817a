"""Query executor.

The executor is the single entry point for running SQL. It owns one driver
connection from :meth:`QueryExecutor.connect` until :meth:`QueryExecutor.shutdown`
and runs statements strictly one at a time.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Optional

from sqlraw.exceptions import DatabaseConnectionError
from sqlraw.statement import QuerySpec
from sqlraw.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from sqlraw.config import AsyncDatabaseConfig
    from sqlraw.driver import AsyncDriverAdapterBase
    from sqlraw.result import ResultSet

__all__ = ("QueryExecutor",)

logger = get_logger("executor")


class QueryExecutor:
    """Execute SQL with positional parameters and return rows.

    Lifecycle is one-way: open, any number of executes, closed. Once
    :meth:`shutdown` has run every further statement raises
    :class:`~sqlraw.exceptions.DatabaseConnectionError`.

    Statements never overlap. Each call holds a lock for the full
    round-trip, so gathered calls still run one after the other.

    Args:
        driver: A driver adapter wrapping a live connection.
    """

    __slots__ = ("_closed", "_driver", "_lock")

    def __init__(self, driver: "AsyncDriverAdapterBase[Any]") -> None:
        self._driver = driver
        self._closed = False
        self._lock = asyncio.Lock()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"QueryExecutor(driver={self._driver!r}, state={state!r})"

    @classmethod
    async def connect(cls, config: "AsyncDatabaseConfig[Any, Any]") -> "QueryExecutor":
        """Open a connection described by ``config``.

        Args:
            config: Adapter configuration.

        Returns:
            An open executor that owns the new connection.
        """
        connection = await config.create_connection()
        driver = config.create_driver(connection)
        log_with_context(logger, logging.DEBUG, "executor.connect", dialect=driver.dialect)
        return cls(driver)

    async def __aenter__(self) -> "QueryExecutor":
        return self

    async def __aexit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        await self.shutdown()

    @property
    def driver(self) -> "AsyncDriverAdapterBase[Any]":
        return self._driver

    @property
    def dialect(self) -> str:
        return self._driver.dialect

    @property
    def is_open(self) -> bool:
        """Whether statements can still be issued."""
        return not self._closed and not self._driver.is_closed

    def _ensure_open(self) -> None:
        if self._closed:
            msg = "Executor has been shut down; no further statements can be issued"
            raise DatabaseConnectionError(msg)
        if self._driver.is_closed:
            msg = "Database connection is closed"
            raise DatabaseConnectionError(msg)

    async def execute(self, sql: str, params: "Sequence[Any]" = ()) -> "ResultSet":
        """Execute ``sql`` with ``params`` bound to its ``?`` placeholders.

        Args:
            sql: SQL text with one ``?`` per parameter.
            params: Parameter values, filled in left to right.

        Raises:
            DatabaseConnectionError: No live connection is available.
            QueryError: The statement was rejected, or the parameter count does not match.

        Returns:
            The returned rows, or an empty result for DDL and DML.
        """
        return await self.execute_spec(QuerySpec(sql, params))

    async def execute_spec(self, statement: QuerySpec) -> "ResultSet":
        """Execute an already built :class:`QuerySpec`."""
        self._ensure_open()
        statement.validate()
        async with self._lock:
            self._ensure_open()
            try:
                result = await self._driver.dispatch_statement_execution(statement)
            except Exception as error:
                log_with_context(
                    logger,
                    logging.DEBUG,
                    "executor.execute.error",
                    sql=statement.sql,
                    statement_name=statement.name,
                    error=type(error).__name__,
                )
                raise
        log_with_context(
            logger,
            logging.DEBUG,
            "executor.execute",
            sql=statement.sql,
            statement_name=statement.name,
            parameter_count=len(statement.parameters),
            row_count=len(result),
            rows_affected=result.rows_affected,
            duration_ms=round((result.execution_time or 0.0) * 1000, 3),
        )
        return result

    async def execute_script(self, script: str) -> None:
        """Execute a multi-statement script such as a schema file.

        Scripts take no parameters.
        """
        self._ensure_open()
        async with self._lock:
            self._ensure_open()
            await self._driver.dispatch_script_execution(script)
        log_with_context(logger, logging.DEBUG, "executor.execute_script", script_length=len(script))

    async def shutdown(self) -> None:
        """Release the connection.

        Calling it again after the first time does nothing.
        """
        if self._closed:
            return
        async with self._lock:
            if self._closed:
                return
            self._closed = True
            await self._driver.close()
        log_with_context(logger, logging.DEBUG, "executor.shutdown", dialect=self._driver.dialect)
