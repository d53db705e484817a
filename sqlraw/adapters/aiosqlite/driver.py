"""AIOSQLite driver adapter."""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, ClassVar

import aiosqlite

from sqlraw.adapters.aiosqlite.core import (
    aiosqlite_type_coercion_map,
    is_closed_connection_error,
    process_sqlite_result,
    raise_aiosqlite_exception,
)
from sqlraw.driver import AsyncDriverAdapterBase, ExecutionResult
from sqlraw.exceptions import DatabaseConnectionError
from sqlraw.statement import ParameterStyle

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable, Mapping

__all__ = ("AiosqliteDriver",)


class AiosqliteDriver(AsyncDriverAdapterBase[aiosqlite.Connection]):
    """AIOSQLite driver adapter.

    Statements run on the aiosqlite worker thread; every call is awaited
    to completion before the next one starts.
    """

    __slots__ = ("_closed",)

    dialect: "ClassVar[str]" = "sqlite"
    parameter_style: "ClassVar[ParameterStyle]" = ParameterStyle.QMARK
    type_coercion_map: "ClassVar[Mapping[type, Callable[[Any], Any]]]" = aiosqlite_type_coercion_map

    def __init__(self, connection: aiosqlite.Connection) -> None:
        super().__init__(connection)
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    @asynccontextmanager
    async def handle_database_exceptions(self) -> "AsyncGenerator[None, None]":
        """Handle AIOSQLite exceptions."""
        try:
            yield
        except aiosqlite.Error as e:
            raise_aiosqlite_exception(e)
        except ValueError as e:
            if not is_closed_connection_error(e):
                raise
            msg = f"AIOSQLite connection error: {e}"
            raise DatabaseConnectionError(msg) from e

    async def _execute_statement(self, sql: str, parameters: "tuple[Any, ...]") -> ExecutionResult:
        async with self.connection.execute(sql, parameters) as cursor:
            description = cursor.description
            fetched_data = await cursor.fetchall() if description else []
            data, column_names = process_sqlite_result(fetched_data, description)
            affected_rows = cursor.rowcount if cursor.rowcount and cursor.rowcount > 0 else 0
        return ExecutionResult(selected_data=data, column_names=column_names, rows_affected=affected_rows)

    async def _execute_script(self, script: str) -> None:
        await self.connection.executescript(script)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.connection.close()
