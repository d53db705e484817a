"""AsyncPG driver adapter."""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, ClassVar

import asyncpg

from sqlraw.adapters.asyncpg.core import collect_rows, parse_status, raise_asyncpg_exception
from sqlraw.driver import AsyncDriverAdapterBase, ExecutionResult
from sqlraw.statement import ParameterStyle

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

__all__ = ("AsyncpgDriver",)


class AsyncpgDriver(AsyncDriverAdapterBase[asyncpg.Connection]):
    """AsyncPG driver adapter.

    ``?`` placeholders are rendered as ``$1``, ``$2`` before the statement
    is prepared. The prepared statement tells whether the statement returns
    rows; statements that don't report their row count through the status
    message.
    """

    __slots__ = ()

    dialect: "ClassVar[str]" = "postgres"
    parameter_style: "ClassVar[ParameterStyle]" = ParameterStyle.NUMERIC

    @property
    def is_closed(self) -> bool:
        return bool(self.connection.is_closed())

    @asynccontextmanager
    async def handle_database_exceptions(self) -> "AsyncGenerator[None, None]":
        """Handle AsyncPG exceptions."""
        try:
            yield
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise_asyncpg_exception(e)

    async def _execute_statement(self, sql: str, parameters: "tuple[Any, ...]") -> ExecutionResult:
        prepared = await self.connection.prepare(sql)
        records = await prepared.fetch(*parameters)
        column_names = [attribute.name for attribute in prepared.get_attributes()]
        if column_names:
            return ExecutionResult(
                selected_data=collect_rows(records, column_names), column_names=column_names, rows_affected=0
            )
        return ExecutionResult(selected_data=[], column_names=[], rows_affected=parse_status(prepared.get_statusmsg()))

    async def _execute_script(self, script: str) -> None:
        await self.connection.execute(script)

    async def close(self) -> None:
        if not self.connection.is_closed():
            await self.connection.close()
