"""Asynchronous driver adapter base.

Adapters wrap one live driver connection. The base class owns the common
execution flow: render placeholders for the driver, coerce parameter types,
translate driver errors, time the round-trip and build a :class:`ResultSet`.
Adapters only implement the driver-specific steps.
"""

import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar, Generic, NamedTuple, TypeVar

from sqlraw.result import ResultSet
from sqlraw.statement import ParameterStyle, coerce_parameters

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager

    from sqlraw.statement import QuerySpec

__all__ = ("AsyncDriverAdapterBase", "ExecutionResult")

ConnectionT = TypeVar("ConnectionT")


class ExecutionResult(NamedTuple):
    """Data collected from the driver for one statement.

    Attributes:
        selected_data: Rows as dictionaries. Empty for statements without a result set.
        column_names: Column names from the driver's result description.
        rows_affected: Rows changed by a DML statement, 0 when unknown.
    """

    selected_data: "list[dict[str, Any]]"
    column_names: "list[str]"
    rows_affected: int


class AsyncDriverAdapterBase(ABC, Generic[ConnectionT]):
    """Base class for async driver adapters."""

    __slots__ = ("connection",)

    dialect: "ClassVar[str]"
    parameter_style: "ClassVar[ParameterStyle]" = ParameterStyle.QMARK
    type_coercion_map: "ClassVar[Mapping[type, Callable[[Any], Any]]]" = {}

    def __init__(self, connection: ConnectionT) -> None:
        self.connection = connection

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dialect={self.dialect!r})"

    def prepare_statement(self, statement: "QuerySpec") -> "tuple[str, tuple[Any, ...]]":
        """Render SQL and parameters in the form the driver accepts.

        Args:
            statement: A validated statement.

        Returns:
            Tuple of (driver SQL, driver parameters).
        """
        return statement.for_style(self.parameter_style), coerce_parameters(
            statement.parameters, self.type_coercion_map
        )

    async def dispatch_statement_execution(self, statement: "QuerySpec") -> ResultSet:
        """Run one statement and build its result set.

        Args:
            statement: The statement to execute.

        Returns:
            Rows for statements with a result set, otherwise an empty result with ``rows_affected``.
        """
        sql, parameters = self.prepare_statement(statement)
        started = time.perf_counter()
        async with self.handle_database_exceptions():
            execution_result = await self._execute_statement(sql, parameters)
        return ResultSet(
            statement,
            rows=execution_result.selected_data,
            column_names=execution_result.column_names,
            rows_affected=execution_result.rows_affected,
            execution_time=time.perf_counter() - started,
        )

    async def dispatch_script_execution(self, script: str) -> None:
        """Run a multi-statement script without parameters."""
        async with self.handle_database_exceptions():
            await self._execute_script(script)

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Whether the driver reports the connection as closed."""

    @abstractmethod
    def handle_database_exceptions(self) -> "AbstractAsyncContextManager[None]":
        """Translate driver exceptions into sqlraw exceptions."""

    @abstractmethod
    async def _execute_statement(self, sql: str, parameters: "tuple[Any, ...]") -> ExecutionResult:
        """Execute one statement with positional parameters."""

    @abstractmethod
    async def _execute_script(self, script: str) -> None:
        """Execute a multi-statement script."""

    @abstractmethod
    async def close(self) -> None:
        """Close the underlying connection."""
