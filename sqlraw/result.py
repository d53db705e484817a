"""Result set returned by :meth:`QueryExecutor.execute`.

A ``ResultSet`` decouples callers from the driver's own return shape. Rows
are read-only mappings of column name to value, collected in the order the
database returned them.
"""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Optional, Union, overload

from sqlraw.exceptions import MultipleResultsFoundError, NotFoundError

if TYPE_CHECKING:
    from sqlraw.statement import QuerySpec

__all__ = ("ResultSet", "Row")

Row = Mapping[str, Any]


class ResultSet(Sequence[Row]):
    """Ordered, immutable rows produced by a single statement.

    For DDL and DML without ``RETURNING`` the row sequence is empty and
    :attr:`rows_affected` carries the driver's count, when it reports one.

    Args:
        statement: The statement that produced the rows.
        rows: Rows as dictionaries, in result order.
        column_names: Column names in projection order.
        rows_affected: Rows changed by a DML statement.
        execution_time: Round-trip time in seconds.
    """

    __slots__ = ("_rows", "column_names", "execution_time", "rows_affected", "statement")

    def __init__(
        self,
        statement: "QuerySpec",
        rows: "Optional[Iterable[Mapping[str, Any]]]" = None,
        column_names: "Optional[Iterable[str]]" = None,
        rows_affected: int = 0,
        execution_time: "Optional[float]" = None,
    ) -> None:
        self.statement = statement
        self._rows: tuple[Row, ...] = tuple(MappingProxyType(dict(row)) for row in rows or ())
        if column_names is None and self._rows:
            column_names = self._rows[0].keys()
        self.column_names: tuple[str, ...] = tuple(column_names or ())
        self.rows_affected = rows_affected
        self.execution_time = execution_time

    def __repr__(self) -> str:
        return (
            f"ResultSet(rows={len(self._rows)}, column_names={self.column_names!r}, "
            f"rows_affected={self.rows_affected!r})"
        )

    def __len__(self) -> int:
        """Get the number of rows in the result set.

        Returns:
            Number of rows.
        """
        return len(self._rows)

    @overload
    def __getitem__(self, index: int) -> Row: ...

    @overload
    def __getitem__(self, index: slice) -> "tuple[Row, ...]": ...

    def __getitem__(self, index: "Union[int, slice]") -> "Union[Row, tuple[Row, ...]]":
        return self._rows[index]

    def __iter__(self) -> "Iterator[Row]":
        return iter(self._rows)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResultSet):
            return self._rows == other._rows and self.column_names == other.column_names
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    @property
    def num_columns(self) -> int:
        return len(self.column_names)

    def is_empty(self) -> bool:
        return not self._rows

    def all(self) -> "list[dict[str, Any]]":
        """Return all rows as fresh dictionaries.

        Returns:
            List of all rows in the result. Mutating it does not affect the result set.
        """
        return [dict(row) for row in self._rows]

    def get_first(self) -> "Optional[Row]":
        """Get the first row from the result, if any.

        Returns:
            First row or None if no data.
        """
        return self._rows[0] if self._rows else None

    def one(self) -> Row:
        """Return exactly one row.

        Raises:
            NotFoundError: If there are no rows.
            MultipleResultsFoundError: If there is more than one row.

        Returns:
            The single row
        """
        if not self._rows:
            msg = "No result found, exactly one row expected"
            raise NotFoundError(msg)
        if len(self._rows) > 1:
            msg = f"Multiple results found ({len(self._rows)}), exactly one row expected"
            raise MultipleResultsFoundError(msg)
        return self._rows[0]

    def one_or_none(self) -> "Optional[Row]":
        """Return at most one row.

        Raises:
            MultipleResultsFoundError: If there is more than one row.

        Returns:
            The single row or None if no results
        """
        if not self._rows:
            return None
        if len(self._rows) > 1:
            msg = f"Multiple results found ({len(self._rows)}), at most one row expected"
            raise MultipleResultsFoundError(msg)
        return self._rows[0]

    def scalar(self) -> Any:
        """Return the first column of the first row."""
        return next(iter(self.one().values()))

    def scalar_or_none(self) -> Any:
        row = self.one_or_none()
        if row is None:
            return None
        return next(iter(row.values()))
