"""Statement and placeholder handling.

Components:
- ParameterStyle enum: placeholder styles understood by the drivers
- PlaceholderInfo: position of a placeholder in the SQL text
- extract_placeholders: finds ``?`` placeholders outside literals and comments
- QuerySpec: immutable pair of SQL text and ordered parameters
"""

import re
from collections.abc import Mapping, Sequence
from enum import Enum
from functools import lru_cache
from typing import Any, Final, NamedTuple

from sqlraw.exceptions import ExtraParameterError, MissingParameterError, ParameterError

__all__ = (
    "ParameterStyle",
    "PlaceholderInfo",
    "QuerySpec",
    "coerce_parameters",
    "extract_placeholders",
    "is_parameter_sequence",
)

# Literals, comments and operators are matched first so a ``?`` inside them is skipped.
_PLACEHOLDER_REGEX: Final = re.compile(
    r"""
    (?P<dquote>"(?:[^"\\]|\\.)*") |
    (?P<squote>'(?:[^']|'')*') |
    (?P<dollar_quoted_string>\$(?P<dollar_quote_tag_inner>\w*)?\$[\s\S]*?\$(?P=dollar_quote_tag_inner)\$) |
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*(?:[^*]|\*(?!/))*\*/) |
    (?P<pg_q_operator>\?\?|\?\|(?!\|)|\?&) |
    (?P<qmark>\?)
    """,
    re.VERBOSE | re.MULTILINE | re.DOTALL,
)


class ParameterStyle(str, Enum):
    """Placeholder styles.

    - QMARK: ``?`` placeholders (sqlite, and the style callers write)
    - NUMERIC: ``$1``, ``$2`` placeholders (asyncpg)
    """

    QMARK = "qmark"
    NUMERIC = "numeric"


class PlaceholderInfo(NamedTuple):
    """A placeholder found in SQL text."""

    position: int
    ordinal: int


@lru_cache(maxsize=512)
def extract_placeholders(sql: str) -> "tuple[PlaceholderInfo, ...]":
    """Find positional placeholders in ``sql``.

    Question marks inside quoted strings, quoted identifiers, dollar-quoted
    bodies, comments and the PostgreSQL ``?|``/``?&``/``??`` operators are
    not placeholders.

    Args:
        sql: SQL text to scan.

    Returns:
        Placeholders in left-to-right order.
    """
    if "?" not in sql:
        return ()
    placeholders: list[PlaceholderInfo] = []
    for match in _PLACEHOLDER_REGEX.finditer(sql):
        if match.lastgroup == "qmark":
            placeholders.append(PlaceholderInfo(position=match.start(), ordinal=len(placeholders)))
    return tuple(placeholders)


def is_parameter_sequence(value: Any) -> bool:
    """Check that ``value`` is an ordered sequence usable as positional parameters."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray, Mapping))


def coerce_parameters(parameters: "Sequence[Any]", coercion_map: "Mapping[type, Any]") -> "tuple[Any, ...]":
    """Apply driver type coercions to each parameter.

    The first entry whose type matches exactly wins, so ``bool`` is not
    treated as ``int``.

    Args:
        parameters: Parameter values in placeholder order.
        coercion_map: Mapping of Python type to converter callable.

    Returns:
        The coerced parameter values.
    """
    if not coercion_map:
        return tuple(parameters)
    return tuple(coercion_map[type(value)](value) if type(value) in coercion_map else value for value in parameters)


class QuerySpec:
    """Immutable SQL text plus ordered positional parameters.

    Parameters are always bound by the driver; the SQL text is never
    rewritten with parameter values.
    """

    __slots__ = ("_hash", "name", "parameters", "sql")

    sql: str
    parameters: "tuple[Any, ...]"
    name: "str | None"

    def __init__(self, sql: str, parameters: "Sequence[Any]" = (), *, name: "str | None" = None) -> None:
        """Initialize a query spec.

        Args:
            sql: SQL text containing ``?`` placeholders.
            parameters: Values for the placeholders, in order.
            name: Optional name, set when the statement came from a SQL file.

        Raises:
            ParameterError: If ``parameters`` is not an ordered sequence.
        """
        if parameters is None:
            parameters = ()
        if not is_parameter_sequence(parameters):
            msg = f"Parameters must be an ordered sequence of values, got {type(parameters).__name__}"
            raise ParameterError(msg, sql)
        object.__setattr__(self, "sql", sql)
        object.__setattr__(self, "parameters", tuple(parameters))
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "_hash", None)

    def __setattr__(self, name: str, value: Any) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __delattr__(self, name: str) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __repr__(self) -> str:
        if self.name:
            return f"QuerySpec(name={self.name!r}, sql={self.sql!r}, parameters={self.parameters!r})"
        return f"QuerySpec(sql={self.sql!r}, parameters={self.parameters!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuerySpec):
            return NotImplemented
        return self.sql == other.sql and self.parameters == other.parameters

    def __hash__(self) -> int:
        if self._hash is None:
            object.__setattr__(self, "_hash", hash((self.sql, self.parameters)))
        return self._hash  # type: ignore[return-value]

    @property
    def placeholders(self) -> "tuple[PlaceholderInfo, ...]":
        """Placeholders found in the SQL text."""
        return extract_placeholders(self.sql)

    def with_parameters(self, *parameters: Any) -> "QuerySpec":
        """Return a copy bound to new parameters."""
        return QuerySpec(self.sql, parameters, name=self.name)

    def validate(self) -> "QuerySpec":
        """Check that there is exactly one value per placeholder.

        Returns:
            This spec, for chaining.

        Raises:
            MissingParameterError: Fewer values than placeholders.
            ExtraParameterError: More values than placeholders.
        """
        expected = len(self.placeholders)
        supplied = len(self.parameters)
        if supplied < expected:
            msg = f"Statement expects {expected} parameter(s) but {supplied} were supplied"
            raise MissingParameterError(msg, self.sql)
        if supplied > expected:
            msg = f"Statement expects {expected} parameter(s) but {supplied} were supplied"
            raise ExtraParameterError(msg, self.sql)
        return self

    def for_style(self, style: ParameterStyle) -> str:
        """Render the SQL text with placeholders for ``style``.

        Args:
            style: Placeholder style the driver expects.

        Returns:
            SQL text. Only placeholder markers differ from :attr:`sql`.
        """
        if style is ParameterStyle.QMARK or not self.placeholders:
            return self.sql
        pieces: list[str] = []
        cursor = 0
        for placeholder in self.placeholders:
            pieces.append(self.sql[cursor : placeholder.position])
            pieces.append(f"${placeholder.ordinal + 1}")
            cursor = placeholder.position + 1
        pieces.append(self.sql[cursor:])
        return "".join(pieces)
