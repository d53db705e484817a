"""AIOSQLite database configuration."""

from typing import TYPE_CHECKING, Any, ClassVar, Final, Optional, TypedDict, Union

import aiosqlite
from typing_extensions import NotRequired

from sqlraw.adapters.aiosqlite.core import raise_aiosqlite_exception
from sqlraw.adapters.aiosqlite.driver import AiosqliteDriver
from sqlraw.config import AsyncDatabaseConfig
from sqlraw.exceptions import DatabaseConnectionError
from sqlraw.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ("AiosqliteConfig", "AiosqliteConnectionParams")

logger = get_logger("adapters.aiosqlite")

FOREIGN_KEYS_SQL: Final[str] = "PRAGMA foreign_keys = ON"
BUSY_TIMEOUT_SQL: Final[str] = "PRAGMA busy_timeout = 5000"


class AiosqliteConnectionParams(TypedDict, total=False):
    """TypedDict for aiosqlite connection parameters."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: NotRequired[Optional[str]]
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]
    extra: NotRequired[dict[str, Any]]


class AiosqliteConfig(AsyncDatabaseConfig[aiosqlite.Connection, AiosqliteDriver]):
    """Database configuration for aiosqlite.

    Connections default to an in-memory database in autocommit mode
    (``isolation_level=None``), with foreign key enforcement switched on.
    """

    __slots__ = ("enable_foreign_keys", "init_statements")

    driver_type: "ClassVar[type[AiosqliteDriver]]" = AiosqliteDriver
    connection_type: "ClassVar[type[aiosqlite.Connection]]" = aiosqlite.Connection

    def __init__(
        self,
        *,
        connection_config: "Optional[Union[AiosqliteConnectionParams, dict[str, Any]]]" = None,
        enable_foreign_keys: bool = True,
        init_statements: "Sequence[str]" = (),
    ) -> None:
        """Initialize AIOSQLite configuration.

        Args:
            connection_config: Connection parameters passed to ``aiosqlite.connect``.
            enable_foreign_keys: Run ``PRAGMA foreign_keys = ON`` on each new connection.
            init_statements: Extra statements run once on each new connection.
        """
        super().__init__(connection_config=dict(connection_config) if connection_config else None)
        self.connection_config.setdefault("database", ":memory:")
        self.connection_config.setdefault("isolation_level", None)
        self.enable_foreign_keys = enable_foreign_keys
        self.init_statements = tuple(init_statements)

    async def create_connection(self) -> aiosqlite.Connection:
        """Open a new aiosqlite connection and apply connection PRAGMAs.

        Raises:
            DatabaseConnectionError: If the database cannot be opened.

        Returns:
            An open aiosqlite connection.
        """
        statements = [BUSY_TIMEOUT_SQL]
        if self.enable_foreign_keys:
            statements.append(FOREIGN_KEYS_SQL)
        statements.extend(self.init_statements)
        try:
            connection = await aiosqlite.connect(**self.connection_config)
        except aiosqlite.Error as e:
            msg = f"Could not open SQLite database {self.connection_config['database']!r}: {e}"
            raise DatabaseConnectionError(msg) from e
        try:
            for statement in statements:
                await connection.execute(statement)
        except aiosqlite.Error as e:
            await connection.close()
            raise_aiosqlite_exception(e)
        logger.debug("Opened aiosqlite connection to %s", self.connection_config["database"])
        return connection
