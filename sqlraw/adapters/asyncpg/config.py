"""AsyncPG database configuration."""

from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict, Union

import asyncpg
from typing_extensions import NotRequired

from sqlraw.adapters.asyncpg.core import raise_asyncpg_exception
from sqlraw.adapters.asyncpg.driver import AsyncpgDriver
from sqlraw.config import AsyncDatabaseConfig
from sqlraw.exceptions import DatabaseConnectionError
from sqlraw.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ("AsyncpgConfig", "AsyncpgConnectionConfig")

logger = get_logger("adapters.asyncpg")


class AsyncpgConnectionConfig(TypedDict, total=False):
    """TypedDict for AsyncPG connection parameters."""

    dsn: NotRequired[str]
    host: NotRequired[str]
    port: NotRequired[int]
    user: NotRequired[str]
    password: NotRequired[str]
    database: NotRequired[str]
    ssl: NotRequired[Any]
    passfile: NotRequired[str]
    direct_tls: NotRequired[bool]
    timeout: NotRequired[float]
    command_timeout: NotRequired[float]
    statement_cache_size: NotRequired[int]
    server_settings: NotRequired[dict[str, str]]
    extra: NotRequired[dict[str, Any]]


class AsyncpgConfig(AsyncDatabaseConfig[asyncpg.Connection, AsyncpgDriver]):
    """Configuration for a single AsyncPG connection."""

    __slots__ = ("init_statements",)

    driver_type: "ClassVar[type[AsyncpgDriver]]" = AsyncpgDriver
    connection_type: "ClassVar[type[asyncpg.Connection]]" = asyncpg.Connection

    def __init__(
        self,
        *,
        connection_config: "Optional[Union[AsyncpgConnectionConfig, dict[str, Any]]]" = None,
        init_statements: "Sequence[str]" = (),
    ) -> None:
        """Initialize AsyncPG configuration.

        Args:
            connection_config: Connection parameters passed to ``asyncpg.connect``.
            init_statements: Statements run once on each new connection, e.g. ``SET search_path``.
        """
        super().__init__(connection_config=dict(connection_config) if connection_config else None)
        self.init_statements = tuple(init_statements)

    async def create_connection(self) -> asyncpg.Connection:
        """Open a new asyncpg connection.

        Raises:
            DatabaseConnectionError: If the server cannot be reached or rejects the login.

        Returns:
            An open asyncpg connection.
        """
        try:
            connection = await asyncpg.connect(**self.connection_config)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            msg = f"Could not connect to PostgreSQL: {e}"
            raise DatabaseConnectionError(msg) from e
        try:
            for statement in self.init_statements:
                await connection.execute(statement)
        except asyncpg.PostgresError as e:
            await connection.close()
            raise_asyncpg_exception(e)
        logger.debug("Opened asyncpg connection to %s", self.connection_config.get("host") or "dsn")
        return connection
