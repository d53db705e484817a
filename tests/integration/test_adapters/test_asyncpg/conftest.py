from collections.abc import AsyncGenerator
from typing import Any

import pytest
from pytest_databases.docker.postgres import PostgresService

from sqlraw.adapters.asyncpg import AsyncpgConfig
from sqlraw.executor import QueryExecutor


@pytest.fixture(scope="function")
def asyncpg_connection_config(postgres_service: "PostgresService") -> "dict[str, Any]":
    """Connection parameters for the pytest-databases PostgreSQL container."""

    return {
        "host": postgres_service.host,
        "port": postgres_service.port,
        "user": postgres_service.user,
        "password": postgres_service.password,
        "database": postgres_service.database,
    }


@pytest.fixture(scope="function")
def asyncpg_config(asyncpg_connection_config: "dict[str, Any]") -> AsyncpgConfig:
    return AsyncpgConfig(connection_config=dict(asyncpg_connection_config))


@pytest.fixture(scope="function")
async def asyncpg_executor(asyncpg_config: AsyncpgConfig) -> "AsyncGenerator[QueryExecutor, None]":
    """Open executor with a fresh ``pets`` table."""
    async with asyncpg_config.provide_executor() as executor:
        await executor.execute_script(
            """
            DROP TABLE IF EXISTS pets;
            CREATE TABLE pets (
              id SERIAL PRIMARY KEY,
              name TEXT NOT NULL,
              type TEXT NOT NULL,
              owner_id INTEGER
            );
            """
        )
        yield executor
        if executor.is_open:
            await executor.execute_script("DROP TABLE IF EXISTS pets")
