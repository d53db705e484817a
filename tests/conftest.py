from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest

from sqlraw.adapters.aiosqlite import AiosqliteConfig
from sqlraw.executor import QueryExecutor

pytest_plugins = ["pytest_databases.docker.postgres"]


@pytest.fixture
def aiosqlite_config() -> AiosqliteConfig:
    """In-memory aiosqlite configuration."""
    return AiosqliteConfig(connection_config={"database": ":memory:"})


@pytest.fixture
async def aiosqlite_executor(aiosqlite_config: AiosqliteConfig) -> AsyncGenerator[QueryExecutor, None]:
    """Open executor on a fresh in-memory database, shut down after the test."""
    executor = await QueryExecutor.connect(aiosqlite_config)
    try:
        yield executor
    finally:
        await executor.shutdown()
