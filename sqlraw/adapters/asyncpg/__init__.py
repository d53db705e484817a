from sqlraw.adapters.asyncpg.config import AsyncpgConfig, AsyncpgConnectionConfig
from sqlraw.adapters.asyncpg.driver import AsyncpgDriver

__all__ = ("AsyncpgConfig", "AsyncpgConnectionConfig", "AsyncpgDriver")
