from sqlraw.adapters.aiosqlite.config import AiosqliteConfig, AiosqliteConnectionParams
from sqlraw.adapters.aiosqlite.driver import AiosqliteDriver

__all__ = ("AiosqliteConfig", "AiosqliteConnectionParams", "AiosqliteDriver")
