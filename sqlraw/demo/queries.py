"""Demonstration queries against the pets/people/books/products schema.

Every function takes the executor explicitly; nothing here holds a
module-level connection.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from sqlraw.loader import SQLFileLoader

if TYPE_CHECKING:
    from sqlraw.executor import QueryExecutor

__all__ = (
    "SQL_DIR",
    "create_pet",
    "get_books_by_author",
    "get_people",
    "get_pets",
    "get_pets_by_owner_name_and_type",
    "get_products_bought_by_customer",
    "load_queries",
    "setup_schema",
)

SQL_DIR: Final = Path(__file__).parent / "sql"
SCHEMA_DIALECTS: Final = {"sqlite": "sqlite", "postgres": "postgres"}

_loader = SQLFileLoader()


def load_queries() -> SQLFileLoader:
    """Return the loader holding the demonstration queries, loading them on first use."""
    if not _loader.list_files():
        _loader.load_sql(SQL_DIR / "queries.sql")
    return _loader


async def setup_schema(executor: "QueryExecutor") -> None:
    """Drop and recreate the demonstration tables, then seed them."""
    schema_dir = SQL_DIR / SCHEMA_DIALECTS.get(executor.dialect, "sqlite")
    loader = load_queries()
    await executor.execute_script(loader.get_file_content(schema_dir / "schema.sql"))
    await executor.execute_script(loader.get_file_content(SQL_DIR / "seed.sql"))


async def get_pets(executor: "QueryExecutor") -> "list[dict[str, Any]]":
    result = await executor.execute_spec(load_queries().get_sql("get_pets"))
    return result.all()


async def get_people(executor: "QueryExecutor") -> "list[dict[str, Any]]":
    result = await executor.execute_spec(load_queries().get_sql("get_people"))
    return result.all()


async def create_pet(executor: "QueryExecutor", name: str, pet_type: str, owner_id: int) -> "list[dict[str, Any]]":
    """Insert a pet. Values are bound to placeholders, never interpolated."""
    result = await executor.execute_spec(load_queries().get_sql("create_pet", name, pet_type, owner_id))
    return result.all()


async def get_pets_by_owner_name_and_type(
    executor: "QueryExecutor", owner_name: str, pet_type: str
) -> "list[dict[str, Any]]":
    statement = load_queries().get_sql("get_pets_by_owner_name_and_type", owner_name, pet_type)
    result = await executor.execute_spec(statement)
    return result.all()


async def get_books_by_author(executor: "QueryExecutor", first_name: str, last_name: str) -> "list[dict[str, Any]]":
    result = await executor.execute_spec(load_queries().get_sql("get_books_by_author", first_name, last_name))
    return result.all()


async def get_products_bought_by_customer(executor: "QueryExecutor", name: str) -> "list[dict[str, Any]]":
    result = await executor.execute_spec(load_queries().get_sql("get_products_bought_by_customer", name))
    return result.all()
