"""Integration tests for QueryExecutor on aiosqlite."""

import asyncio
from pathlib import Path

import pytest

from sqlraw.adapters.aiosqlite import AiosqliteConfig
from sqlraw.exceptions import (
    DatabaseConnectionError,
    ForeignKeyViolationError,
    IntegrityError,
    MissingObjectError,
    MissingParameterError,
    NotNullViolationError,
    QueryError,
    SQLParsingError,
    UniqueViolationError,
)
from sqlraw.executor import QueryExecutor

SCHEMA = """
CREATE TABLE people (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL UNIQUE
);
CREATE TABLE pets (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL,
  type TEXT NOT NULL,
  owner_id INTEGER REFERENCES people (id)
);
INSERT INTO people (name) VALUES ('Ann Duong'), ('Reuben Ogbonna'), ('Carmen Salas');
INSERT INTO pets (name, type, owner_id) VALUES
  ('Khalo', 'dog', 1), ('Juan Pablo', 'dog', 1), ('Pesto', 'cat', 1), ('Frida', 'cat', 2), ('Tiki', 'dog', 3);
"""


@pytest.fixture
async def pets_executor(aiosqlite_executor: QueryExecutor) -> QueryExecutor:
    await aiosqlite_executor.execute_script(SCHEMA)
    return aiosqlite_executor


async def test_insert_then_select(pets_executor: QueryExecutor) -> None:
    inserted = await pets_executor.execute(
        "INSERT INTO pets (name, type, owner_id) VALUES (?, ?, ?)", ["Swiper", "fox", 3]
    )
    assert inserted.is_empty()
    assert inserted.rows_affected == 1

    result = await pets_executor.execute("SELECT name, type, owner_id FROM pets WHERE name = ?", ["Swiper"])
    assert result.all() == [{"name": "Swiper", "type": "fox", "owner_id": 3}]


async def test_parameters_are_never_interpolated(pets_executor: QueryExecutor) -> None:
    hostile = "'; DROP TABLE pets; --"
    await pets_executor.execute("INSERT INTO pets (name, type, owner_id) VALUES (?, ?, ?)", [hostile, "fox", 3])

    stored = await pets_executor.execute("SELECT name FROM pets WHERE name = ?", [hostile])
    assert stored.scalar() == hostile
    count = await pets_executor.execute("SELECT COUNT(*) AS count FROM pets")
    assert count.scalar() == 6


async def test_join_filter_returns_only_matching_rows(pets_executor: QueryExecutor) -> None:
    result = await pets_executor.execute(
        """
        SELECT pets.name, pets.id
        FROM pets
          JOIN people ON pets.owner_id = people.id
        WHERE people.name = ? AND pets.type = ?
        ORDER BY pets.id
        """,
        ["Ann Duong", "dog"],
    )
    assert result.column_names == ("name", "id")
    assert result.all() == [{"name": "Khalo", "id": 1}, {"name": "Juan Pablo", "id": 2}]


async def test_rows_keep_projection_order(pets_executor: QueryExecutor) -> None:
    result = await pets_executor.execute("SELECT owner_id, type, name FROM pets WHERE id = ?", [5])
    assert result.column_names == ("owner_id", "type", "name")
    assert list(result.one()) == ["owner_id", "type", "name"]


async def test_recreate_and_insert_n_rows(aiosqlite_executor: QueryExecutor) -> None:
    await aiosqlite_executor.execute("DROP TABLE IF EXISTS products")
    await aiosqlite_executor.execute("CREATE TABLE products (id INTEGER PRIMARY KEY, name TEXT NOT NULL, price REAL)")
    for index in range(7):
        await aiosqlite_executor.execute(
            "INSERT INTO products (name, price) VALUES (?, ?)", [f"product-{index}", index * 1.5]
        )
    result = await aiosqlite_executor.execute("SELECT * FROM products ORDER BY id")
    assert len(result) == 7
    assert result[6]["name"] == "product-6"

    await aiosqlite_executor.execute("DROP TABLE products")
    await aiosqlite_executor.execute("CREATE TABLE products (id INTEGER PRIMARY KEY, name TEXT NOT NULL, price REAL)")
    assert (await aiosqlite_executor.execute("SELECT * FROM products")).is_empty()


async def test_returning_clause(pets_executor: QueryExecutor) -> None:
    result = await pets_executor.execute(
        "INSERT INTO pets (name, type, owner_id) VALUES (?, ?, ?) RETURNING id, name", ["Swiper", "fox", 3]
    )
    assert result.one() == {"id": 6, "name": "Swiper"}


async def test_update_and_delete_report_rows_affected(pets_executor: QueryExecutor) -> None:
    updated = await pets_executor.execute("UPDATE pets SET type = ? WHERE type = ?", ["hound", "dog"])
    assert updated.rows_affected == 3
    deleted = await pets_executor.execute("DELETE FROM pets WHERE owner_id = ?", [1])
    assert deleted.rows_affected == 3


async def test_null_parameters_and_values(pets_executor: QueryExecutor) -> None:
    await pets_executor.execute("INSERT INTO pets (name, type, owner_id) VALUES (?, ?, ?)", ["Stray", "cat", None])
    result = await pets_executor.execute("SELECT owner_id FROM pets WHERE name = ?", ["Stray"])
    assert result.one() == {"owner_id": None}


async def test_constraint_violations(pets_executor: QueryExecutor) -> None:
    with pytest.raises(ForeignKeyViolationError):
        await pets_executor.execute("INSERT INTO pets (name, type, owner_id) VALUES (?, ?, ?)", ["Ghost", "cat", 99])
    with pytest.raises(NotNullViolationError):
        await pets_executor.execute("INSERT INTO pets (name, type, owner_id) VALUES (?, ?, ?)", [None, "cat", 1])
    with pytest.raises(UniqueViolationError):
        await pets_executor.execute("INSERT INTO people (name) VALUES (?)", ["Ann Duong"])
    with pytest.raises(IntegrityError):
        await pets_executor.execute("INSERT INTO people (id, name) VALUES (?, ?)", [1, "Duplicate"])

    count = await pets_executor.execute("SELECT COUNT(*) FROM pets")
    assert count.scalar() == 5


async def test_statement_errors(pets_executor: QueryExecutor) -> None:
    with pytest.raises(MissingObjectError):
        await pets_executor.execute("SELECT * FROM owners")
    with pytest.raises(MissingObjectError):
        await pets_executor.execute("SELECT colour FROM pets")
    with pytest.raises(SQLParsingError):
        await pets_executor.execute("SELEC name FROM pets")
    with pytest.raises(QueryError):
        await pets_executor.execute("INSERT INTO missing_table VALUES (?)", [1])

    # the connection stays usable after a rejected statement
    result = await pets_executor.execute("SELECT COUNT(*) AS count FROM pets")
    assert result.scalar() == 5


async def test_parameter_count_mismatch(pets_executor: QueryExecutor) -> None:
    with pytest.raises(MissingParameterError):
        await pets_executor.execute("INSERT INTO pets (name, type, owner_id) VALUES (?, ?, ?)", ["Swiper", "fox"])
    assert (await pets_executor.execute("SELECT COUNT(*) FROM pets")).scalar() == 5


async def test_question_mark_in_literal_is_not_a_placeholder(pets_executor: QueryExecutor) -> None:
    result = await pets_executor.execute("SELECT '?' AS literal, name FROM pets WHERE id = ?", [1])
    assert result.one() == {"literal": "?", "name": "Khalo"}


async def test_shutdown_rejects_further_statements(aiosqlite_config: AiosqliteConfig) -> None:
    executor = await QueryExecutor.connect(aiosqlite_config)
    await executor.execute("SELECT 1")
    await executor.shutdown()
    await executor.shutdown()
    with pytest.raises(DatabaseConnectionError):
        await executor.execute("SELECT 1")
    assert isinstance(DatabaseConnectionError("x"), ConnectionError)


async def test_gathered_statements_run_in_order(pets_executor: QueryExecutor) -> None:
    names = [f"pet-{index}" for index in range(10)]
    await asyncio.gather(
        *(
            pets_executor.execute("INSERT INTO pets (name, type, owner_id) VALUES (?, ?, ?)", [name, "fish", 2])
            for name in names
        )
    )
    result = await pets_executor.execute("SELECT name FROM pets WHERE type = ? ORDER BY id", ["fish"])
    assert [row["name"] for row in result] == names


async def test_file_database_persists(tmp_path: Path) -> None:
    config = AiosqliteConfig(connection_config={"database": str(tmp_path / "pets.db")})
    async with config.provide_executor() as executor:
        await executor.execute_script(SCHEMA)
        await executor.execute("INSERT INTO pets (name, type, owner_id) VALUES (?, ?, ?)", ["Swiper", "fox", 3])

    async with config.provide_executor() as executor:
        result = await executor.execute("SELECT COUNT(*) AS count FROM pets")
        assert result.scalar() == 6


async def test_concatenation_next_to_placeholder(pets_executor: QueryExecutor) -> None:
    result = await pets_executor.execute("SELECT ?||'!' AS shout", ["Swiper"])
    assert result.one() == {"shout": "Swiper!"}

    result = await pets_executor.execute("SELECT name||?||type AS label FROM pets WHERE id = ?", [" the ", 1])
    assert result.scalar() == "Khalo the dog"
