"""Demonstration entry point.

Runs the pets/people/books/products queries in sequence against one
executor and prints each labelled result.
"""

from typing import TYPE_CHECKING, Any, Optional

from rich import get_console

from sqlraw.config import DEFAULT_DATABASE_URL, config_from_url
from sqlraw.demo.queries import (
    create_pet,
    get_books_by_author,
    get_people,
    get_pets,
    get_pets_by_owner_name_and_type,
    get_products_bought_by_customer,
    setup_schema,
)

if TYPE_CHECKING:
    from rich.console import Console

    from sqlraw.executor import QueryExecutor

__all__ = ("main", "run")


async def main(
    executor: "QueryExecutor", *, setup: bool = True, console: "Optional[Console]" = None
) -> "dict[str, list[dict[str, Any]]]":
    """Run the demonstration queries.

    Args:
        executor: An open executor. It is left open; the caller shuts it down.
        setup: Drop, recreate and seed the schema first.
        console: Console to print to. Defaults to the global rich console.

    Returns:
        Each labelled result, in the order it was printed.
    """
    console = console or get_console()
    if setup:
        await setup_schema(executor)

    await create_pet(executor, "Swiper", "fox", 3)

    results = {
        "all pets": await get_pets(executor),
        "all people": await get_people(executor),
        "anns dogs": await get_pets_by_owner_name_and_type(executor, "Ann Duong", "dog"),
        "James Baldwin Books": await get_books_by_author(executor, "James", "Baldwin"),
        "anns products": await get_products_bought_by_customer(executor, "Ann"),
    }
    for label, rows in results.items():
        console.print(f"[bold]{label}:[/bold]", rows)
    return results


async def run(
    database_url: str = DEFAULT_DATABASE_URL, *, setup: bool = True, console: "Optional[Console]" = None
) -> "dict[str, list[dict[str, Any]]]":
    """Connect, run :func:`main` and shut the connection down."""
    async with config_from_url(database_url).provide_executor() as executor:
        return await main(executor, setup=setup, console=console)
