"""Repositories for the store catalog: genres, customers, movies and stock."""

import logging

from .base import TableRepository, repository_cursor


logger = logging.getLogger(__name__)


class GenreRepository(TableRepository):
    table = "genres"
    columns = ("name",)


class CustomerRepository(TableRepository):
    table = "customers"
    columns = ("name", "is_gold", "phone")


class MovieRepository(TableRepository):
    table = "movies"
    columns = (
        "title",
        "genre_id",
        "genre_name",
        "number_in_stock",
        "daily_rental_rate",
    )


class InventoryRepository:
    """Single-statement updates of ``movies.number_in_stock``.

    Each method is one ``UPDATE`` so the read-modify-write happens
    inside SQLite and concurrent requests cannot lose an update.
    """

    def increment_stock(self, movie_id: str) -> bool:
        """Add one copy back to stock.  Returns ``False`` if the movie is gone."""
        with repository_cursor("increment stock") as cursor:
            cursor.execute(
                "UPDATE movies SET number_in_stock = number_in_stock + 1 WHERE id = ?",
                (movie_id,),
            )
            updated = cursor.rowcount == 1
        if not updated:
            logger.warning("Movie %s no longer exists; stock not incremented", movie_id)
        return updated

    def decrement_stock_if_available(self, movie_id: str) -> bool:
        """Take one copy out of stock unless none are left."""
        with repository_cursor("decrement stock") as cursor:
            cursor.execute(
                "UPDATE movies SET number_in_stock = number_in_stock - 1 "
                "WHERE id = ? AND number_in_stock > 0",
                (movie_id,),
            )
            return cursor.rowcount == 1
