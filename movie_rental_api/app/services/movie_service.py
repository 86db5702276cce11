"""
Business logic for movies.

``MovieService`` validates the referenced genre and the stock cap before
writing, and stores a snapshot of the genre on the movie row.  Stock
changes caused by rentals and returns go through ``InventoryRepository``
rather than this service.
"""

import logging
from typing import Any, Dict, List

from ..core.config import settings
from ..core.exceptions import EntityNotFoundError, InvalidInput
from ..repositories import GenreRepository, MovieRepository
from ..schemas.movie import GenreSnapshot, MovieCreate, MovieRead


logger = logging.getLogger(__name__)


def movie_from_row(row: Dict[str, Any]) -> MovieRead:
    return MovieRead(
        id=row["id"],
        title=row["title"],
        genre=GenreSnapshot(id=row["genre_id"], name=row["genre_name"]),
        number_in_stock=row["number_in_stock"],
        daily_rental_rate=row["daily_rental_rate"],
    )


class MovieService:
    """Service for managing movies."""

    repository = MovieRepository()
    genres = GenreRepository()

    @classmethod
    def _values(cls, data: MovieCreate) -> Dict[str, Any]:
        if data.number_in_stock > settings.max_number_in_stock:
            raise InvalidInput(
                f'"numberInStock" must be less than or equal to {settings.max_number_in_stock}'
            )
        genre = cls.genres.find_by_id(data.genre_id)
        if not genre:
            raise InvalidInput("Invalid genre.")
        return {
            "title": data.title,
            "genre_id": genre["id"],
            "genre_name": genre["name"],
            "number_in_stock": data.number_in_stock,
            "daily_rental_rate": data.daily_rental_rate,
        }

    @classmethod
    async def list_movies(cls) -> List[MovieRead]:
        """Return all movies ordered by title."""
        return [movie_from_row(row) for row in cls.repository.find_all(sort="title")]

    @classmethod
    async def get_movie(cls, movie_id: str) -> MovieRead:
        row = cls.repository.find_by_id(movie_id)
        if not row:
            raise EntityNotFoundError("The movie with the given ID was not found.")
        return movie_from_row(row)

    @classmethod
    async def create_movie(cls, data: MovieCreate) -> MovieRead:
        row = cls.repository.insert(cls._values(data))
        logger.info("Created movie %s", row["id"])
        return movie_from_row(row)

    @classmethod
    async def update_movie(cls, movie_id: str, data: MovieCreate) -> MovieRead:
        row = cls.repository.update_by_id(movie_id, cls._values(data))
        if not row:
            raise EntityNotFoundError("The movie with the given ID was not found.")
        return movie_from_row(row)

    @classmethod
    async def delete_movie(cls, movie_id: str) -> MovieRead:
        row = cls.repository.delete_by_id(movie_id)
        if not row:
            raise EntityNotFoundError("The movie with the given ID was not found.")
        logger.info("Deleted movie %s", movie_id)
        return movie_from_row(row)
