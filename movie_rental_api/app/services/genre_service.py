"""
Business logic for genres.

Genres are plain catalog entries.  Movies keep a snapshot of their
genre's name, so renaming a genre does not rewrite existing movies.
"""

import logging
from typing import List

from ..core.exceptions import EntityNotFoundError
from ..repositories import GenreRepository
from ..schemas.genre import GenreCreate, GenreRead


logger = logging.getLogger(__name__)


class GenreService:
    """Service for managing genres."""

    repository = GenreRepository()

    @classmethod
    async def list_genres(cls) -> List[GenreRead]:
        return [GenreRead(**row) for row in cls.repository.find_all(sort="name")]

    @classmethod
    async def get_genre(cls, genre_id: str) -> GenreRead:
        row = cls.repository.find_by_id(genre_id)
        if not row:
            raise EntityNotFoundError("The genre with the given ID was not found.")
        return GenreRead(**row)

    @classmethod
    async def create_genre(cls, data: GenreCreate) -> GenreRead:
        row = cls.repository.insert({"name": data.name})
        logger.info("Created genre %s", row["id"])
        return GenreRead(**row)

    @classmethod
    async def update_genre(cls, genre_id: str, data: GenreCreate) -> GenreRead:
        row = cls.repository.update_by_id(genre_id, {"name": data.name})
        if not row:
            raise EntityNotFoundError("The genre with the given ID was not found.")
        return GenreRead(**row)

    @classmethod
    async def delete_genre(cls, genre_id: str) -> GenreRead:
        row = cls.repository.delete_by_id(genre_id)
        if not row:
            raise EntityNotFoundError("The genre with the given ID was not found.")
        logger.info("Deleted genre %s", genre_id)
        return GenreRead(**row)
