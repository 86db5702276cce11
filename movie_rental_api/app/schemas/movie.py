"""
Pydantic models for movies.

A movie stores a snapshot of its genre (``id`` and ``name``) taken when
the movie is created or updated.  ``numberInStock`` is additionally
capped by ``settings.max_number_in_stock`` in ``MovieService``.
"""

from pydantic import BaseModel, Field

from ..core.db import OBJECT_ID_PATTERN


class GenreSnapshot(BaseModel):
    id: str
    name: str


class MovieCreate(BaseModel):
    """Schema for creating or replacing a movie."""

    title: str = Field(..., min_length=5, max_length=255, examples=["Terminator"])
    genre_id: str = Field(..., alias="genreId", pattern=OBJECT_ID_PATTERN)
    number_in_stock: int = Field(..., alias="numberInStock", ge=0)
    daily_rental_rate: float = Field(..., alias="dailyRentalRate", ge=0, le=255)

    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True,
    }


class MovieRead(BaseModel):
    id: str
    title: str
    genre: GenreSnapshot
    number_in_stock: int = Field(..., alias="numberInStock")
    daily_rental_rate: float = Field(..., alias="dailyRentalRate")

    model_config = {
        "populate_by_name": True,
    }
