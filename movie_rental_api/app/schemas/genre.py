"""Pydantic models for movie genres."""

from pydantic import BaseModel, Field


class GenreBase(BaseModel):
    name: str = Field(..., min_length=5, max_length=50, examples=["Comedy"])


class GenreCreate(GenreBase):
    """Schema for creating or replacing a genre."""
    pass


class GenreRead(GenreBase):
    id: str

    model_config = {
        "from_attributes": True,
    }
