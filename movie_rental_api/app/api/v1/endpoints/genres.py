"""
Genre endpoints for API v1.

Reading genres is public.  Creating and updating require an
authenticated user; deleting requires an administrator.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from movie_rental_api.app.core.exceptions import EntityNotFoundError
from movie_rental_api.app.core.security import IdentityClaim, require_authenticated, require_elevated
from movie_rental_api.app.schemas.genre import GenreCreate, GenreRead
from movie_rental_api.app.services.genre_service import GenreService


router = APIRouter()


@router.get("", response_model=List[GenreRead])
async def list_genres() -> List[GenreRead]:
    """List all genres ordered by name."""
    return await GenreService.list_genres()


@router.get("/{genre_id}", response_model=GenreRead)
async def get_genre(genre_id: str = Path(..., description="ID of the genre")) -> GenreRead:
    try:
        return await GenreService.get_genre(genre_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("", response_model=GenreRead)
async def create_genre(
    genre: GenreCreate,
    current_user: IdentityClaim = Depends(require_authenticated),
) -> GenreRead:
    return await GenreService.create_genre(genre)


@router.put("/{genre_id}", response_model=GenreRead)
async def update_genre(
    genre: GenreCreate,
    genre_id: str = Path(..., description="ID of the genre"),
    current_user: IdentityClaim = Depends(require_authenticated),
) -> GenreRead:
    try:
        return await GenreService.update_genre(genre_id, genre)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{genre_id}", response_model=GenreRead)
async def delete_genre(
    genre_id: str = Path(..., description="ID of the genre"),
    current_user: IdentityClaim = Depends(require_elevated),
) -> GenreRead:
    """Delete a genre.  Only administrators may delete catalog entries."""
    try:
        return await GenreService.delete_genre(genre_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
