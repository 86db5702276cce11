"""
Movie endpoints for API v1.

Creating or updating a movie requires an existing genre; an unknown
``genreId`` or a ``numberInStock`` above the configured cap is a 400.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from movie_rental_api.app.core.exceptions import EntityNotFoundError, InvalidInput
from movie_rental_api.app.core.security import IdentityClaim, require_authenticated, require_elevated
from movie_rental_api.app.schemas.movie import MovieCreate, MovieRead
from movie_rental_api.app.services.movie_service import MovieService


router = APIRouter()


@router.get("", response_model=List[MovieRead])
async def list_movies() -> List[MovieRead]:
    return await MovieService.list_movies()


@router.get("/{movie_id}", response_model=MovieRead)
async def get_movie(movie_id: str = Path(..., description="ID of the movie")) -> MovieRead:
    try:
        return await MovieService.get_movie(movie_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("", response_model=MovieRead)
async def create_movie(
    movie: MovieCreate,
    current_user: IdentityClaim = Depends(require_authenticated),
) -> MovieRead:
    try:
        return await MovieService.create_movie(movie)
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.put("/{movie_id}", response_model=MovieRead)
async def update_movie(
    movie: MovieCreate,
    movie_id: str = Path(..., description="ID of the movie"),
    current_user: IdentityClaim = Depends(require_authenticated),
) -> MovieRead:
    try:
        return await MovieService.update_movie(movie_id, movie)
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{movie_id}", response_model=MovieRead)
async def delete_movie(
    movie_id: str = Path(..., description="ID of the movie"),
    current_user: IdentityClaim = Depends(require_elevated),
) -> MovieRead:
    try:
        return await MovieService.delete_movie(movie_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
