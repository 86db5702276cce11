"""
User endpoints for API v1.

Registration returns the new user without its password and sends an
``x-auth-token`` header so the client is logged in straight away.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from movie_rental_api.app.core.exceptions import EntityNotFoundError, InvalidInput
from movie_rental_api.app.core.security import (
    AUTH_HEADER,
    IdentityClaim,
    IdentityVerifier,
    get_identity_verifier,
    require_authenticated,
)
from movie_rental_api.app.schemas.user import UserCreate, UserProfile, UserRead
from movie_rental_api.app.services.user_service import UserService


router = APIRouter()


@router.post("", response_model=UserRead)
async def register_user(
    user: UserCreate,
    response: Response,
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> UserRead:
    try:
        created = await UserService.create_user(user)
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    response.headers[AUTH_HEADER] = verifier.issue(created.id, created.is_admin)
    return UserService.public(created)


@router.get("/me", response_model=UserProfile)
async def read_current_user(current_user: IdentityClaim = Depends(require_authenticated)) -> UserProfile:
    """Return the account the token was issued for."""
    try:
        return await UserService.get_user(current_user.subject_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
