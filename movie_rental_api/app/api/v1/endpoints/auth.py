"""
Login endpoint for API v1.

Exchanges an e-mail and password for a signed token, returned as the
plain-text response body.  The same message is used for an unknown
e-mail and a wrong password.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse

from movie_rental_api.app.core.security import IdentityVerifier, get_identity_verifier
from movie_rental_api.app.schemas.user import UserLogin
from movie_rental_api.app.services.user_service import UserService


router = APIRouter()


@router.post("", response_class=PlainTextResponse)
async def login(
    credentials: UserLogin,
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> str:
    user = await UserService.authenticate(credentials.email, credentials.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email or password.")
    return verifier.issue(user.id, user.is_admin)
