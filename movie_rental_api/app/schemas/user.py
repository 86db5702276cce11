"""
Pydantic models for user accounts.

Users are the operators of the store who authenticate against the API,
not the customers renting movies.  Passwords are never returned.
"""

from pydantic import BaseModel, Field


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(BaseModel):
    name: str = Field(..., min_length=5, max_length=50, examples=["Jane Doe"])
    email: str = Field(..., min_length=5, max_length=255, pattern=EMAIL_PATTERN, examples=["jane@example.com"])
    password: str = Field(..., min_length=5, max_length=255)


class UserLogin(BaseModel):
    """Credentials exchanged for an ``x-auth-token`` at ``POST /auth``."""

    email: str = Field(..., min_length=5, max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=5, max_length=255)


class UserRead(BaseModel):
    id: str
    name: str
    email: str


class UserProfile(UserRead):
    is_admin: bool = Field(False, alias="isAdmin")

    model_config = {
        "populate_by_name": True,
    }
