"""
Business logic for users.

Passwords are stored as PBKDF2 hashes produced by
``core.security.hash_password``.  New accounts are never administrators;
the ``is_admin`` flag is granted directly in the database.
"""

import logging
import sqlite3
from typing import Optional

from ..core.exceptions import EntityNotFoundError, InvalidInput
from ..core.security import hash_password, verify_password
from ..repositories import UserRepository
from ..schemas.user import UserCreate, UserProfile, UserRead


logger = logging.getLogger(__name__)


class UserService:
    """Service for registering and authenticating users."""

    repository = UserRepository()

    @classmethod
    async def create_user(cls, data: UserCreate) -> UserProfile:
        """Register a new user.  Raises ``InvalidInput`` if the e-mail is taken."""
        logger.info("Registering user %s", data.email)
        if cls.repository.find_by_email(data.email):
            raise InvalidInput("User already registered.")
        try:
            row = cls.repository.insert(
                {
                    "name": data.name,
                    "email": data.email,
                    "password": hash_password(data.password),
                    "is_admin": 0,
                }
            )
        except sqlite3.IntegrityError as e:
            # Registered concurrently between the lookup and the insert.
            raise InvalidInput("User already registered.") from e
        return UserProfile(id=row["id"], name=row["name"], email=row["email"], is_admin=False)

    @classmethod
    async def authenticate(cls, email: str, password: str) -> Optional[UserProfile]:
        """Return the user if the credentials match, otherwise ``None``."""
        row = cls.repository.find_by_email(email)
        if not row or not verify_password(password, row["password"]):
            return None
        return UserProfile(id=row["id"], name=row["name"], email=row["email"], is_admin=bool(row["is_admin"]))

    @classmethod
    async def get_user(cls, user_id: str) -> UserProfile:
        row = cls.repository.find_by_id(user_id)
        if not row:
            raise EntityNotFoundError("The user with the given ID was not found.")
        return UserProfile(id=row["id"], name=row["name"], email=row["email"], is_admin=bool(row["is_admin"]))

    @staticmethod
    def public(user: UserProfile) -> UserRead:
        return UserRead(id=user.id, name=user.name, email=user.email)
