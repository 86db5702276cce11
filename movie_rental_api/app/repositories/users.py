"""Repository for user accounts."""

from typing import Any, Dict, Optional

from .base import TableRepository, repository_cursor


class UserRepository(TableRepository):
    table = "users"
    columns = ("name", "email", "password", "is_admin")

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        with repository_cursor("find user by email") as cursor:
            row = cursor.execute(
                "SELECT * FROM users WHERE email = ?", (email,)
            ).fetchone()
        return dict(row) if row else None
