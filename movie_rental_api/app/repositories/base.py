"""
Base repository for table-backed entities.

``TableRepository`` maps one SQLite table onto the small set of
operations the services rely on: find by id, find all with an exact
field filter and a sort key, insert, update by id and delete by id.
Rows are returned as plain dictionaries keyed by column name; a lookup
that matches nothing returns ``None``.

Every call opens its own connection via ``core.db.get_cursor``.  SQLite
errors are translated to ``RepositoryUnavailable`` (or its subclass
``RepositoryTimeout`` when the database lock could not be obtained
within ``settings.db_timeout_seconds``).  Integrity errors are passed
through untouched so services can map them to client errors.
"""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..core.db import get_cursor, new_object_id
from ..core.exceptions import RepositoryTimeout, RepositoryUnavailable


logger = logging.getLogger(__name__)


@contextmanager
def repository_cursor(operation: str) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, translating driver errors for ``operation``."""
    try:
        with get_cursor() as cursor:
            yield cursor
    except sqlite3.IntegrityError:
        raise
    except sqlite3.OperationalError as exc:
        message = str(exc).lower()
        if "locked" in message or "busy" in message:
            logger.warning("Database busy during %s: %s", operation, exc)
            raise RepositoryTimeout(f"{operation} timed out") from exc
        logger.error("Database error during %s: %s", operation, exc)
        raise RepositoryUnavailable(f"{operation} failed") from exc
    except sqlite3.Error as exc:
        logger.error("Database error during %s: %s", operation, exc)
        raise RepositoryUnavailable(f"{operation} failed") from exc


class TableRepository:
    """Generic CRUD access to a single table with a text ``id`` primary key."""

    table: str = ""
    columns: Sequence[str] = ()

    def _check_columns(self, names) -> None:
        unknown = [name for name in names if name not in self.columns and name != "id"]
        if unknown:
            raise ValueError(f"Unknown column(s) for {self.table}: {', '.join(unknown)}")

    def find_by_id(self, entity_id: str) -> Optional[Dict[str, Any]]:
        with repository_cursor(f"find {self.table}") as cursor:
            row = cursor.execute(
                f"SELECT * FROM {self.table} WHERE id = ?", (entity_id,)
            ).fetchone()
        return dict(row) if row else None

    def find_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        sort: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Return rows matching every ``filters`` item exactly.

        ``sort`` is a column name, prefixed with ``-`` for descending order.
        """
        filters = filters or {}
        self._check_columns(filters)
        query = f"SELECT * FROM {self.table}"
        params: list = []
        if filters:
            query += " WHERE " + " AND ".join(f"{name} = ?" for name in filters)
            params.extend(filters.values())
        if sort:
            column = sort.lstrip("-")
            self._check_columns([column])
            query += f" ORDER BY {column} {'DESC' if sort.startswith('-') else 'ASC'}"
        with repository_cursor(f"list {self.table}") as cursor:
            rows = cursor.execute(query, tuple(params)).fetchall()
        return [dict(row) for row in rows]

    def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row, generating its id unless one is supplied."""
        record = dict(values)
        record.setdefault("id", new_object_id())
        self._check_columns(record)
        names = list(record)
        placeholders = ", ".join("?" for _ in names)
        with repository_cursor(f"insert {self.table}") as cursor:
            cursor.execute(
                f"INSERT INTO {self.table} ({', '.join(names)}) VALUES ({placeholders})",
                tuple(record[name] for name in names),
            )
        return record

    def update_by_id(self, entity_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Update the given columns and return the stored row, or ``None``."""
        self._check_columns(values)
        assignments = ", ".join(f"{name} = ?" for name in values)
        with repository_cursor(f"update {self.table}") as cursor:
            cursor.execute(
                f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                (*values.values(), entity_id),
            )
            if cursor.rowcount == 0:
                return None
            row = cursor.execute(
                f"SELECT * FROM {self.table} WHERE id = ?", (entity_id,)
            ).fetchone()
        return dict(row)

    def delete_by_id(self, entity_id: str) -> Optional[Dict[str, Any]]:
        """Delete a row and return it as it was, or ``None`` if absent."""
        with repository_cursor(f"delete {self.table}") as cursor:
            row = cursor.execute(
                f"SELECT * FROM {self.table} WHERE id = ?", (entity_id,)
            ).fetchone()
            if row is None:
                return None
            cursor.execute(f"DELETE FROM {self.table} WHERE id = ?", (entity_id,))
        return dict(row)
