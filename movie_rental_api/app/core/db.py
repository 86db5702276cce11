"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), applying migrations on application start
(``init_db``) and a few helpers shared by the repositories: entity id
generation and timestamp (de)serialisation.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import re
import secrets
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from .config import settings


OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"
_OBJECT_ID_RE = re.compile(OBJECT_ID_PATTERN)


def new_object_id() -> str:
    """Return a fresh 24 character hexadecimal entity id."""
    return secrets.token_hex(12)


def is_object_id(value: object) -> bool:
    return isinstance(value, str) and bool(_OBJECT_ID_RE.match(value))


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Serialise a datetime as ISO-8601 in UTC.  Naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # movie_rental_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection uses a row factory to access columns by name and
    ``settings.db_timeout_seconds`` as its busy timeout, so a write that
    cannot obtain the database lock in time fails with
    ``sqlite3.OperationalError`` instead of blocking the request.
    """
    db_path = get_database_path()
    conn = sqlite3.connect(db_path, timeout=settings.db_timeout_seconds)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS genres (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS customers (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            is_gold INTEGER NOT NULL DEFAULT 0,
            phone TEXT NOT NULL
        );

        -- The genre is a snapshot copied when the movie is saved.
        CREATE TABLE IF NOT EXISTS movies (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            genre_id TEXT NOT NULL,
            genre_name TEXT NOT NULL,
            number_in_stock INTEGER NOT NULL CHECK (number_in_stock >= 0),
            daily_rental_rate REAL NOT NULL CHECK (daily_rental_rate >= 0)
        );

        -- Customer and movie columns are snapshots taken when the rental
        -- is issued.  They are not foreign keys on purpose.
        CREATE TABLE IF NOT EXISTS rentals (
            id TEXT PRIMARY KEY,
            customer_id TEXT NOT NULL,
            customer_name TEXT NOT NULL,
            customer_is_gold INTEGER NOT NULL DEFAULT 0,
            customer_phone TEXT NOT NULL,
            movie_id TEXT NOT NULL,
            movie_title TEXT NOT NULL,
            movie_daily_rental_rate REAL NOT NULL,
            date_out TIMESTAMP NOT NULL,
            date_returned TIMESTAMP,
            rental_fee REAL CHECK (rental_fee IS NULL OR rental_fee >= 0),
            CHECK ((date_returned IS NULL) = (rental_fee IS NULL))
        );

        CREATE INDEX IF NOT EXISTS idx_rentals_customer_movie
            ON rentals(customer_id, movie_id);

        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            is_admin INTEGER NOT NULL DEFAULT 0
        );
        """,
    ),
]


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  If you add a new migration, append it with an
    incremented version number.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
