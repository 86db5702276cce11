"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("JWT_PRIVATE_KEY", "test-private-key")

from datetime import datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from movie_rental_api.app.core.config import settings
from movie_rental_api.app.core.db import init_db, new_object_id, utcnow
from movie_rental_api.app.core.security import IdentityVerifier
from movie_rental_api.app.main import app
from movie_rental_api.app.repositories import (
    CustomerRepository,
    GenreRepository,
    MovieRepository,
    RentalRepository,
)
from movie_rental_api.app.schemas.rental import CustomerSnapshot, MovieSnapshot, RentalRecord


SECRET = "test-private-key"


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point the application at a fresh SQLite file for each test."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "test.db"))
    monkeypatch.setattr(settings, "jwt_private_key", SECRET)
    init_db()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def verifier() -> IdentityVerifier:
    return IdentityVerifier(SECRET)


@pytest.fixture
def token(verifier) -> str:
    """Token of a regular, non-administrative user."""
    return verifier.issue(new_object_id())


@pytest.fixture
def admin_token(verifier) -> str:
    return verifier.issue(new_object_id(), is_elevated=True)


@pytest.fixture
def genre() -> dict:
    return GenreRepository().insert({"name": "Science Fiction"})


@pytest.fixture
def customer() -> dict:
    return CustomerRepository().insert({"name": "Jane Doe", "is_gold": 0, "phone": "555-0100"})


@pytest.fixture
def movie(genre) -> dict:
    return MovieRepository().insert(
        {
            "title": "Blade Runner",
            "genre_id": genre["id"],
            "genre_name": genre["name"],
            "number_in_stock": 7,
            "daily_rental_rate": 2,
        }
    )


@pytest.fixture
def make_rental():
    """Store a rental directly, bypassing stock bookkeeping."""

    def _make_rental(
        customer_id: Optional[str] = None,
        movie_id: Optional[str] = None,
        date_out: Optional[datetime] = None,
        date_returned: Optional[datetime] = None,
        rental_fee: Optional[float] = None,
        daily_rental_rate: float = 2,
    ) -> RentalRecord:
        rental = RentalRecord(
            id=new_object_id(),
            customer=CustomerSnapshot(id=customer_id or new_object_id(), name="12345", phone="12345"),
            movie=MovieSnapshot(id=movie_id or new_object_id(), title="12345", daily_rental_rate=daily_rental_rate),
            date_out=date_out or utcnow(),
            date_returned=date_returned,
            rental_fee=rental_fee,
        )
        return RentalRepository().add(rental)

    return _make_rental


@pytest.fixture
def issued_at() -> datetime:
    return datetime(2018, 5, 15, tzinfo=timezone.utc)
