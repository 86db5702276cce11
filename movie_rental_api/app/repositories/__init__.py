"""
Persistence layer.

Repositories wrap the SQLite tables created by ``core.db.init_db``.
Services receive repository instances and never issue SQL themselves.
"""

from .base import TableRepository
from .catalog import CustomerRepository, GenreRepository, InventoryRepository, MovieRepository
from .rentals import RentalRepository
from .users import UserRepository

__all__ = [
    "TableRepository",
    "CustomerRepository",
    "GenreRepository",
    "InventoryRepository",
    "MovieRepository",
    "RentalRepository",
    "UserRepository",
]
