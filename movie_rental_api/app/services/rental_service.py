"""
Business logic for issuing rentals.

Issuing a rental copies the current customer and movie details into the
rental and takes one copy of the movie out of stock.  The stock update
is conditional on a copy being available, so the counter never goes
below zero even when the last copy is requested twice at once.
"""

import logging
from typing import List

from ..core.db import new_object_id, utcnow
from ..core.exceptions import EntityNotFoundError, InvalidInput, OutOfStock
from ..repositories import CustomerRepository, InventoryRepository, MovieRepository, RentalRepository
from ..schemas.rental import CustomerSnapshot, MovieSnapshot, RentalRecord, RentalRequest


logger = logging.getLogger(__name__)


class RentalService:
    """Service for issuing and listing rentals."""

    rentals = RentalRepository()
    customers = CustomerRepository()
    movies = MovieRepository()
    inventory = InventoryRepository()

    @classmethod
    async def list_rentals(cls) -> List[RentalRecord]:
        return cls.rentals.list_all()

    @classmethod
    async def get_rental(cls, rental_id: str) -> RentalRecord:
        rental = cls.rentals.get(rental_id)
        if rental is None:
            raise EntityNotFoundError("The rental with the given ID was not found.")
        return rental

    @classmethod
    async def create_rental(cls, request: RentalRequest) -> RentalRecord:
        """Issue a rental of ``request.movie_id`` to ``request.customer_id``."""
        customer = cls.customers.find_by_id(request.customer_id)
        if not customer:
            raise InvalidInput("Invalid customer.")
        movie = cls.movies.find_by_id(request.movie_id)
        if not movie:
            raise InvalidInput("Invalid movie.")
        if not cls.inventory.decrement_stock_if_available(movie["id"]):
            raise OutOfStock("Movie not in stock.")

        rental = RentalRecord(
            id=new_object_id(),
            customer=CustomerSnapshot(
                id=customer["id"],
                name=customer["name"],
                is_gold=bool(customer["is_gold"]),
                phone=customer["phone"],
            ),
            movie=MovieSnapshot(
                id=movie["id"],
                title=movie["title"],
                daily_rental_rate=movie["daily_rental_rate"],
            ),
            date_out=utcnow(),
        )
        try:
            cls.rentals.add(rental)
        except Exception:
            # The copy was taken out of stock for a rental that does not exist.
            logger.exception("Failed to store rental for movie %s; restoring stock", movie["id"])
            cls.inventory.increment_stock(movie["id"])
            raise
        logger.info("Issued rental %s of movie %s to customer %s", rental.id, movie["id"], customer["id"])
        return rental
