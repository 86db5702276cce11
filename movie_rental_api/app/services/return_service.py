"""
Business logic for returning rentals.

``RentalReturnWorkflow`` closes an open rental and puts the movie back
in stock.  The close is a conditional write on the rental row (it only
applies while ``date_returned`` is unset), and stock is incremented
only by the request whose write succeeded, so two concurrent returns of
the same rental produce one fee and one restock.

The close and the restock are separate writes.  Once the close has
been acknowledged it is never repeated or rolled back: a restock that
times out is retried once, and a restock that still fails is logged
and reported to the caller through ``ReturnOutcome.inventory_status``.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..core.db import is_object_id, utcnow
from ..core.exceptions import (
    InvalidInput,
    RentalAlreadyProcessed,
    RentalNotFound,
    RepositoryTimeout,
    RepositoryUnavailable,
)
from ..repositories import InventoryRepository, RentalRepository
from ..schemas.rental import RentalRead


logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def compute_rental_fee(date_out: datetime, date_returned: datetime, daily_rental_rate: float) -> float:
    """Fee for a rental kept from ``date_out`` to ``date_returned``.

    Elapsed wall-clock time is rounded up to whole days, so a movie
    returned an hour after it went out is charged one day.  Both
    timestamps are absolute (UTC) instants; daylight saving changes do
    not affect the result.
    """
    elapsed = (date_returned - date_out).total_seconds()
    renting_days = max(0, math.ceil(elapsed / SECONDS_PER_DAY))
    return renting_days * daily_rental_rate


RESTOCKED = "restocked"
RESTOCK_PENDING = "pending"
MOVIE_MISSING = "movie-missing"


@dataclass
class ReturnOutcome:
    """A processed return.

    ``inventory_status`` is ``RESTOCKED`` when the copy went back into
    stock, ``RESTOCK_PENDING`` when the stock update failed and still has
    to be applied, and ``MOVIE_MISSING`` when the movie was deleted after
    the rental was issued, so there is no stock left to update.
    """

    rental: RentalRead
    inventory_status: str = RESTOCKED

    @property
    def restocked(self) -> bool:
        return self.inventory_status == RESTOCKED


class RentalReturnWorkflow:
    """Close the open rental of a customer/movie pair and restock the movie."""

    def __init__(
        self,
        rentals: Optional[RentalRepository] = None,
        inventory: Optional[InventoryRepository] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.rentals = rentals or RentalRepository()
        self.inventory = inventory or InventoryRepository()
        self.clock = clock

    async def return_rental(self, customer_id: str, movie_id: str) -> ReturnOutcome:
        """Process the return of ``movie_id`` by ``customer_id``.

        Raises
        ------
        InvalidInput
            If either id is not a well formed entity id.  Nothing is read.
        RentalNotFound
            If the customer never rented the movie.
        RentalAlreadyProcessed
            If the rental is closed, including when a concurrent request
            closed it between the lookup and the write.
        RepositoryUnavailable
            If the lookup or the close could not be performed.
        """
        for field, value in (("customerId", customer_id), ("movieId", movie_id)):
            if not is_object_id(value):
                raise InvalidInput(f'"{field}" must be a valid id')

        rental = self.rentals.find_by_pair(customer_id, movie_id)
        if rental is None:
            raise RentalNotFound("No rental found for this customer/movie.")
        if rental.is_closed:
            raise RentalAlreadyProcessed("Return already processed.")

        date_returned = self.clock()
        rental_fee = compute_rental_fee(rental.date_out, date_returned, rental.movie.daily_rental_rate)
        if not self.rentals.close_if_open(rental.id, date_returned, rental_fee):
            logger.warning("Rental %s was closed by a concurrent return", rental.id)
            raise RentalAlreadyProcessed("Return already processed.")
        logger.info("Rental %s returned, fee %s", rental.id, rental_fee)

        closed = rental.model_copy(update={"date_returned": date_returned, "rental_fee": rental_fee})
        return ReturnOutcome(
            rental=RentalRead.model_validate(closed.model_dump(exclude={"id"})),
            inventory_status=self._restock(rental.id, closed.movie.id),
        )

    def _restock(self, rental_id: str, movie_id: str) -> str:
        for attempt in (1, 2):
            try:
                if self.inventory.increment_stock(movie_id):
                    return RESTOCKED
                return MOVIE_MISSING
            except RepositoryTimeout:
                if attempt == 2:
                    break
                logger.warning("Restock of movie %s timed out, retrying", movie_id)
            except RepositoryUnavailable:
                break
        logger.error(
            "Rental %s closed but stock of movie %s was not incremented", rental_id, movie_id
        )
        return RESTOCK_PENDING
