"""
Repository for rentals.

Rental rows store the customer and movie snapshots in flat columns;
``RentalRepository`` converts between those rows and ``RentalRecord``
models.  Closing a rental is a conditional update that only succeeds
while ``date_returned`` is still NULL, which makes the database the
single point that decides which of several concurrent returns wins.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from ..core.db import format_timestamp, parse_timestamp
from ..schemas.rental import CustomerSnapshot, MovieSnapshot, RentalRecord
from .base import TableRepository, repository_cursor


def rental_from_row(row: Dict[str, Any]) -> RentalRecord:
    return RentalRecord(
        id=row["id"],
        customer=CustomerSnapshot(
            id=row["customer_id"],
            name=row["customer_name"],
            is_gold=bool(row["customer_is_gold"]),
            phone=row["customer_phone"],
        ),
        movie=MovieSnapshot(
            id=row["movie_id"],
            title=row["movie_title"],
            daily_rental_rate=row["movie_daily_rental_rate"],
        ),
        date_out=parse_timestamp(row["date_out"]),
        date_returned=parse_timestamp(row["date_returned"]),
        rental_fee=row["rental_fee"],
    )


def rental_to_row(rental: RentalRecord) -> Dict[str, Any]:
    return {
        "id": rental.id,
        "customer_id": rental.customer.id,
        "customer_name": rental.customer.name,
        "customer_is_gold": int(rental.customer.is_gold),
        "customer_phone": rental.customer.phone,
        "movie_id": rental.movie.id,
        "movie_title": rental.movie.title,
        "movie_daily_rental_rate": rental.movie.daily_rental_rate,
        "date_out": format_timestamp(rental.date_out),
        "date_returned": format_timestamp(rental.date_returned),
        "rental_fee": rental.rental_fee,
    }


class RentalRepository(TableRepository):
    table = "rentals"
    columns = (
        "customer_id",
        "customer_name",
        "customer_is_gold",
        "customer_phone",
        "movie_id",
        "movie_title",
        "movie_daily_rental_rate",
        "date_out",
        "date_returned",
        "rental_fee",
    )

    def get(self, rental_id: str) -> Optional[RentalRecord]:
        row = self.find_by_id(rental_id)
        return rental_from_row(row) if row else None

    def list_all(self) -> List[RentalRecord]:
        """All rentals, most recently issued first."""
        return [rental_from_row(row) for row in self.find_all(sort="-date_out")]

    def add(self, rental: RentalRecord) -> RentalRecord:
        self.insert(rental_to_row(rental))
        return rental

    def find_by_pair(self, customer_id: str, movie_id: str) -> Optional[RentalRecord]:
        """Find the rental of ``movie_id`` by ``customer_id``.

        Matching is by value on the snapshot ids.  When the customer
        rented the same movie more than once, an open rental is preferred
        over closed ones, then the most recently issued.
        """
        with repository_cursor("find rental") as cursor:
            row = cursor.execute(
                """
                SELECT * FROM rentals
                WHERE customer_id = ? AND movie_id = ?
                ORDER BY (date_returned IS NULL) DESC, date_out DESC
                LIMIT 1
                """,
                (customer_id, movie_id),
            ).fetchone()
        return rental_from_row(dict(row)) if row else None

    def close_if_open(self, rental_id: str, date_returned: datetime, rental_fee: float) -> bool:
        """Record the return of an open rental.

        Returns ``True`` if this call closed the rental and ``False`` if
        it was already closed (or no longer exists), in which case
        nothing was written.
        """
        with repository_cursor("close rental") as cursor:
            cursor.execute(
                """
                UPDATE rentals SET date_returned = ?, rental_fee = ?
                WHERE id = ? AND date_returned IS NULL
                """,
                (format_timestamp(date_returned), rental_fee, rental_id),
            )
            return cursor.rowcount == 1
