"""
Pydantic models for rentals.

A rental embeds copies of the customer and the movie as they were when
the rental was issued.  Later edits to the customer or movie records do
not change historical rentals, and the return fee is computed from the
copied ``dailyRentalRate``.

A rental is *open* while ``dateReturned`` is unset and *closed* once the
return workflow has recorded ``dateReturned`` together with
``rentalFee``.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..core.db import OBJECT_ID_PATTERN


class CustomerSnapshot(BaseModel):
    id: str
    name: str
    is_gold: bool = Field(False, alias="isGold")
    phone: str

    model_config = {
        "populate_by_name": True,
    }


class MovieSnapshot(BaseModel):
    id: str
    title: str
    daily_rental_rate: float = Field(..., alias="dailyRentalRate")

    model_config = {
        "populate_by_name": True,
    }


class RentalRequest(BaseModel):
    """Body of both ``POST /rentals`` and ``POST /returns``."""

    customer_id: str = Field(..., alias="customerId", pattern=OBJECT_ID_PATTERN)
    movie_id: str = Field(..., alias="movieId", pattern=OBJECT_ID_PATTERN)

    model_config = {
        "populate_by_name": True,
    }


class RentalRead(BaseModel):
    """A rental as returned by the return workflow."""

    customer: CustomerSnapshot
    movie: MovieSnapshot
    date_out: datetime = Field(..., alias="dateOut")
    date_returned: Optional[datetime] = Field(None, alias="dateReturned")
    rental_fee: Optional[float] = Field(None, alias="rentalFee", ge=0)

    model_config = {
        "populate_by_name": True,
    }

    @property
    def is_closed(self) -> bool:
        return self.date_returned is not None


class RentalRecord(RentalRead):
    """A stored rental including its id."""

    id: str
