"""
Rental endpoints for API v1.

``POST /rentals`` issues a rental: it snapshots the customer and movie
and takes one copy out of stock.  Returning a rental is handled by the
``returns`` endpoint.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from movie_rental_api.app.core.exceptions import EntityNotFoundError, InvalidInput, OutOfStock
from movie_rental_api.app.core.security import IdentityClaim, require_authenticated
from movie_rental_api.app.schemas.rental import RentalRecord, RentalRequest
from movie_rental_api.app.services.rental_service import RentalService


router = APIRouter()


@router.get("", response_model=List[RentalRecord])
async def list_rentals() -> List[RentalRecord]:
    """List rentals, most recently issued first."""
    return await RentalService.list_rentals()


@router.get("/{rental_id}", response_model=RentalRecord)
async def get_rental(rental_id: str = Path(..., description="ID of the rental")) -> RentalRecord:
    try:
        return await RentalService.get_rental(rental_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("", response_model=RentalRecord)
async def create_rental(
    payload: RentalRequest,
    current_user: IdentityClaim = Depends(require_authenticated),
) -> RentalRecord:
    try:
        return await RentalService.create_rental(payload)
    except (InvalidInput, OutOfStock) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
