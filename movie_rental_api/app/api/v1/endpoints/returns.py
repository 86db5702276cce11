"""
Return endpoint for API v1.

``POST /returns`` closes the open rental of a customer/movie pair,
records the return date and fee, and puts the movie back in stock.

Status codes:

* 401 / 400 from the authentication gate;
* 400 if ``customerId`` or ``movieId`` is missing or malformed;
* 404 if the customer never rented the movie;
* 409 if the rental has already been returned;
* 200 with the closed rental otherwise.  If the rental was closed but
  the stock could not be updated, the response is still 200 and carries
  ``x-inventory-status: pending``.  If the movie was deleted while it
  was rented there is no stock to restore and the header reads
  ``movie-missing``; nothing will retry that case.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from movie_rental_api.app.core.exceptions import InvalidInput, RentalAlreadyProcessed, RentalNotFound
from movie_rental_api.app.core.security import IdentityClaim, require_authenticated
from movie_rental_api.app.schemas.rental import RentalRead, RentalRequest
from movie_rental_api.app.services.return_service import RentalReturnWorkflow


INVENTORY_STATUS_HEADER = "x-inventory-status"

router = APIRouter()


def get_return_workflow() -> RentalReturnWorkflow:
    return RentalReturnWorkflow()


@router.post("", response_model=RentalRead)
async def return_rental(
    payload: RentalRequest,
    response: Response,
    current_user: IdentityClaim = Depends(require_authenticated),
    workflow: RentalReturnWorkflow = Depends(get_return_workflow),
) -> RentalRead:
    try:
        outcome = await workflow.return_rental(payload.customer_id, payload.movie_id)
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except RentalNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except RentalAlreadyProcessed as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    if not outcome.restocked:
        response.headers[INVENTORY_STATUS_HEADER] = outcome.inventory_status
    return outcome.rental
