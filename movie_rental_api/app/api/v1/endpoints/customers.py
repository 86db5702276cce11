"""
Customer endpoints for API v1.

Customers are listed in name order.  Any authenticated user can create
or edit customers; deleting one requires an administrator.  Rentals
keep their own copy of the customer, so edits and deletions here never
change rental history.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from movie_rental_api.app.core.exceptions import EntityNotFoundError
from movie_rental_api.app.core.security import IdentityClaim, require_authenticated, require_elevated
from movie_rental_api.app.schemas.customer import CustomerCreate, CustomerRead
from movie_rental_api.app.services.customer_service import CustomerService


router = APIRouter()


@router.get("", response_model=List[CustomerRead])
async def list_customers() -> List[CustomerRead]:
    return await CustomerService.list_customers()


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(customer_id: str = Path(..., description="ID of the customer")) -> CustomerRead:
    try:
        return await CustomerService.get_customer(customer_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("", response_model=CustomerRead)
async def create_customer(
    customer: CustomerCreate,
    current_user: IdentityClaim = Depends(require_authenticated),
) -> CustomerRead:
    return await CustomerService.create_customer(customer)


@router.put("/{customer_id}", response_model=CustomerRead)
async def update_customer(
    customer: CustomerCreate,
    customer_id: str = Path(..., description="ID of the customer"),
    current_user: IdentityClaim = Depends(require_authenticated),
) -> CustomerRead:
    try:
        return await CustomerService.update_customer(customer_id, customer)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{customer_id}", response_model=CustomerRead)
async def delete_customer(
    customer_id: str = Path(..., description="ID of the customer"),
    current_user: IdentityClaim = Depends(require_elevated),
) -> CustomerRead:
    try:
        return await CustomerService.delete_customer(customer_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
