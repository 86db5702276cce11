"""Business logic for customers."""

import logging
from typing import Any, Dict, List

from ..core.exceptions import EntityNotFoundError
from ..repositories import CustomerRepository
from ..schemas.customer import CustomerCreate, CustomerRead


logger = logging.getLogger(__name__)


def _to_read(row: Dict[str, Any]) -> CustomerRead:
    return CustomerRead(id=row["id"], name=row["name"], is_gold=bool(row["is_gold"]), phone=row["phone"])


class CustomerService:
    """Service for managing customers."""

    repository = CustomerRepository()

    @classmethod
    async def list_customers(cls) -> List[CustomerRead]:
        """Return all customers ordered by name."""
        return [_to_read(row) for row in cls.repository.find_all(sort="name")]

    @classmethod
    async def get_customer(cls, customer_id: str) -> CustomerRead:
        row = cls.repository.find_by_id(customer_id)
        if not row:
            raise EntityNotFoundError("The customer with the given ID was not found.")
        return _to_read(row)

    @classmethod
    async def create_customer(cls, data: CustomerCreate) -> CustomerRead:
        row = cls.repository.insert(
            {"name": data.name, "is_gold": int(data.is_gold), "phone": data.phone}
        )
        logger.info("Created customer %s", row["id"])
        return _to_read(row)

    @classmethod
    async def update_customer(cls, customer_id: str, data: CustomerCreate) -> CustomerRead:
        """Replace a customer's details.

        Rentals already issued keep the customer snapshot they were
        created with.
        """
        row = cls.repository.update_by_id(
            customer_id,
            {"name": data.name, "is_gold": int(data.is_gold), "phone": data.phone},
        )
        if not row:
            raise EntityNotFoundError("The customer with the given ID was not found.")
        return _to_read(row)

    @classmethod
    async def delete_customer(cls, customer_id: str) -> CustomerRead:
        row = cls.repository.delete_by_id(customer_id)
        if not row:
            raise EntityNotFoundError("The customer with the given ID was not found.")
        logger.info("Deleted customer %s", customer_id)
        return _to_read(row)
