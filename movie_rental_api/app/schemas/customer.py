"""Pydantic models for store customers."""

from pydantic import BaseModel, Field


class CustomerBase(BaseModel):
    name: str = Field(..., min_length=5, max_length=50, examples=["Jane Doe"])
    is_gold: bool = Field(False, alias="isGold")
    phone: str = Field(..., min_length=5, max_length=50, examples=["555-0100"])

    model_config = {
        "populate_by_name": True,
    }


class CustomerCreate(CustomerBase):
    """Schema for creating or replacing a customer."""
    pass


class CustomerRead(CustomerBase):
    id: str
