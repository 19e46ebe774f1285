# backend/schemas/checkout.py
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError

from schemas.base import ORMBase


# A cart line; any client-side name, label or price is ignored
class CheckoutItem(ORMBase):
    variant_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)


class CheckoutPayload(ORMBase):
    email: EmailStr
    name: str = Field(min_length=1)
    address1: str = Field(min_length=1)
    address2: Optional[str] = None
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    items: List[CheckoutItem]
    promo_code: Optional[str] = None

    @field_validator("items")
    @classmethod
    def items_not_empty(cls, items):
        if not items:
            raise PydanticCustomError("cart_empty", "Cart cannot be empty")
        return items


class CheckoutResponse(ORMBase):
    order_id: str
    total: int
