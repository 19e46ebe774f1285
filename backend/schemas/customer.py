# backend/schemas/customer.py
from datetime import datetime
from typing import List, Optional

from schemas.base import ORMBase
from schemas.order import OrderSummary


class CustomerOut(ORMBase):
    id: str
    email: str
    name: str
    phone: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    tags: Optional[str] = None
    notes: Optional[str] = None
    total_order_count: int
    total_spent_cents: int
    last_order_at: Optional[datetime] = None
    created_at: datetime


class CustomerDetail(CustomerOut):
    orders: List[OrderSummary] = []


class CustomersPage(ORMBase):
    items: List[CustomerOut]
    total: int
    page: int
    page_size: int


# Admin-editable fields; totals are derived from orders
class CustomerUpdate(ORMBase):
    name: Optional[str] = None
    phone: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    tags: Optional[str] = None
    notes: Optional[str] = None
