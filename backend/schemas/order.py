# backend/schemas/order.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from models.order import OrderStatus
from schemas.base import ORMBase


# Output schema for an individual order line item
class OrderItemOut(ORMBase):
    id: str
    product_name: str
    variant_label: str
    quantity: int
    unit_price_cents: int
    line_total_cents: int


class OrderNoteOut(ORMBase):
    id: str
    content: str
    author_name: str
    created_at: datetime


class OrderEventOut(ORMBase):
    id: str
    event_type: str
    description: str
    meta: Optional[dict] = None
    created_at: datetime


# Order row as shown in admin listings
class OrderSummary(ORMBase):
    id: str
    status: OrderStatus
    email: str
    name: str
    subtotal_cents: int
    shipping_cents: int
    discount_cents: int
    tax_cents: int
    total_cents: int
    refunded_cents: int
    promo_code: Optional[str] = None
    created_at: datetime


# Full order with address, lines and timeline
class OrderDetail(OrderSummary):
    address1: str
    address2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    country: str
    customer_id: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    updated_at: datetime
    items: List[OrderItemOut] = []
    notes: List[OrderNoteOut] = []
    events: List[OrderEventOut] = []


# Schema for paginated order lists
class OrdersPage(ORMBase):
    items: List[OrderSummary]
    total: int
    page: int
    page_size: int


# Partial update: any subset of status and tracking info
class OrderPatch(ORMBase):
    status: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None


class OrderNoteCreate(ORMBase):
    content: str = Field(min_length=1)


# Omitted amount refunds whatever is left
class RefundRequest(ORMBase):
    amount_cents: Optional[int] = None
    reason: Optional[str] = None
