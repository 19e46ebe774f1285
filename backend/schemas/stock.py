# backend/schemas/stock.py
from datetime import datetime
from typing import List, Optional

from models.product import WickType
from models.stock import AdjustmentReason
from schemas.base import ORMBase


# Reason is validated by the inventory service so the message names the allowed codes
class AdjustmentCreate(ORMBase):
    variant_id: str
    quantity_change: int
    reason: str
    notes: Optional[str] = None


class AdjustmentOut(ORMBase):
    id: str
    variant_id: str
    quantity_change: int
    reason: AdjustmentReason
    notes: Optional[str] = None
    previous_on_hand: int
    new_on_hand: int
    author_name: str
    created_at: datetime


class InventoryRow(ORMBase):
    variant_id: str
    product_name: str
    sku: Optional[str] = None
    vessel: str
    size_oz: float
    wick_type: WickType
    stock_on_hand: int
    stock_reserved: int
    reorder_point: int
    price_cents: int
    active: bool


class LowStockRow(ORMBase):
    variant_id: str
    product_id: str
    product_name: str
    sku: Optional[str] = None
    variant_label: str
    stock_on_hand: int
    reorder_point: int


class LowStockResponse(ORMBase):
    items: List[LowStockRow]
    count: int
