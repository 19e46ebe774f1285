# backend/schemas/promotion.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from models.promotion import DiscountType
from schemas.base import ORMBase


class PromotionBase(ORMBase):
    code: str = Field(min_length=1)
    description: Optional[str] = None
    discount_type: DiscountType
    discount_value: int = Field(default=0, ge=0)
    min_spend_cents: Optional[int] = Field(default=None, ge=0)
    max_usage_count: Optional[int] = Field(default=None, ge=1)
    applies_to_product_id: Optional[str] = None
    applies_to_collection_id: Optional[str] = None
    customer_email: Optional[str] = None
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    active: bool = True


class PromotionCreate(PromotionBase):
    pass


class PromotionUpdate(ORMBase):
    """Schema for PATCH requests - all fields optional."""
    code: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[int] = Field(None, ge=0)
    min_spend_cents: Optional[int] = Field(None, ge=0)
    max_usage_count: Optional[int] = Field(None, ge=1)
    applies_to_product_id: Optional[str] = None
    applies_to_collection_id: Optional[str] = None
    customer_email: Optional[str] = None
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    active: Optional[bool] = None


class PromotionOut(PromotionBase):
    id: str
    used_count: int
    created_at: datetime


class PromoPerformanceRow(ORMBase):
    promo_code: str
    usage_count: int
    total_revenue: int
    total_discount: int
    promo_id: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[int] = None
    active: Optional[bool] = None


class AutoStopResponse(ORMBase):
    ok: bool
    stopped: bool
    reason: Optional[str] = None
