# backend/schemas/review.py
from datetime import datetime
from typing import Optional

from schemas.base import ORMBase


# Presence of email, name and rating is checked by the review service
class ReviewCreate(ORMBase):
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    rating: Optional[int] = None
    title: Optional[str] = None
    body: Optional[str] = None
    order_id: Optional[str] = None


class ReviewOut(ORMBase):
    id: str
    product_id: str
    customer_name: str
    rating: int
    title: Optional[str] = None
    body: Optional[str] = None
    verified: bool
    created_at: datetime


# Admin view adds contact and moderation fields
class ReviewAdminOut(ReviewOut):
    customer_id: Optional[str] = None
    customer_email: str
    approved: bool
    incentive_coupon_code: Optional[str] = None
    order_id: Optional[str] = None


class ReviewSubmitted(ORMBase):
    review: ReviewOut
    coupon_code: Optional[str] = None


class ReviewModeration(ORMBase):
    approved: bool


class WaitlistJoin(ORMBase):
    product_id: Optional[str] = None
    email: Optional[str] = None


class WaitlistEntryOut(ORMBase):
    id: str
    product_id: str
    email: str
    notified: bool
    created_at: datetime
