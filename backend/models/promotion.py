# backend/models/promotion.py
import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, DateTime, Enum, func
from database import Base, new_id
from utils.time_utils import utcnow


class DiscountType(str, enum.Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"
    FREE_SHIPPING = "FREE_SHIPPING"


# Code-redeemable discount rule
class Promotion(Base):
    __tablename__ = "promotions"

    id = Column(String(36), primary_key=True, default=new_id)
    code = Column(String, unique=True, nullable=False, index=True)  # stored upper-case
    description = Column(Text, nullable=True)
    discount_type = Column(Enum(DiscountType), nullable=False)
    # Percent for PERCENTAGE, cents for FIXED_AMOUNT, ignored for FREE_SHIPPING
    discount_value = Column(Integer, nullable=False, default=0)
    min_spend_cents = Column(Integer, nullable=True)
    max_usage_count = Column(Integer, nullable=True)
    used_count = Column(Integer, nullable=False, default=0)

    applies_to_product_id = Column(String(36), ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    applies_to_collection_id = Column(String(36), ForeignKey("collections.id", ondelete="SET NULL"), nullable=True)
    customer_email = Column(String, nullable=True)

    starts_at = Column(DateTime(timezone=True), nullable=True)
    ends_at = Column(DateTime(timezone=True), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
