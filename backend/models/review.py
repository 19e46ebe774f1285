# backend/models/review.py
from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, DateTime, CheckConstraint, func
from database import Base, new_id
from utils.time_utils import utcnow


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    customer_email = Column(String, nullable=False)
    customer_name = Column(String, nullable=False)
    rating = Column(Integer, CheckConstraint("rating >= 1 AND rating <= 5"), nullable=False)
    title = Column(String, nullable=True)
    body = Column(Text, nullable=True)

    # Verified when the submitted order belongs to the reviewer's email
    verified = Column(Boolean, nullable=False, default=False)
    approved = Column(Boolean, nullable=False, default=False)
    incentive_coupon_code = Column(String, nullable=True)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())


# E-mail waiting for a sold-out or upcoming product
class WaitlistEntry(Base):
    __tablename__ = "waitlist_entries"

    id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String, nullable=False)
    notified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
