# backend/models/customer.py
from sqlalchemy import Column, Integer, String, Text, DateTime, func
from sqlalchemy.orm import relationship
from database import Base, new_id
from utils.time_utils import utcnow


# Upserted by email at checkout; order totals are maintained incrementally
class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    address1 = Column(String, nullable=True)
    address2 = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    country = Column(String, nullable=True, default="US")
    tags = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    total_order_count = Column(Integer, nullable=False, default=0)
    total_spent_cents = Column(Integer, nullable=False, default=0)
    last_order_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, server_default=func.now())

    orders = relationship("Order", back_populates="customer", order_by="Order.created_at.desc()")
