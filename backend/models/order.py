# backend/models/order.py
import enum
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Enum, JSON, func
from sqlalchemy.orm import relationship
from database import Base, new_id
from utils.time_utils import utcnow


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FULFILLED = "FULFILLED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=new_id)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING, index=True)

    # Shipping address, copied from the checkout payload
    email = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    address1 = Column(String, nullable=False)
    address2 = Column(String, nullable=True)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    postal_code = Column(String, nullable=False)
    country = Column(String, nullable=False, default="US")

    subtotal_cents = Column(Integer, nullable=False)
    shipping_cents = Column(Integer, nullable=False)
    discount_cents = Column(Integer, nullable=False, default=0)
    tax_cents = Column(Integer, nullable=False, default=0)
    total_cents = Column(Integer, nullable=False)
    refunded_cents = Column(Integer, nullable=False, default=0)

    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    promo_code = Column(String, nullable=True, index=True)
    tracking_number = Column(String, nullable=True)
    carrier = Column(String, nullable=True)

    # Client-supplied key that makes a retried checkout return the same order
    idempotency_key = Column(String, unique=True, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, server_default=func.now())

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    notes = relationship("OrderNote", back_populates="order", cascade="all, delete-orphan", order_by="OrderNote.created_at")
    events = relationship("OrderEvent", back_populates="order", cascade="all, delete-orphan", order_by="OrderEvent.created_at")
    customer = relationship("Customer", back_populates="orders")


# Denormalized snapshot of a purchased line; never joined back to the catalog
class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_name = Column(String, nullable=False)
    variant_label = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price_cents = Column(Integer, nullable=False)
    line_total_cents = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="items")


# Admin-authored note on an order
class OrderNote(Base):
    __tablename__ = "order_notes"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    author_name = Column(String, nullable=False, default="Admin")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    order = relationship("Order", back_populates="notes")


# System-authored timeline entry
class OrderEvent(Base):
    __tablename__ = "order_events"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    event_type = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    meta = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    order = relationship("Order", back_populates="events")
