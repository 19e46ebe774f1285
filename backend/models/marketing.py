# backend/models/marketing.py
import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from database import Base, new_id
from utils.time_utils import utcnow


class Segment(str, enum.Enum):
    VIP = "vip"
    FIRST_TIME = "first_time"
    INACTIVE = "inactive"
    REPEAT = "repeat"
    ALL = "all"


class TriggerType(str, enum.Enum):
    POST_PURCHASE = "POST_PURCHASE"
    REVIEW_REQUEST = "REVIEW_REQUEST"
    RESTOCK_ALERT = "RESTOCK_ALERT"
    ABANDON_CART = "ABANDON_CART"


# One-off e-mail blast to a customer segment
class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    segment = Column(String(20), nullable=False)
    subject = Column(String, nullable=False)
    body = Column(Text, nullable=False)
    promo_code = Column(String, nullable=True)
    recipient_count = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="DRAFT")
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())


# Triggered e-mail template
class AutomationTemplate(Base):
    __tablename__ = "automation_templates"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    trigger_type = Column(String(30), nullable=False, index=True)
    delay_hours = Column(Integer, nullable=False, default=0)
    subject = Column(String, nullable=False)
    body = Column(Text, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    upsell_product_id = Column(String(36), ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, server_default=func.now())

    sends = relationship("AutomationSend", back_populates="template", cascade="all, delete-orphan")


# A scheduled delivery of a template to one customer
class AutomationSend(Base):
    __tablename__ = "automation_sends"

    id = Column(String(36), primary_key=True, default=new_id)
    template_id = Column(String(36), ForeignKey("automation_templates.id", ondelete="CASCADE"), nullable=False, index=True)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="SET NULL"), nullable=True, index=True)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    customer_email = Column(String, nullable=False)
    status = Column(String(20), nullable=False, default="PENDING", index=True)
    scheduled_for = Column(DateTime(timezone=True), nullable=False)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    template = relationship("AutomationTemplate", back_populates="sends")
