# backend/models/stock.py
import enum
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Enum, func
from sqlalchemy.orm import relationship
from database import Base, new_id
from utils.time_utils import utcnow


class AdjustmentReason(str, enum.Enum):
    RESTOCK = "RESTOCK"
    SALE = "SALE"
    DAMAGE = "DAMAGE"
    CORRECTION = "CORRECTION"
    RETURN = "RETURN"
    INITIAL = "INITIAL"


# Immutable ledger entry; new_on_hand == previous_on_hand + quantity_change
class InventoryAdjustment(Base):
    __tablename__ = "inventory_adjustments"

    id = Column(String(36), primary_key=True, default=new_id)
    variant_id = Column(String(36), ForeignKey("variants.id", ondelete="CASCADE"), nullable=False, index=True)

    # Signed quantity involved in the movement
    quantity_change = Column(Integer, nullable=False)
    reason = Column(Enum(AdjustmentReason), nullable=False)
    notes = Column(Text, nullable=True)

    # Snapshots captured at write time
    previous_on_hand = Column(Integer, nullable=False)
    new_on_hand = Column(Integer, nullable=False)

    author_name = Column(String, nullable=False, default="Admin")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), index=True)

    variant = relationship("Variant")
