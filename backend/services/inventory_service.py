# backend/services/inventory_service.py
"""Inventory ledger.

Variant.stock_on_hand changes only here. Each change is one server-side
``stock_on_hand = stock_on_hand + delta`` UPDATE whose RETURNING value gives
the new level; the previous level is derived from it, so every ledger row
satisfies ``new_on_hand == previous_on_hand + quantity_change`` and matches
what the UPDATE actually wrote, even under concurrent adjustments.
"""
import logging
from typing import List, Optional

from sqlalchemy import update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.product import Product, Variant
from models.stock import InventoryAdjustment, AdjustmentReason
from utils.errors import ValidationError, NotFoundError, ConflictError, PersistenceError

logger = logging.getLogger(__name__)

VALID_REASONS = [r.value for r in AdjustmentReason]


def normalize_reason(reason) -> AdjustmentReason:
    value = getattr(reason, "value", reason)
    if not isinstance(value, str) or value.strip().upper() not in VALID_REASONS:
        raise ValidationError(f"Invalid reason: {value}. Expected one of {', '.join(VALID_REASONS)}")
    return AdjustmentReason(value.strip().upper())


def validate_quantity_change(quantity_change) -> int:
    if isinstance(quantity_change, bool) or not isinstance(quantity_change, int):
        raise ValidationError("quantityChange must be an integer")
    if quantity_change == 0:
        raise ValidationError("quantityChange must be non-zero")
    return quantity_change


def apply_adjustment(
    db: Session,
    variant_id: str,
    quantity_change: int,
    reason: AdjustmentReason,
    *,
    notes: Optional[str] = None,
    author: str = "Admin",
    forbid_negative: bool = False,
) -> InventoryAdjustment:
    """Write the stock change and its ledger row without committing."""
    stmt = update(Variant).where(Variant.id == variant_id)
    if forbid_negative:
        stmt = stmt.where(Variant.stock_on_hand + quantity_change >= 0)
    stmt = (
        stmt.values(stock_on_hand=Variant.stock_on_hand + quantity_change)
        .returning(Variant.stock_on_hand)
        .execution_options(synchronize_session=False)
    )
    new_on_hand = db.execute(stmt).scalar_one_or_none()

    if new_on_hand is None:
        exists = db.query(Variant.id).filter(Variant.id == variant_id).first()
        if exists and forbid_negative:
            raise ConflictError(f"Insufficient stock for variant: {variant_id}")
        raise NotFoundError("Variant not found")

    adjustment = InventoryAdjustment(
        variant_id=variant_id,
        quantity_change=quantity_change,
        reason=reason,
        notes=notes or None,
        previous_on_hand=new_on_hand - quantity_change,
        new_on_hand=new_on_hand,
        author_name=author or "Admin",
    )
    db.add(adjustment)
    db.flush()
    return adjustment


def adjust_stock(
    db: Session,
    variant_id: str,
    quantity_change,
    reason,
    notes: Optional[str] = None,
    author: str = "Admin",
) -> InventoryAdjustment:
    """Apply one admin adjustment atomically and return the ledger row."""
    if not variant_id:
        raise ValidationError("variantId is required")
    quantity_change = validate_quantity_change(quantity_change)
    reason = normalize_reason(reason)

    try:
        adjustment = apply_adjustment(db, variant_id, quantity_change, reason, notes=notes, author=author)
        db.commit()
    except (ValidationError, NotFoundError, ConflictError):
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Inventory adjustment failed for variant %s", variant_id)
        raise PersistenceError("Failed to adjust inventory")

    db.refresh(adjustment)
    logger.info(
        "Stock for variant %s: %s -> %s (%s)",
        variant_id, adjustment.previous_on_hand, adjustment.new_on_hand, reason.value,
    )
    return adjustment


def low_stock_variants(db: Session, threshold: Optional[int] = None) -> List[dict]:
    """Active variants at or below their reorder point (or ``threshold``).

    Evaluated against the current stock column on every call; nothing is cached.
    """
    limit = Variant.reorder_point if threshold is None else threshold
    rows = (
        db.query(Variant, Product.name)
        .outerjoin(Product, Product.id == Variant.product_id)
        .filter(Variant.active.is_(True), Variant.stock_on_hand <= limit)
        .order_by(Variant.stock_on_hand.asc())
        .all()
    )
    return [{"variant": v, "product_name": name or "Unknown"} for v, name in rows]


def count_low_stock(db: Session) -> int:
    return (
        db.query(func.count(Variant.id))
        .filter(Variant.active.is_(True), Variant.stock_on_hand <= Variant.reorder_point)
        .scalar()
    ) or 0


def list_adjustments(db: Session, variant_id: Optional[str] = None, limit: int = 100) -> List[InventoryAdjustment]:
    query = db.query(InventoryAdjustment)
    if variant_id:
        query = query.filter(InventoryAdjustment.variant_id == variant_id)
    return query.order_by(InventoryAdjustment.created_at.desc(), InventoryAdjustment.id.desc()).limit(limit).all()


def product_stock_total(db: Session, product_id: str) -> int:
    return (
        db.query(func.coalesce(func.sum(Variant.stock_on_hand), 0))
        .filter(Variant.product_id == product_id)
        .scalar()
    ) or 0
