# backend/services/promotion_service.py
import logging
from typing import List, Optional

from sqlalchemy import update, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.order import Order
from models.promotion import Promotion, DiscountType
from services.inventory_service import product_stock_total
from utils.errors import ValidationError, NotFoundError, ConflictError
from utils.time_utils import utcnow, ensure_aware

logger = logging.getLogger(__name__)


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def get_promotion(db: Session, promotion_id: str) -> Promotion:
    promo = db.query(Promotion).filter(Promotion.id == promotion_id).first()
    if not promo:
        raise NotFoundError("Promotion not found")
    return promo


def _validate_fields(data: dict) -> None:
    discount_type = data.get("discount_type")
    value = data.get("discount_value")
    if discount_type is not None and value is not None:
        discount_type = getattr(discount_type, "value", discount_type)
        if value < 0:
            raise ValidationError("discountValue must not be negative")
        if discount_type == DiscountType.PERCENTAGE.value and value > 100:
            raise ValidationError("Percentage discounts cannot exceed 100")
    starts_at, ends_at = data.get("starts_at"), data.get("ends_at")
    if starts_at and ends_at and ensure_aware(ends_at) <= ensure_aware(starts_at):
        raise ValidationError("endsAt must be after startsAt")


def create_promotion(db: Session, data: dict) -> Promotion:
    data = dict(data)
    data["code"] = normalize_code(data.get("code"))
    if not data["code"]:
        raise ValidationError("Code is required")
    _validate_fields(data)

    promo = Promotion(**data)
    db.add(promo)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Promo code already exists: {data['code']}")
    db.refresh(promo)
    return promo


def update_promotion(db: Session, promotion_id: str, data: dict) -> Promotion:
    promo = get_promotion(db, promotion_id)
    data = dict(data)
    if "code" in data:
        data["code"] = normalize_code(data["code"])
        if not data["code"]:
            raise ValidationError("Code is required")
    merged = {
        "discount_type": data.get("discount_type", promo.discount_type),
        "discount_value": data.get("discount_value", promo.discount_value),
        "starts_at": data.get("starts_at", promo.starts_at),
        "ends_at": data.get("ends_at", promo.ends_at),
    }
    _validate_fields(merged)

    for key, value in data.items():
        setattr(promo, key, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Promo code already exists: {data.get('code')}")
    db.refresh(promo)
    return promo


def find_redeemable(db: Session, code: str, email: str, subtotal_cents: int) -> Promotion:
    """Look up a code and check every redemption rule against this cart."""
    normalized = normalize_code(code)
    promo = db.query(Promotion).filter(Promotion.code == normalized).first()
    if not promo or not promo.active:
        raise ValidationError(f"Invalid promo code: {normalized}")

    now = utcnow()
    if promo.starts_at and ensure_aware(promo.starts_at) > now:
        raise ValidationError(f"Promo code is not active yet: {normalized}")
    if promo.ends_at and ensure_aware(promo.ends_at) < now:
        raise ValidationError(f"Promo code has expired: {normalized}")
    if promo.max_usage_count is not None and promo.used_count >= promo.max_usage_count:
        raise ValidationError(f"Promo code usage limit reached: {normalized}")
    if promo.customer_email and promo.customer_email.strip().lower() != (email or "").strip().lower():
        raise ValidationError(f"Promo code is not valid for this customer: {normalized}")
    if promo.min_spend_cents and subtotal_cents < promo.min_spend_cents:
        raise ValidationError(f"Minimum spend of {promo.min_spend_cents} cents not met for promo code: {normalized}")
    return promo


def redeem(db: Session, promo: Promotion) -> None:
    """Count one use; the cap is re-checked inside the same UPDATE."""
    stmt = (
        update(Promotion)
        .where(Promotion.id == promo.id)
        .where(or_(Promotion.max_usage_count.is_(None), Promotion.used_count < Promotion.max_usage_count))
        .values(used_count=Promotion.used_count + 1)
        .execution_options(synchronize_session=False)
    )
    if db.execute(stmt).rowcount == 0:
        raise ConflictError(f"Promo code usage limit reached: {promo.code}")


def performance(db: Session) -> List[dict]:
    rows = (
        db.query(
            Order.promo_code,
            func.count(Order.id),
            func.coalesce(func.sum(Order.total_cents), 0),
            func.coalesce(func.sum(Order.discount_cents), 0),
        )
        .filter(Order.promo_code.isnot(None), Order.promo_code != "")
        .group_by(Order.promo_code)
        .order_by(func.count(Order.id).desc())
        .all()
    )
    promos = {p.code: p for p in db.query(Promotion).all()}
    result = []
    for code, usage, revenue, discount in rows:
        promo = promos.get(code)
        result.append({
            "promo_code": code,
            "usage_count": int(usage),
            "total_revenue": int(revenue),
            "total_discount": int(discount),
            "promo_id": promo.id if promo else None,
            "discount_type": promo.discount_type if promo else None,
            "discount_value": promo.discount_value if promo else None,
            "active": promo.active if promo else None,
        })
    return result


def auto_stop(db: Session, promotion_id: str) -> dict:
    """Deactivate a product-linked promotion once that product is sold out."""
    promo = get_promotion(db, promotion_id)
    if promo.applies_to_product_id and promo.active:
        if product_stock_total(db, promo.applies_to_product_id) <= 0:
            promo.active = False
            db.commit()
            logger.info("Promotion %s auto-stopped: linked product out of stock", promo.code)
            return {"ok": True, "stopped": True, "reason": "out_of_stock"}
    return {"ok": True, "stopped": False, "reason": None}
