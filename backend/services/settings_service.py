# backend/services/settings_service.py
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from sqlalchemy.orm import Session

from config import settings as app_settings
from models.setting import Setting
from utils.errors import ValidationError

logger = logging.getLogger(__name__)

SHIPPING_FLAT_CENTS = "shippingFlatCents"
FREE_SHIPPING_THRESHOLD_CENTS = "freeShippingThresholdCents"
TAX_RATE_PERCENT = "taxRatePercent"

# Keys surfaced by the admin settings screen
KNOWN_KEYS = [
    "storeName", "storeEmail", "storePhone", "storeAddress",
    SHIPPING_FLAT_CENTS, FREE_SHIPPING_THRESHOLD_CENTS, TAX_RATE_PERCENT,
    "invoiceFooter", "emailFooter",
]


def get_setting(db: Session, key: str) -> Optional[str]:
    row = db.query(Setting).filter(Setting.key == key).first()
    return row.value if row else None


# Upsert without committing; the caller owns the transaction
def set_setting(db: Session, key: str, value) -> Setting:
    row = db.query(Setting).filter(Setting.key == key).first()
    if row:
        row.value = str(value)
    else:
        row = Setting(key=key, value=str(value))
        db.add(row)
    return row


def get_int_setting(db: Session, key: str, default: int) -> int:
    raw = get_setting(db, key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Setting %s has non-integer value %r, using %s", key, raw, default)
        return default


def get_decimal_setting(db: Session, key: str, default: Decimal = Decimal("0")) -> Decimal:
    raw = get_setting(db, key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation:
        logger.warning("Setting %s has non-numeric value %r, using %s", key, raw, default)
        return default
    if not value.is_finite():
        logger.warning("Setting %s has non-finite value %r, using %s", key, raw, default)
        return default
    return value


def get_shipping_flat_cents(db: Session) -> int:
    return get_int_setting(db, SHIPPING_FLAT_CENTS, app_settings.DEFAULT_SHIPPING_CENTS)


def get_free_shipping_threshold_cents(db: Session) -> Optional[int]:
    threshold = get_int_setting(db, FREE_SHIPPING_THRESHOLD_CENTS, 0)
    return threshold if threshold > 0 else None


def get_tax_rate_percent(db: Session) -> Decimal:
    return get_decimal_setting(db, TAX_RATE_PERCENT)


def get_all(db: Session) -> Dict[str, str]:
    stored = {row.key: row.value for row in db.query(Setting).filter(Setting.key.in_(KNOWN_KEYS)).all()}
    return {key: stored.get(key, "") for key in KNOWN_KEYS}


# Reject values the checkout arithmetic cannot use; empty strings clear a key
def validate_changes(changes: Dict[str, str]) -> None:
    for key in (SHIPPING_FLAT_CENTS, FREE_SHIPPING_THRESHOLD_CENTS):
        if changes.get(key) and not changes[key].isdigit():
            raise ValidationError(f"{key} must be a non-negative whole number of cents")

    if changes.get(TAX_RATE_PERCENT):
        try:
            rate = Decimal(changes[TAX_RATE_PERCENT])
        except InvalidOperation:
            rate = None
        if rate is None or not rate.is_finite() or rate < 0:
            raise ValidationError(f"{TAX_RATE_PERCENT} must be a non-negative number")
