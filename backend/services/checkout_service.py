# backend/services/checkout_service.py
"""Checkout: server-priced order placement in one transaction.

The customer upsert, order and item rows, promotion redemption, optional
stock decrement, customer totals, timeline event and automation queueing
commit together or not at all.
"""
import logging
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from models.customer import Customer
from models.order import Order, OrderItem, OrderEvent, OrderStatus
from models.stock import AdjustmentReason
from services import catalog_service, inventory_service, marketing_service, pricing, promotion_service
from services import settings_service
from utils.errors import ServiceError, PersistenceError
from utils.time_utils import utcnow

logger = logging.getLogger(__name__)

# A concurrent first checkout for the same e-mail can win the customer insert
WRITE_ATTEMPTS = 2


def find_by_idempotency_key(db: Session, key: Optional[str]) -> Optional[Order]:
    if not key:
        return None
    return db.query(Order).filter(Order.idempotency_key == key).first()


# Load the customer for this email, staging a new one if absent
def _upsert_customer(db: Session, payload) -> Customer:
    customer = db.query(Customer).filter(Customer.email == payload.email).first()
    if customer:
        return customer
    customer = Customer(
        email=payload.email,
        name=payload.name,
        address1=payload.address1,
        address2=payload.address2 or None,
        city=payload.city,
        state=payload.state,
        postal_code=payload.postal_code,
    )
    db.add(customer)
    db.flush()
    return customer


def _record_customer_order(db: Session, customer_id: str, total_cents: int) -> None:
    db.execute(
        update(Customer)
        .where(Customer.id == customer_id)
        .values(
            total_order_count=Customer.total_order_count + 1,
            total_spent_cents=Customer.total_spent_cents + total_cents,
            last_order_at=utcnow(),
        )
        .execution_options(synchronize_session=False)
    )


def _write_order(
    db: Session,
    payload,
    lines: List[pricing.ResolvedLine],
    totals: pricing.OrderTotals,
    promotion,
    idempotency_key: Optional[str],
) -> Order:
    customer = _upsert_customer(db, payload)

    order = Order(
        status=OrderStatus.PENDING,
        email=payload.email,
        name=payload.name,
        address1=payload.address1,
        address2=payload.address2 or None,
        city=payload.city,
        state=payload.state,
        postal_code=payload.postal_code,
        subtotal_cents=totals.subtotal_cents,
        shipping_cents=totals.shipping_cents,
        discount_cents=totals.discount_cents,
        tax_cents=totals.tax_cents,
        total_cents=totals.total_cents,
        customer_id=customer.id,
        promo_code=promotion.code if promotion else None,
        idempotency_key=idempotency_key or None,
    )
    db.add(order)
    db.flush()

    db.add_all([
        OrderItem(
            order_id=order.id,
            product_name=line.product_name,
            variant_label=line.variant_label,
            quantity=line.quantity,
            unit_price_cents=line.unit_price_cents,
            line_total_cents=line.line_total_cents,
        )
        for line in lines
    ])

    if promotion:
        promotion_service.redeem(db, promotion)

    if settings.DECREMENT_STOCK_ON_CHECKOUT:
        for line in lines:
            inventory_service.apply_adjustment(
                db, line.variant_id, -line.quantity, AdjustmentReason.SALE,
                notes=f"Order {order.id}", author="Checkout", forbid_negative=True,
            )

    _record_customer_order(db, customer.id, totals.total_cents)

    db.add(OrderEvent(
        order_id=order.id,
        event_type="ORDER_CREATED",
        description=f"Order placed by {payload.name} ({payload.email})",
        meta={"total_cents": totals.total_cents, "items": len(lines)},
    ))

    marketing_service.schedule_for_order(db, order, customer)
    db.commit()
    return order


def place_order(db: Session, payload, idempotency_key: Optional[str] = None) -> Order:
    """Validate, price and persist an order; returns the committed Order."""
    existing = find_by_idempotency_key(db, idempotency_key)
    if existing:
        logger.info("Checkout replay for idempotency key %s -> order %s", idempotency_key, existing.id)
        return existing

    # Pricing reads only server-side data; client prices never reach this point
    variants = catalog_service.load_purchasable_variants(db, [i.variant_id for i in payload.items])
    lines = pricing.resolve_lines(payload.items, variants)

    promotion = None
    if payload.promo_code:
        promotion = promotion_service.find_redeemable(db, payload.promo_code, payload.email, pricing.subtotal(lines))

    totals = pricing.price_cart(
        lines,
        flat_shipping_cents=settings_service.get_shipping_flat_cents(db),
        free_shipping_threshold_cents=settings_service.get_free_shipping_threshold_cents(db),
        promotion=promotion,
        tax_rate_percent=settings_service.get_tax_rate_percent(db),
    )

    for attempt in range(1, WRITE_ATTEMPTS + 1):
        try:
            order = _write_order(db, payload, lines, totals, promotion, idempotency_key)
            break
        except ServiceError:
            db.rollback()
            raise
        except IntegrityError:
            db.rollback()
            # Lost a race with a retry carrying the same idempotency key
            replay = find_by_idempotency_key(db, idempotency_key)
            if replay:
                return replay
            if attempt == WRITE_ATTEMPTS:
                logger.exception("Checkout failed for %s", payload.email)
                raise PersistenceError("Checkout failed")
            logger.warning("Checkout write conflict for %s, retrying", payload.email)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Checkout failed for %s", payload.email)
            raise PersistenceError("Checkout failed")

    db.refresh(order)
    logger.info("Order %s placed by %s: total %s cents", order.id, order.email, order.total_cents)
    return order
