# backend/services/order_service.py
import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy import update, select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.attributes import set_committed_value

from models.customer import Customer
from models.order import Order, OrderNote, OrderEvent, OrderStatus
from utils.errors import ValidationError, NotFoundError, PersistenceError

logger = logging.getLogger(__name__)

VALID_STATUSES = [s.value for s in OrderStatus]


def normalize_status(status) -> OrderStatus:
    value = getattr(status, "value", status)
    if not isinstance(value, str) or value.strip().upper() not in VALID_STATUSES:
        raise ValidationError(f"Invalid status: {value}. Expected one of {', '.join(VALID_STATUSES)}")
    return OrderStatus(value.strip().upper())


def get_order(db: Session, order_id: str) -> Order:
    order = (
        db.query(Order)
        .options(selectinload(Order.items), selectinload(Order.notes), selectinload(Order.events))
        .filter(Order.id == order_id)
        .first()
    )
    if not order:
        raise NotFoundError("Order not found")
    return order


def _day_start(value) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def list_orders(
    db: Session,
    status: Optional[str] = None,
    email: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = 1,
    page_size: int = 20,
) -> dict:
    query = db.query(Order)
    if status:
        query = query.filter(Order.status == normalize_status(status))
    if email:
        query = query.filter(Order.email.ilike(f"%{email}%"))
    if date_from:
        query = query.filter(Order.created_at >= _day_start(date_from))
    if date_to:
        # Inclusive of the whole end day
        query = query.filter(Order.created_at < _day_start(date_to) + timedelta(days=1))

    total = query.count()
    items = (
        query.order_by(Order.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return {"items": items, "total": total, "page": page, "page_size": page_size}


# Re-derive a customer's totals from their orders; cancelled orders don't count
def recompute_customer_totals(db: Session, customer_id: Optional[str]) -> None:
    if not customer_id:
        return
    counted = (Order.customer_id == Customer.id) & (Order.status != OrderStatus.CANCELLED)
    order_count = select(func.count(Order.id)).where(counted).scalar_subquery()
    spent = (
        select(func.coalesce(func.sum(Order.total_cents - Order.refunded_cents), 0))
        .where(counted)
        .scalar_subquery()
    )
    db.execute(
        update(Customer)
        .where(Customer.id == customer_id)
        .values(total_order_count=order_count, total_spent_cents=spent)
        .execution_options(synchronize_session=False)
    )


def _commit(db: Session, order_id: str, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to %s order %s", action, order_id)
        raise PersistenceError(f"Failed to {action} order")


def update_order(
    db: Session,
    order_id: str,
    status=None,
    tracking_number: Optional[str] = None,
    carrier: Optional[str] = None,
) -> Order:
    """Apply status and tracking changes, recording a timeline event for each."""
    order = get_order(db, order_id)
    new_status = normalize_status(status) if status is not None else None

    if new_status is not None and new_status != order.status:
        old_status = order.status
        order.status = new_status
        db.add(OrderEvent(
            order_id=order.id,
            event_type="STATUS_CHANGE",
            description=f"Status changed from {old_status.value} to {new_status.value}",
            meta={"from": old_status.value, "to": new_status.value},
        ))
        db.flush()
        recompute_customer_totals(db, order.customer_id)

    if tracking_number is not None or carrier is not None:
        if tracking_number is not None:
            order.tracking_number = tracking_number or None
        if carrier is not None:
            order.carrier = carrier or None
        db.add(OrderEvent(
            order_id=order.id,
            event_type="TRACKING_ADDED",
            description=f"Tracking {order.tracking_number or '-'} via {order.carrier or 'unknown carrier'}",
            meta={"tracking_number": order.tracking_number, "carrier": order.carrier},
        ))

    _commit(db, order_id, "update")
    db.refresh(order)
    return order


def add_note(db: Session, order_id: str, content: str, author: str = "Admin") -> OrderNote:
    order = get_order(db, order_id)
    if not content or not content.strip():
        raise ValidationError("Note content is required")
    note = OrderNote(order_id=order.id, content=content.strip(), author_name=author or "Admin")
    db.add(note)
    db.add(OrderEvent(order_id=order.id, event_type="NOTE_ADDED", description=f"Note added by {note.author_name}"))
    _commit(db, order_id, "add a note to")
    db.refresh(note)
    return note


def refund(db: Session, order_id: str, amount_cents: Optional[int] = None, reason: Optional[str] = None) -> Order:
    """Record a full or partial refund. Refunded cents never exceed the total."""
    order = get_order(db, order_id)
    remaining = order.total_cents - order.refunded_cents
    amount = remaining if amount_cents is None else amount_cents

    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError("Refund amount must be a positive number of cents")
    if amount > remaining:
        raise ValidationError(f"Refund exceeds refundable amount of {remaining} cents")

    # The cap is re-checked inside the UPDATE against the committed value
    stmt = (
        update(Order)
        .where(Order.id == order.id, Order.refunded_cents + amount <= Order.total_cents)
        .values(refunded_cents=Order.refunded_cents + amount)
        .returning(Order.refunded_cents, Order.total_cents)
        .execution_options(synchronize_session=False)
    )
    row = db.execute(stmt).first()
    if row is None:
        db.rollback()
        left = db.query(Order.total_cents - Order.refunded_cents).filter(Order.id == order_id).scalar()
        raise ValidationError(f"Refund exceeds refundable amount of {left} cents")

    refunded_cents, total_cents = row
    set_committed_value(order, "refunded_cents", refunded_cents)
    if refunded_cents >= total_cents:
        order.status = OrderStatus.REFUNDED
    description = f"Refunded {amount} cents"
    if reason:
        description += f": {reason}"
    db.add(OrderEvent(
        order_id=order.id,
        event_type="REFUND",
        description=description,
        meta={"amount_cents": amount, "refunded_cents": order.refunded_cents, "reason": reason},
    ))
    db.flush()
    recompute_customer_totals(db, order.customer_id)

    _commit(db, order_id, "refund")
    db.refresh(order)
    logger.info("Order %s refunded %s cents (total refunded %s)", order.id, amount, order.refunded_cents)
    return order

