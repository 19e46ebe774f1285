# backend/services/reporting_service.py
from datetime import timedelta
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.log import AuditLog
from models.order import Order, OrderItem
from services.inventory_service import count_low_stock
from utils.time_utils import utcnow, ensure_aware

RECENT_ACTIVITY_LIMIT = 20


def _since(days: int):
    return utcnow() - timedelta(days=max(days, 1))


def kpis(db: Session, days: int = 30) -> dict:
    revenue, order_count, refunded = (
        db.query(
            func.coalesce(func.sum(Order.total_cents), 0),
            func.count(Order.id),
            func.coalesce(func.sum(Order.refunded_cents), 0),
        )
        .filter(Order.created_at >= _since(days))
        .one()
    )
    revenue, order_count = int(revenue), int(order_count)
    return {
        "revenue": revenue,
        "order_count": order_count,
        # Integer cents, half-up
        "avg_order_value": (2 * revenue + order_count) // (2 * order_count) if order_count else 0,
        "refunded_amount": int(refunded),
        "low_stock_count": count_low_stock(db),
    }


def revenue_by_day(db: Session, days: int = 30) -> List[dict]:
    # func.date works on both SQLite and PostgreSQL
    day = func.date(Order.created_at)
    rows = (
        db.query(day, func.coalesce(func.sum(Order.total_cents), 0), func.count(Order.id))
        .filter(Order.created_at >= _since(days))
        .group_by(day)
        .order_by(day)
        .all()
    )
    return [{"date": str(d), "revenue": int(revenue), "orders": int(count)} for d, revenue, count in rows]


def top_products(db: Session, days: int = 30, limit: int = 10) -> List[dict]:
    revenue = func.sum(OrderItem.line_total_cents)
    rows = (
        db.query(OrderItem.product_name, func.coalesce(revenue, 0), func.coalesce(func.sum(OrderItem.quantity), 0))
        .join(Order, Order.id == OrderItem.order_id)
        .filter(Order.created_at >= _since(days))
        .group_by(OrderItem.product_name)
        .order_by(revenue.desc())
        .limit(limit)
        .all()
    )
    return [{"product_name": name, "revenue": int(rev), "quantity": int(qty)} for name, rev, qty in rows]


def sales_report(db: Session, days: int = 30) -> dict:
    return {
        "by_day": revenue_by_day(db, days),
        "top_products": top_products(db, days, 10),
        "kpis": kpis(db, days),
    }


def recent_activity(db: Session) -> List[dict]:
    """Audit entries and recent orders merged into one newest-first feed."""
    logs = db.query(AuditLog).order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(RECENT_ACTIVITY_LIMIT).all()
    orders = db.query(Order).order_by(Order.created_at.desc()).limit(10).all()
    activity = [
        {"type": "audit", "description": log.description or log.action, "created_at": log.created_at}
        for log in logs
    ] + [
        {
            "type": "order",
            "description": f"Order from {o.name} - {o.total_cents / 100:.2f}",
            "created_at": o.created_at,
        }
        for o in orders
    ]
    activity.sort(key=lambda a: ensure_aware(a["created_at"]), reverse=True)
    return activity[:RECENT_ACTIVITY_LIMIT]

