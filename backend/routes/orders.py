# backend/routes/orders.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from schemas.order import OrderDetail, OrdersPage, OrderPatch, OrderNoteCreate, OrderNoteOut, RefundRequest
from services import order_service
from utils.audit import log_admin_action, snapshot
from utils.tokenJWT import AdminPrincipal, get_current_admin, require_writer

router = APIRouter(prefix="/api/admin/orders", tags=["Orders"])


# Audit view of an order: header fields only, lines never change
def _order_state(order) -> dict:
    return {
        "status": order.status,
        "tracking_number": order.tracking_number,
        "carrier": order.carrier,
        "refunded_cents": order.refunded_cents,
        "total_cents": order.total_cents,
    }


@router.get("", response_model=OrdersPage)
def list_orders(
    status: Optional[str] = Query(None),
    email: Optional[str] = Query(None, description="Search by customer e-mail"),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    return order_service.list_orders(
        db, status=status, email=email, date_from=date_from, date_to=date_to, page=page, page_size=page_size
    )


@router.get("/{order_id}", response_model=OrderDetail)
def get_order(order_id: str, db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return order_service.get_order(db, order_id)


@router.patch("/{order_id}", response_model=OrderDetail)
def update_order(
    order_id: str,
    payload: OrderPatch,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    before = _order_state(order_service.get_order(db, order_id))
    order = order_service.update_order(
        db, order_id, status=payload.status, tracking_number=payload.tracking_number, carrier=payload.carrier
    )
    after = _order_state(order)

    if before["status"] != after["status"]:
        log_admin_action(db, request, admin, entity_type="order", entity_id=order.id, action="status_change",
                         description=f"Status changed from {before['status'].value} to {after['status'].value}",
                         before=before, after=after)
    elif before != after:
        log_admin_action(db, request, admin, entity_type="order", entity_id=order.id, action="update",
                         description="Updated tracking information", before=before, after=after)
    return order_service.get_order(db, order_id)


@router.post("/{order_id}/notes", response_model=OrderNoteOut)
def add_note(
    order_id: str,
    payload: OrderNoteCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    note = order_service.add_note(db, order_id, payload.content, author=admin.name)
    log_admin_action(db, request, admin, entity_type="order", entity_id=order_id, action="note",
                     description="Added order note", after=snapshot(note))
    return note


@router.post("/{order_id}/refund", response_model=OrderDetail)
def refund_order(
    order_id: str,
    payload: RefundRequest,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    before = _order_state(order_service.get_order(db, order_id))
    order = order_service.refund(db, order_id, amount_cents=payload.amount_cents, reason=payload.reason)
    refunded = order.refunded_cents - before["refunded_cents"]
    log_admin_action(db, request, admin, entity_type="order", entity_id=order.id, action="refund",
                     description=f"Refunded {refunded} cents", before=before, after=_order_state(order))
    return order_service.get_order(db, order_id)
