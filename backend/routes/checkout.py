# backend/routes/checkout.py
from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from database import get_db
from schemas.checkout import CheckoutPayload, CheckoutResponse
from services import checkout_service

router = APIRouter(prefix="/api", tags=["Checkout"])


# Place an order; prices come from the catalog, never from the request
@router.post("/checkout", response_model=CheckoutResponse)
def checkout(
    payload: CheckoutPayload,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    db: Session = Depends(get_db),
):
    order = checkout_service.place_order(db, payload, idempotency_key=idempotency_key)
    return {"order_id": order.id, "total": order.total_cents}
