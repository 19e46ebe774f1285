# backend/routes/promotions.py
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.promotion import Promotion
from schemas.base import OkResponse
from schemas.promotion import (
    PromotionCreate, PromotionUpdate, PromotionOut, PromoPerformanceRow, AutoStopResponse
)
from services import promotion_service
from utils.audit import log_admin_action, snapshot
from utils.tokenJWT import AdminPrincipal, get_current_admin, require_writer

router = APIRouter(prefix="/api/admin", tags=["Promotions"])


@router.get("/promotions", response_model=List[PromotionOut])
def list_promotions(db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return db.query(Promotion).order_by(Promotion.created_at.desc()).all()


@router.get("/promotions/{promotion_id}", response_model=PromotionOut)
def get_promotion(promotion_id: str, db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return promotion_service.get_promotion(db, promotion_id)


@router.post("/promotions", response_model=PromotionOut, status_code=status.HTTP_201_CREATED)
def create_promotion(
    payload: PromotionCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    promo = promotion_service.create_promotion(db, payload.model_dump())
    log_admin_action(db, request, admin, entity_type="promotion", entity_id=promo.id, action="create",
                     description=f"Created promotion {promo.code}", after=promo)
    return promotion_service.get_promotion(db, promo.id)


@router.patch("/promotions/{promotion_id}", response_model=PromotionOut)
def update_promotion(
    promotion_id: str,
    payload: PromotionUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    before = snapshot(promotion_service.get_promotion(db, promotion_id))
    promo = promotion_service.update_promotion(db, promotion_id, payload.model_dump(exclude_unset=True))
    log_admin_action(db, request, admin, entity_type="promotion", entity_id=promo.id, action="update",
                     description=f"Updated promotion {promo.code}", before=before, after=promo)
    return promotion_service.get_promotion(db, promotion_id)


@router.delete("/promotions/{promotion_id}", response_model=OkResponse)
def delete_promotion(
    promotion_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    promo = promotion_service.get_promotion(db, promotion_id)
    before = snapshot(promo)
    db.delete(promo)
    db.commit()
    log_admin_action(db, request, admin, entity_type="promotion", entity_id=promotion_id, action="delete",
                     description=f"Deleted promotion {before['code']}", before=before)
    return {"ok": True}


# Deactivate a product-linked promotion once the product sells out
@router.post("/promotions/{promotion_id}/auto-stop", response_model=AutoStopResponse)
def auto_stop_promotion(
    promotion_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    result = promotion_service.auto_stop(db, promotion_id)
    if result["stopped"]:
        log_admin_action(db, request, admin, entity_type="promotion", entity_id=promotion_id, action="auto_stop",
                         description="Promotion auto-stopped: linked product out of stock")
    return result


@router.get("/promo-performance", response_model=List[PromoPerformanceRow])
def promo_performance(db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return promotion_service.performance(db)
