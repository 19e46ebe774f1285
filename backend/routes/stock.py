# backend/routes/stock.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from database import get_db
import schemas.stock as stock_schemas
from services import catalog_service, inventory_service
from services.pricing import variant_label
from utils.audit import log_admin_action
from utils.tokenJWT import AdminPrincipal, get_current_admin, require_writer

router = APIRouter(prefix="/api/admin/inventory", tags=["Stock"])


@router.get("", response_model=List[stock_schemas.InventoryRow])
def inventory_overview(db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return catalog_service.inventory_overview(db)


# Computed on every call from the live stock column
@router.get("/low-stock", response_model=stock_schemas.LowStockResponse)
def low_stock(
    threshold: Optional[int] = Query(None, ge=0, description="Override each variant's reorder point"),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    rows = inventory_service.low_stock_variants(db, threshold=threshold)
    items = [
        {
            "variant_id": r["variant"].id,
            "product_id": r["variant"].product_id,
            "product_name": r["product_name"],
            "sku": r["variant"].sku,
            "variant_label": variant_label(r["variant"]),
            "stock_on_hand": r["variant"].stock_on_hand,
            "reorder_point": r["variant"].reorder_point,
        }
        for r in rows
    ]
    return {"items": items, "count": len(items)}


@router.post("/adjust", response_model=stock_schemas.AdjustmentOut)
def adjust_inventory(
    payload: stock_schemas.AdjustmentCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    adjustment = inventory_service.adjust_stock(
        db,
        payload.variant_id,
        payload.quantity_change,
        payload.reason,
        notes=payload.notes,
        author=admin.name,
    )
    log_admin_action(
        db, request, admin,
        entity_type="inventory",
        entity_id=adjustment.variant_id,
        action="adjust",
        description=f"{adjustment.reason.value}: {adjustment.quantity_change:+d} "
                    f"({adjustment.previous_on_hand} -> {adjustment.new_on_hand})",
        before={"stock_on_hand": adjustment.previous_on_hand},
        after={"stock_on_hand": adjustment.new_on_hand},
    )
    return adjustment


@router.get("/adjustments", response_model=List[stock_schemas.AdjustmentOut])
def list_adjustments(
    variant_id: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    return inventory_service.list_adjustments(db, variant_id=variant_id, limit=limit)
