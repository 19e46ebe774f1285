# backend/routes/reviews.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from schemas.base import OkResponse
from schemas.review import ReviewAdminOut, ReviewModeration, WaitlistEntryOut
from services import review_service
from utils.audit import log_admin_action, snapshot
from utils.tokenJWT import AdminPrincipal, get_current_admin, require_writer

router = APIRouter(prefix="/api/admin", tags=["Reviews"])


@router.get("/reviews", response_model=List[ReviewAdminOut])
def list_reviews(
    product_id: Optional[str] = Query(None),
    approved: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    return review_service.list_reviews(db, product_id=product_id, approved=approved)


@router.patch("/reviews/{review_id}", response_model=ReviewAdminOut)
def moderate_review(
    review_id: str,
    payload: ReviewModeration,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    review = review_service.set_approved(db, review_id, payload.approved)
    log_admin_action(db, request, admin, entity_type="review", entity_id=review.id, action="update",
                     description=f"{'Approved' if payload.approved else 'Rejected'} review")
    return review_service.get_review(db, review_id)


@router.delete("/reviews/{review_id}", response_model=OkResponse)
def delete_review(
    review_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    before = snapshot(review_service.get_review(db, review_id))
    review_service.delete_review(db, review_id)
    log_admin_action(db, request, admin, entity_type="review", entity_id=review_id, action="delete",
                     description="Deleted review", before=before)
    return {"ok": True}


@router.get("/waitlist", response_model=List[WaitlistEntryOut])
def list_waitlist(
    product_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    return review_service.list_waitlist(db, product_id=product_id)


@router.post("/waitlist/{entry_id}/notify", response_model=WaitlistEntryOut)
def notify_waitlist_entry(
    entry_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    entry = review_service.mark_notified(db, entry_id)
    log_admin_action(db, request, admin, entity_type="waitlist", entity_id=entry.id, action="notify",
                     description=f"Marked {entry.email} notified")
    return entry
