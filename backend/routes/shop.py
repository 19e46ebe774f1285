# backend/routes/shop.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.product import ProductPublic, VariantPublic
from schemas.review import ReviewCreate, ReviewOut, ReviewSubmitted, WaitlistJoin, WaitlistEntryOut
from services import catalog_service, review_service

router = APIRouter(
    prefix="/api",
    tags=["Shop"]
)


# Storefront projection: only active variants are listed
def _to_public(row: dict) -> ProductPublic:
    out = ProductPublic.model_validate(row["product"])
    out.variants = [VariantPublic.model_validate(v) for v in row["variants"]]
    return out


@router.get("/products", response_model=List[ProductPublic])
def list_products(featured: bool = False, db: Session = Depends(get_db)):
    return [_to_public(row) for row in catalog_service.list_storefront_products(db, featured_only=featured)]


@router.get("/products/featured", response_model=List[ProductPublic])
def list_featured_products(db: Session = Depends(get_db)):
    return [_to_public(row) for row in catalog_service.list_storefront_products(db, featured_only=True)]


@router.get("/products/{slug}", response_model=ProductPublic)
def get_product(slug: str, db: Session = Depends(get_db)):
    row = catalog_service.get_storefront_product(db, slug)
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return _to_public(row)


@router.get("/products/{slug}/reviews", response_model=List[ReviewOut])
def list_product_reviews(slug: str, db: Session = Depends(get_db)):
    return review_service.approved_reviews(db, slug)


@router.post("/products/{slug}/reviews", response_model=ReviewSubmitted)
def submit_review(slug: str, payload: ReviewCreate, db: Session = Depends(get_db)):
    review, coupon = review_service.submit_review(
        db,
        slug,
        customer_email=payload.customer_email,
        customer_name=payload.customer_name,
        rating=payload.rating,
        title=payload.title,
        body=payload.body,
        order_id=payload.order_id,
    )
    return {"review": review, "coupon_code": coupon}


@router.post("/waitlist", response_model=WaitlistEntryOut)
def join_waitlist(payload: WaitlistJoin, db: Session = Depends(get_db)):
    return review_service.join_waitlist(db, payload.product_id, payload.email)
