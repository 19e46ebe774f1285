# backend/services/review_service.py
import logging
import secrets
import string
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from models.customer import Customer
from models.order import Order
from models.product import Product
from models.promotion import Promotion, DiscountType
from models.review import Review, WaitlistEntry
from utils.errors import ValidationError, NotFoundError

logger = logging.getLogger(__name__)

COUPON_PREFIX = "REVIEW"
COUPON_PERCENT = 10
_COUPON_ALPHABET = string.ascii_uppercase + string.digits


def get_product_by_slug(db: Session, slug: str) -> Product:
    product = db.query(Product).filter(Product.slug == slug).first()
    if not product:
        raise NotFoundError("Product not found")
    return product


def _new_coupon_code() -> str:
    return COUPON_PREFIX + "".join(secrets.choice(_COUPON_ALPHABET) for _ in range(6))


def clamp_rating(rating) -> int:
    return min(5, max(1, int(rating)))


# Single-use thank-you coupon, redeemable only by the reviewer
def _issue_coupon(db: Session, email: str) -> str:
    code = _new_coupon_code()
    while db.query(Promotion.id).filter(Promotion.code == code).first():
        code = _new_coupon_code()
    db.add(Promotion(
        code=code,
        description="Review thank-you coupon",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=COUPON_PERCENT,
        max_usage_count=1,
        customer_email=email,
        active=True,
    ))
    return code


def submit_review(
    db: Session,
    slug: str,
    *,
    customer_email: str,
    customer_name: str,
    rating,
    title: Optional[str] = None,
    body: Optional[str] = None,
    order_id: Optional[str] = None,
) -> Tuple[Review, Optional[str]]:
    """Store an unapproved review; verified reviewers also get a coupon code."""
    product = get_product_by_slug(db, slug)
    if not customer_email or not customer_name or not rating:
        raise ValidationError("Email, name, and rating required")

    verified = False
    if order_id:
        order = db.query(Order).filter(Order.id == order_id).first()
        verified = bool(order and order.email.lower() == customer_email.lower())

    customer = db.query(Customer).filter(Customer.email == customer_email).first()
    coupon = _issue_coupon(db, customer_email) if verified else None

    review = Review(
        product_id=product.id,
        customer_id=customer.id if customer else None,
        customer_email=customer_email,
        customer_name=customer_name,
        rating=clamp_rating(rating),
        title=title or None,
        body=body or None,
        verified=verified,
        approved=False,
        incentive_coupon_code=coupon,
        order_id=order_id or None,
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    logger.info("Review %s submitted for %s (verified=%s)", review.id, product.slug, verified)
    return review, coupon


def approved_reviews(db: Session, slug: str) -> List[Review]:
    product = get_product_by_slug(db, slug)
    return (
        db.query(Review)
        .filter(Review.product_id == product.id, Review.approved.is_(True))
        .order_by(Review.created_at.desc())
        .all()
    )


def list_reviews(db: Session, product_id: Optional[str] = None, approved: Optional[bool] = None) -> List[Review]:
    query = db.query(Review)
    if product_id:
        query = query.filter(Review.product_id == product_id)
    if approved is not None:
        query = query.filter(Review.approved.is_(approved))
    return query.order_by(Review.created_at.desc()).all()


def get_review(db: Session, review_id: str) -> Review:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFoundError("Review not found")
    return review


def set_approved(db: Session, review_id: str, approved: bool) -> Review:
    review = get_review(db, review_id)
    review.approved = bool(approved)
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, review_id: str) -> None:
    review = get_review(db, review_id)
    db.delete(review)
    db.commit()


# ---- Waitlist ----

def join_waitlist(db: Session, product_id: str, email: str) -> WaitlistEntry:
    if not product_id or not email:
        raise ValidationError("Product ID and email required")
    if not db.query(Product.id).filter(Product.id == product_id).first():
        raise NotFoundError("Product not found")
    entry = WaitlistEntry(product_id=product_id, email=email, notified=False)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def list_waitlist(db: Session, product_id: Optional[str] = None) -> List[WaitlistEntry]:
    query = db.query(WaitlistEntry)
    if product_id:
        query = query.filter(WaitlistEntry.product_id == product_id)
    return query.order_by(WaitlistEntry.created_at.desc()).all()


def mark_notified(db: Session, entry_id: str) -> WaitlistEntry:
    entry = db.query(WaitlistEntry).filter(WaitlistEntry.id == entry_id).first()
    if not entry:
        raise NotFoundError("Entry not found")
    entry.notified = True
    db.commit()
    db.refresh(entry)
    return entry
