# backend/routes/customers.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from database import get_db
from models.customer import Customer
from schemas.customer import CustomerDetail, CustomerOut, CustomersPage, CustomerUpdate
from utils.audit import log_admin_action, snapshot
from utils.tokenJWT import AdminPrincipal, get_current_admin, require_writer

router = APIRouter(prefix="/api/admin/customers", tags=["Customers"])


def _get_customer(db: Session, customer_id: str) -> Customer:
    customer = (
        db.query(Customer)
        .options(selectinload(Customer.orders))
        .filter(Customer.id == customer_id)
        .first()
    )
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


@router.get("", response_model=CustomersPage)
def list_customers(
    q: Optional[str] = Query(None, description="Search by e-mail, name or tag"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    query = db.query(Customer)
    if q:
        like = f"%{q}%"
        query = query.filter(or_(Customer.email.ilike(like), Customer.name.ilike(like), Customer.tags.ilike(like)))

    total = query.count()
    items = (
        query.order_by(Customer.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.get("/{customer_id}", response_model=CustomerDetail)
def get_customer(customer_id: str, db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return _get_customer(db, customer_id)


@router.patch("/{customer_id}", response_model=CustomerOut)
def update_customer(
    customer_id: str,
    payload: CustomerUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    customer = _get_customer(db, customer_id)
    before = snapshot(customer)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(customer, key, value)
    db.commit()
    db.refresh(customer)

    log_admin_action(db, request, admin, entity_type="customer", entity_id=customer.id, action="update",
                     description=f"Updated customer {customer.email}", before=before, after=customer)
    return customer
