# backend/routes/stats.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from schemas.reports import Kpis, DailyRevenue, TopProduct, SalesReport, ActivityItem
from services import reporting_service
from utils.tokenJWT import AdminPrincipal, get_current_admin

router = APIRouter(
    prefix="/api/admin",
    tags=["Stats"]
)


# === Dashboard ===

@router.get("/kpis", response_model=Kpis)
def get_kpis(
    days: int = Query(30, ge=1, le=3650),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    return reporting_service.kpis(db, days)


@router.get("/revenue-chart", response_model=List[DailyRevenue])
def get_revenue_chart(
    days: int = Query(30, ge=1, le=3650),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    return reporting_service.revenue_by_day(db, days)


@router.get("/top-products", response_model=List[TopProduct])
def get_top_products(
    days: int = Query(30, ge=1, le=3650),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    return reporting_service.top_products(db, days, limit)


@router.get("/recent-activity", response_model=List[ActivityItem])
def get_recent_activity(db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return reporting_service.recent_activity(db)


# === Reports ===

@router.get("/reports/sales", response_model=SalesReport)
def get_sales_report(
    days: int = Query(30, ge=1, le=3650),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    return reporting_service.sales_report(db, days)
