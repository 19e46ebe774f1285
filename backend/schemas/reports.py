# backend/schemas/reports.py
from datetime import datetime
from typing import List

from schemas.base import ORMBase


class Kpis(ORMBase):
    revenue: int
    order_count: int
    avg_order_value: int
    refunded_amount: int
    low_stock_count: int


class DailyRevenue(ORMBase):
    date: str
    revenue: int
    orders: int


class TopProduct(ORMBase):
    product_name: str
    revenue: int
    quantity: int


class SalesReport(ORMBase):
    by_day: List[DailyRevenue]
    top_products: List[TopProduct]
    kpis: Kpis


class ActivityItem(ORMBase):
    type: str
    description: str
    created_at: datetime
