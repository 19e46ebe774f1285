# backend/schemas/marketing.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from models.marketing import TriggerType
from schemas.base import ORMBase
from schemas.customer import CustomerOut


class SegmentMembers(ORMBase):
    segment: str
    count: int
    customers: List[CustomerOut]


class SegmentCounts(ORMBase):
    counts: Dict[str, int]


class CampaignCreate(ORMBase):
    name: str = Field(min_length=1)
    segment: str
    subject: str = Field(min_length=1)
    body: str = Field(min_length=1)
    promo_code: Optional[str] = None


class CampaignUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1)
    segment: Optional[str] = None
    subject: Optional[str] = Field(None, min_length=1)
    body: Optional[str] = Field(None, min_length=1)
    promo_code: Optional[str] = None


class CampaignOut(ORMBase):
    id: str
    name: str
    segment: str
    subject: str
    body: str
    promo_code: Optional[str] = None
    recipient_count: int
    status: str
    sent_at: Optional[datetime] = None
    created_at: datetime


class AutomationCreate(ORMBase):
    name: str = Field(min_length=1)
    trigger_type: TriggerType
    delay_hours: int = Field(default=0, ge=0)
    subject: str = Field(min_length=1)
    body: str = Field(min_length=1)
    active: bool = True
    upsell_product_id: Optional[str] = None


class AutomationUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1)
    trigger_type: Optional[TriggerType] = None
    delay_hours: Optional[int] = Field(None, ge=0)
    subject: Optional[str] = Field(None, min_length=1)
    body: Optional[str] = Field(None, min_length=1)
    active: Optional[bool] = None
    upsell_product_id: Optional[str] = None


class AutomationOut(ORMBase):
    id: str
    name: str
    trigger_type: str
    delay_hours: int
    subject: str
    body: str
    active: bool
    upsell_product_id: Optional[str] = None
    created_at: datetime


class AutomationSendOut(ORMBase):
    id: str
    template_id: str
    order_id: Optional[str] = None
    customer_id: Optional[str] = None
    customer_email: str
    status: str
    scheduled_for: datetime
    sent_at: Optional[datetime] = None


class ProcessedResponse(ORMBase):
    ok: bool = True
    processed: int
