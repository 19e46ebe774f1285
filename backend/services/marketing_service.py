# backend/services/marketing_service.py
from datetime import timedelta
from typing import Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.customer import Customer
from models.marketing import Segment, TriggerType, Campaign, AutomationTemplate, AutomationSend
from utils.errors import ValidationError, NotFoundError
from utils.time_utils import utcnow

VIP_SPEND_CENTS = 10000
INACTIVE_AFTER_DAYS = 60

SEGMENTS = [s.value for s in Segment]
# Triggers that fire when an order is placed
ORDER_TRIGGERS = (TriggerType.POST_PURCHASE.value, TriggerType.REVIEW_REQUEST.value)


def validate_segment(segment: str) -> str:
    if segment not in SEGMENTS:
        raise ValidationError(f"Invalid segment: {segment}. Expected one of {', '.join(SEGMENTS)}")
    return segment


def customers_by_segment(db: Session, segment: Optional[str]) -> List[Customer]:
    """Customers matching a fixed rule over their order history; unknown names mean 'all'."""
    query = db.query(Customer)
    if segment == Segment.VIP.value:
        return query.filter(Customer.total_spent_cents >= VIP_SPEND_CENTS).order_by(Customer.total_spent_cents.desc()).all()
    if segment == Segment.FIRST_TIME.value:
        return query.filter(Customer.total_order_count == 1).order_by(Customer.created_at.desc()).all()
    if segment == Segment.INACTIVE.value:
        cutoff = utcnow() - timedelta(days=INACTIVE_AFTER_DAYS)
        return query.filter(
            or_(Customer.last_order_at.is_(None), Customer.last_order_at <= cutoff)
        ).order_by(Customer.created_at.desc()).all()
    if segment == Segment.REPEAT.value:
        return query.filter(Customer.total_order_count >= 2).order_by(Customer.total_spent_cents.desc()).all()
    return query.order_by(Customer.created_at.desc()).all()


def segment_counts(db: Session) -> Dict[str, int]:
    return {segment: len(customers_by_segment(db, segment)) for segment in SEGMENTS}


# ---- Campaigns ----

def get_campaign(db: Session, campaign_id: str) -> Campaign:
    campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
    if not campaign:
        raise NotFoundError("Campaign not found")
    return campaign


def create_campaign(db: Session, *, name: str, segment: str, subject: str, body: str, promo_code: Optional[str] = None) -> Campaign:
    validate_segment(segment)
    recipients = customers_by_segment(db, segment)
    campaign = Campaign(
        name=name, segment=segment, subject=subject, body=body,
        promo_code=promo_code or None, recipient_count=len(recipients), status="DRAFT",
    )
    db.add(campaign)
    db.commit()
    db.refresh(campaign)
    return campaign


def update_campaign(db: Session, campaign_id: str, data: dict) -> Campaign:
    campaign = get_campaign(db, campaign_id)
    if campaign.status == "SENT":
        raise ValidationError("Sent campaigns cannot be edited")
    if data.get("segment") is not None:
        validate_segment(data["segment"])
    for key, value in data.items():
        if value is not None:
            setattr(campaign, key, value)
    campaign.recipient_count = len(customers_by_segment(db, campaign.segment))
    db.commit()
    db.refresh(campaign)
    return campaign


def delete_campaign(db: Session, campaign_id: str) -> None:
    db.delete(get_campaign(db, campaign_id))
    db.commit()


def send_campaign(db: Session, campaign_id: str) -> Campaign:
    """Mark a campaign sent to its segment's current members. Delivery is out of scope."""
    campaign = get_campaign(db, campaign_id)
    if campaign.status == "SENT":
        raise ValidationError("Campaign already sent")
    campaign.recipient_count = len(customers_by_segment(db, campaign.segment))
    campaign.status = "SENT"
    campaign.sent_at = utcnow()
    db.commit()
    db.refresh(campaign)
    return campaign


# ---- Automations ----

def get_template(db: Session, template_id: str) -> AutomationTemplate:
    template = db.query(AutomationTemplate).filter(AutomationTemplate.id == template_id).first()
    if not template:
        raise NotFoundError("Automation not found")
    return template


def validate_trigger(trigger_type) -> str:
    value = getattr(trigger_type, "value", trigger_type)
    valid = [t.value for t in TriggerType]
    if value not in valid:
        raise ValidationError(f"Invalid trigger type: {value}. Expected one of {', '.join(valid)}")
    return value


def create_template(db: Session, data: dict) -> AutomationTemplate:
    data = dict(data)
    data["trigger_type"] = validate_trigger(data.get("trigger_type"))
    template = AutomationTemplate(**data)
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


def update_template(db: Session, template_id: str, data: dict) -> AutomationTemplate:
    template = get_template(db, template_id)
    data = dict(data)
    if data.get("trigger_type") is not None:
        data["trigger_type"] = validate_trigger(data["trigger_type"])
    for key, value in data.items():
        setattr(template, key, value)
    db.commit()
    db.refresh(template)
    return template


# Pending sends of a deleted template are removed with it
def delete_template(db: Session, template_id: str) -> None:
    db.delete(get_template(db, template_id))
    db.commit()


def schedule_for_order(db: Session, order, customer) -> List[AutomationSend]:
    """Queue order-triggered templates; runs inside the checkout transaction."""
    templates = (
        db.query(AutomationTemplate)
        .filter(AutomationTemplate.active.is_(True), AutomationTemplate.trigger_type.in_(ORDER_TRIGGERS))
        .all()
    )
    now = utcnow()
    sends = []
    for template in templates:
        send = AutomationSend(
            template_id=template.id,
            order_id=order.id,
            customer_id=customer.id if customer else None,
            customer_email=order.email,
            status="PENDING",
            scheduled_for=now + timedelta(hours=template.delay_hours or 0),
        )
        db.add(send)
        sends.append(send)
    return sends


def list_sends(db: Session, template_id: Optional[str] = None, status: Optional[str] = None, order_id: Optional[str] = None) -> List[AutomationSend]:
    query = db.query(AutomationSend)
    if template_id:
        query = query.filter(AutomationSend.template_id == template_id)
    if status:
        query = query.filter(AutomationSend.status == status.upper())
    if order_id:
        query = query.filter(AutomationSend.order_id == order_id)
    return query.order_by(AutomationSend.scheduled_for.desc()).all()


def process_due_sends(db: Session) -> int:
    """Flip every due PENDING send of an active template to SENT."""
    now = utcnow()
    due = (
        db.query(AutomationSend)
        .join(AutomationTemplate, AutomationTemplate.id == AutomationSend.template_id)
        .filter(
            AutomationSend.status == "PENDING",
            AutomationSend.scheduled_for <= now,
            AutomationTemplate.active.is_(True),
        )
        .all()
    )
    for send in due:
        send.status = "SENT"
        send.sent_at = now
    db.commit()
    return len(due)
