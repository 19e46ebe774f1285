# backend/routes/marketing.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.marketing import Campaign, AutomationTemplate
from schemas.base import OkResponse
from schemas import marketing as schemas
from services import marketing_service
from utils.audit import log_admin_action, snapshot
from utils.tokenJWT import AdminPrincipal, get_current_admin, require_writer

router = APIRouter(prefix="/api/admin", tags=["Marketing"])


# ==========================================
#  SEGMENTS
# ==========================================
@router.get("/segments/counts", response_model=schemas.SegmentCounts)
def segment_counts(db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return {"counts": marketing_service.segment_counts(db)}


# Unknown segment names list every customer
@router.get("/segments/{segment}", response_model=schemas.SegmentMembers)
def segment_members(segment: str, db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    customers = marketing_service.customers_by_segment(db, segment)
    return {"segment": segment, "count": len(customers), "customers": customers}


# ==========================================
#  CAMPAIGNS
# ==========================================
@router.get("/campaigns", response_model=List[schemas.CampaignOut])
def list_campaigns(db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return db.query(Campaign).order_by(Campaign.created_at.desc()).all()


@router.post("/campaigns", response_model=schemas.CampaignOut, status_code=status.HTTP_201_CREATED)
def create_campaign(
    payload: schemas.CampaignCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    campaign = marketing_service.create_campaign(db, **payload.model_dump())
    log_admin_action(db, request, admin, entity_type="campaign", entity_id=campaign.id, action="create",
                     description=f"Created campaign {campaign.name} for {campaign.segment}", after=campaign)
    return marketing_service.get_campaign(db, campaign.id)


@router.patch("/campaigns/{campaign_id}", response_model=schemas.CampaignOut)
def update_campaign(
    campaign_id: str,
    payload: schemas.CampaignUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    before = snapshot(marketing_service.get_campaign(db, campaign_id))
    campaign = marketing_service.update_campaign(db, campaign_id, payload.model_dump(exclude_unset=True))
    log_admin_action(db, request, admin, entity_type="campaign", entity_id=campaign.id, action="update",
                     description=f"Updated campaign {campaign.name}", before=before, after=campaign)
    return marketing_service.get_campaign(db, campaign_id)


@router.delete("/campaigns/{campaign_id}", response_model=OkResponse)
def delete_campaign(
    campaign_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    before = snapshot(marketing_service.get_campaign(db, campaign_id))
    marketing_service.delete_campaign(db, campaign_id)
    log_admin_action(db, request, admin, entity_type="campaign", entity_id=campaign_id, action="delete",
                     description=f"Deleted campaign {before['name']}", before=before)
    return {"ok": True}


@router.post("/campaigns/{campaign_id}/send", response_model=schemas.CampaignOut)
def send_campaign(
    campaign_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    campaign = marketing_service.send_campaign(db, campaign_id)
    log_admin_action(db, request, admin, entity_type="campaign", entity_id=campaign.id, action="send",
                     description=f"Sent campaign {campaign.name} to {campaign.recipient_count} recipients")
    return marketing_service.get_campaign(db, campaign_id)


# ==========================================
#  AUTOMATIONS
# ==========================================
@router.get("/automations", response_model=List[schemas.AutomationOut])
def list_automations(db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return db.query(AutomationTemplate).order_by(AutomationTemplate.created_at.desc()).all()


@router.get("/automations/sends", response_model=List[schemas.AutomationSendOut])
def list_automation_sends(
    template_id: Optional[str] = Query(None),
    send_status: Optional[str] = Query(None, alias="status"),
    order_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    return marketing_service.list_sends(db, template_id=template_id, status=send_status, order_id=order_id)


# Stand-in for a delivery worker: flips every due send to SENT
@router.post("/automations/sends/process", response_model=schemas.ProcessedResponse)
def process_automation_sends(
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    processed = marketing_service.process_due_sends(db)
    if processed:
        log_admin_action(db, request, admin, entity_type="automation", entity_id="sends", action="process",
                         description=f"Processed {processed} automation sends")
    return {"ok": True, "processed": processed}


@router.post("/automations", response_model=schemas.AutomationOut, status_code=status.HTTP_201_CREATED)
def create_automation(
    payload: schemas.AutomationCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    template = marketing_service.create_template(db, payload.model_dump())
    log_admin_action(db, request, admin, entity_type="automation", entity_id=template.id, action="create",
                     description=f"Created automation {template.name}", after=template)
    return marketing_service.get_template(db, template.id)


@router.patch("/automations/{template_id}", response_model=schemas.AutomationOut)
def update_automation(
    template_id: str,
    payload: schemas.AutomationUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    before = snapshot(marketing_service.get_template(db, template_id))
    template = marketing_service.update_template(db, template_id, payload.model_dump(exclude_unset=True))
    log_admin_action(db, request, admin, entity_type="automation", entity_id=template.id, action="update",
                     description=f"Updated automation {template.name}", before=before, after=template)
    return marketing_service.get_template(db, template_id)


@router.delete("/automations/{template_id}", response_model=OkResponse)
def delete_automation(
    template_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    before = snapshot(marketing_service.get_template(db, template_id))
    marketing_service.delete_template(db, template_id)
    log_admin_action(db, request, admin, entity_type="automation", entity_id=template_id, action="delete",
                     description=f"Deleted automation {before['name']}", before=before)
    return {"ok": True}
