"""
Outreach routes: invitations, job applications and contact messages
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from .auth import require_creator
from .db import get_db
from .schemas import (
    ApplicationCreate,
    ApplicationSchema,
    ContactMessageCreate,
    InvitationCreate,
    InvitationSchema,
)
from .services.marketplace_gateway import MarketplaceGateway
from .services.session_resolver import SessionState

router = APIRouter(prefix="/api", tags=["engagement"])


@router.post("/invitations", response_model=InvitationSchema, status_code=status.HTTP_201_CREATED)
async def send_invitation(form: InvitationCreate, db: Session = Depends(get_db)):
    """Client invites a creator to a job; no account needed"""
    return MarketplaceGateway(db).create_invitation(form)


@router.post("/applications", response_model=ApplicationSchema, status_code=status.HTTP_201_CREATED)
async def apply_to_job(
    form: ApplicationCreate,
    db: Session = Depends(get_db),
    state: SessionState = Depends(require_creator),
):
    """Apply to a job as the signed-in creator; one application per job"""
    return MarketplaceGateway(db).create_application(form.job_id, state.creator_id, form.cover_letter)


@router.get("/applications/mine", response_model=List[ApplicationSchema])
async def my_applications(
    db: Session = Depends(get_db),
    state: SessionState = Depends(require_creator),
):
    return MarketplaceGateway(db).list_applications_for_creator(state.creator_id)


@router.post("/contact", status_code=status.HTTP_201_CREATED)
async def send_contact_message(form: ContactMessageCreate, db: Session = Depends(get_db)):
    message = MarketplaceGateway(db).create_contact_message(form)
    return {"id": message.id, "message": "Message received. We will get back to you soon."}
