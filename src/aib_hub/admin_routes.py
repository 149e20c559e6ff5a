"""
Admin routes for moderation and catalogue management
Protected endpoints; the caller's profile role must be ADMIN
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from .auth import require_admin
from .db import get_db
from .directory_routes import get_listing_service
from .schemas import CreatorCard, CreatorStatusUpdate, JobSchema, TierSelectRequest
from .services.listing_service import ListingService
from .services.marketplace_gateway import MarketplaceGateway
from .services.session_resolver import SessionState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/creators", response_model=List[CreatorCard])
async def list_all_creators(
    db: Session = Depends(get_db),
    admin: SessionState = Depends(require_admin),
    listings: ListingService = Depends(get_listing_service),
):
    """Every creator regardless of status"""
    return [listings.to_card(creator) for creator in MarketplaceGateway(db).list_creators()]


@router.get("/jobs", response_model=List[JobSchema])
async def list_all_jobs(
    db: Session = Depends(get_db),
    admin: SessionState = Depends(require_admin),
):
    return MarketplaceGateway(db).list_jobs()


@router.patch("/creators/{creator_id}/status", response_model=CreatorCard)
async def set_creator_status(
    creator_id: int,
    form: CreatorStatusUpdate,
    db: Session = Depends(get_db),
    admin: SessionState = Depends(require_admin),
    listings: ListingService = Depends(get_listing_service),
):
    """Approve or reject a creator"""
    logger.info(f"Admin {admin.user_id} setting creator {creator_id} status to {form.status.value}")
    return listings.to_card(MarketplaceGateway(db).set_status(creator_id, form.status))


@router.post("/creators/{creator_id}/featured", response_model=CreatorCard)
async def toggle_creator_featured(
    creator_id: int,
    db: Session = Depends(get_db),
    admin: SessionState = Depends(require_admin),
    listings: ListingService = Depends(get_listing_service),
):
    return listings.to_card(MarketplaceGateway(db).toggle_featured(creator_id))


@router.put("/creators/{creator_id}/tier", response_model=CreatorCard)
async def set_creator_tier(
    creator_id: int,
    form: TierSelectRequest,
    db: Session = Depends(get_db),
    admin: SessionState = Depends(require_admin),
    listings: ListingService = Depends(get_listing_service),
):
    return listings.to_card(MarketplaceGateway(db).set_tier(creator_id, form.tier))


@router.delete("/creators/{creator_id}")
async def purge_creator(
    creator_id: int,
    db: Session = Depends(get_db),
    admin: SessionState = Depends(require_admin),
):
    """Hard-delete a creator with portfolio, applications and invitations"""
    logger.warning(f"Admin {admin.user_id} purging creator {creator_id}")
    MarketplaceGateway(db).delete_creator(creator_id)
    return {"message": f"Creator {creator_id} deleted"}


@router.delete("/jobs/{job_id}")
async def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    admin: SessionState = Depends(require_admin),
):
    logger.info(f"Admin {admin.user_id} deleting job {job_id}")
    MarketplaceGateway(db).delete_job(job_id)
    return {"message": f"Job {job_id} deleted"}
