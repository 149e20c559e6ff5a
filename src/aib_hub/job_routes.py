"""
Job brief routes
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from .auth import get_session_state
from .db import get_db
from .directory_routes import get_listing_service
from .schemas import JobCreate, JobListResponse, JobSchema
from .services.listing_service import JobFilters, ListingService
from .services.marketplace_gateway import MarketplaceGateway
from .services.session_resolver import SessionState

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.get("", response_model=JobListResponse)
async def list_jobs(
    city: Optional[str] = Query(None),
    skill: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    listings: ListingService = Depends(get_listing_service),
):
    filters = JobFilters(city=city, skill=skill)
    result = listings.filter_jobs(MarketplaceGateway(db).list_jobs(), filters)
    return JobListResponse(
        jobs=result.items,
        total=result.total,
        filters=filters.as_dict(),
        show_reset_filters=result.show_reset_filters,
    )


@router.get("/{job_id}", response_model=JobSchema)
async def get_job(job_id: int, db: Session = Depends(get_db)):
    return MarketplaceGateway(db).get_job(job_id)


@router.post("", response_model=JobSchema, status_code=status.HTTP_201_CREATED)
async def post_job(
    form: JobCreate,
    db: Session = Depends(get_db),
    state: SessionState = Depends(get_session_state),
):
    """Post a brief; no account needed"""
    return MarketplaceGateway(db).create_job(form, posted_by_user_id=state.user_id)
