"""
Public directory routes: home feed, creator directory, city and skill catalogues
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Dict, List, Optional

from .auth import get_session_state
from .config import config
from .db import get_db, UserRole
from .schemas import CreatorCard, CreatorListResponse, HomeFeedResponse
from .services.listing_service import CreatorFilters, ListingService
from .services.marketplace_gateway import MarketplaceGateway
from .services.session_resolver import SessionState
from .services.tier_policy import get_tier_policy

router = APIRouter(prefix="/api", tags=["directory"])


def get_listing_service() -> ListingService:
    return ListingService(get_tier_policy())


@router.get("/home", response_model=HomeFeedResponse)
async def home_feed(
    db: Session = Depends(get_db),
    listings: ListingService = Depends(get_listing_service),
):
    """Spotlight creators (PLATINUM or featured) and the latest briefs"""
    gateway = MarketplaceGateway(db)
    featured = listings.featured_creators(gateway.list_approved_creators(), config.FEATURED_CREATORS_LIMIT)
    latest = listings.latest_jobs(gateway.list_jobs(), config.LATEST_JOBS_LIMIT)
    return HomeFeedResponse(
        featured_creators=[listings.to_card(creator) for creator in featured],
        latest_jobs=latest,
    )


@router.get("/creators", response_model=CreatorListResponse)
async def list_creators(
    search: Optional[str] = Query(None, description="Case-insensitive match on name or bio"),
    city: Optional[str] = Query(None),
    skill: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    listings: ListingService = Depends(get_listing_service),
):
    """Approved creators matching all filters, ranked by tier"""
    filters = CreatorFilters(search=search, city=city, skill=skill)
    result = listings.filter_creators(MarketplaceGateway(db).list_approved_creators(), filters)
    return CreatorListResponse(
        creators=[listings.to_card(creator) for creator in result.items],
        total=result.total,
        filters=filters.as_dict(),
        show_reset_filters=result.show_reset_filters,
    )


@router.get("/creators/{creator_id}", response_model=CreatorCard)
async def get_creator(
    creator_id: int,
    db: Session = Depends(get_db),
    state: SessionState = Depends(get_session_state),
    listings: ListingService = Depends(get_listing_service),
):
    """Creator detail; unapproved profiles are visible only to their owner and admins"""
    privileged = state.has_role(UserRole.ADMIN) or (
        state.creator_id is not None and state.creator_id == creator_id
    )
    creator = MarketplaceGateway(db).get_creator(creator_id, approved_only=not privileged)
    return listings.to_card(creator)


@router.get("/cities")
async def list_cities(
    db: Session = Depends(get_db),
    listings: ListingService = Depends(get_listing_service),
) -> Dict[str, List[str]]:
    gateway = MarketplaceGateway(db)
    return {"cities": listings.city_catalogue(gateway.list_approved_creators(), gateway.list_jobs())}


@router.get("/skills")
async def list_skills(
    db: Session = Depends(get_db),
    listings: ListingService = Depends(get_listing_service),
) -> Dict[str, List[str]]:
    return {"skills": listings.skill_catalogue(MarketplaceGateway(db).list_approved_creators())}
