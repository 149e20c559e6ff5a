"""
Self-service creator profile routes: info, bio, skills, portfolio, tags and tier
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging

from .auth import require_creator
from .db import get_db
from .directory_routes import get_listing_service
from .schemas import (
    BioUpdate,
    CreatorCard,
    InvitationSchema,
    PortfolioItemCreate,
    ProfileInfoUpdate,
    SkillsUpdate,
    TagToggleRequest,
    TagToggleResponse,
    TierSelectRequest,
)
from .services.listing_service import ListingService
from .services.marketplace_gateway import MarketplaceGateway
from .services.session_resolver import SessionState
from .services.tier_policy import TierPolicy, get_tier_policy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/me/creator", tags=["profile"])


@router.get("", response_model=CreatorCard)
async def get_my_creator(
    db: Session = Depends(get_db),
    state: SessionState = Depends(require_creator),
    listings: ListingService = Depends(get_listing_service),
):
    """Own profile, whatever its moderation status"""
    return listings.to_card(MarketplaceGateway(db).get_creator(state.creator_id))


@router.patch("/info", response_model=CreatorCard)
async def update_info(
    form: ProfileInfoUpdate,
    db: Session = Depends(get_db),
    state: SessionState = Depends(require_creator),
    listings: ListingService = Depends(get_listing_service),
):
    changes = form.model_dump(exclude_unset=True, exclude_none=True)
    creator = MarketplaceGateway(db).update_creator(state.creator_id, **changes)
    return listings.to_card(creator)


@router.put("/bio", response_model=CreatorCard)
async def update_bio(
    form: BioUpdate,
    db: Session = Depends(get_db),
    state: SessionState = Depends(require_creator),
    listings: ListingService = Depends(get_listing_service),
):
    creator = MarketplaceGateway(db).update_creator(state.creator_id, bio=form.bio)
    return listings.to_card(creator)


@router.put("/skills", response_model=CreatorCard)
async def update_skills(
    form: SkillsUpdate,
    db: Session = Depends(get_db),
    state: SessionState = Depends(require_creator),
    listings: ListingService = Depends(get_listing_service),
):
    creator = MarketplaceGateway(db).update_creator(state.creator_id, skills=form.skills)
    return listings.to_card(creator)


@router.post("/portfolio", response_model=CreatorCard, status_code=status.HTTP_201_CREATED)
async def add_portfolio_item(
    form: PortfolioItemCreate,
    db: Session = Depends(get_db),
    state: SessionState = Depends(require_creator),
    listings: ListingService = Depends(get_listing_service),
):
    creator = MarketplaceGateway(db).add_portfolio_item(state.creator_id, form)
    return listings.to_card(creator)


@router.delete("/portfolio/{item_id}", response_model=CreatorCard)
async def delete_portfolio_item(
    item_id: int,
    db: Session = Depends(get_db),
    state: SessionState = Depends(require_creator),
    listings: ListingService = Depends(get_listing_service),
):
    creator = MarketplaceGateway(db).delete_portfolio_item(state.creator_id, item_id)
    return listings.to_card(creator)


@router.post("/tags/toggle", response_model=TagToggleResponse)
async def toggle_tag(
    form: TagToggleRequest,
    db: Session = Depends(get_db),
    state: SessionState = Depends(require_creator),
    policy: TierPolicy = Depends(get_tier_policy),
):
    """
    Add or remove a purchased tag.

    Hitting the tier limit is not an error: the response has allowed=False
    and the tier limit message, and nothing is written.
    """
    gateway = MarketplaceGateway(db)
    creator = gateway.get_creator(state.creator_id)

    known_tags = {tag["label"] for tag in policy.tag_catalogue().get("tags", [])}
    if form.tag not in creator.purchased_tags and form.tag not in known_tags:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown tag: {form.tag}",
        )

    result = policy.toggle_tag(creator.purchased_tags, form.tag, creator.tier.value)
    if result.changed:
        gateway.set_purchased_tags(state.creator_id, result.tags)

    return TagToggleResponse(
        allowed=result.allowed,
        tags=result.tags,
        added=result.added,
        removed=result.removed,
        message=result.message,
    )


@router.put("/tier", response_model=CreatorCard)
async def select_tier(
    form: TierSelectRequest,
    db: Session = Depends(get_db),
    state: SessionState = Depends(require_creator),
    listings: ListingService = Depends(get_listing_service),
):
    """Switch membership tier; existing tags are kept on a downgrade"""
    creator = MarketplaceGateway(db).set_tier(state.creator_id, form.tier)
    return listings.to_card(creator)


@router.get("/invitations", response_model=List[InvitationSchema])
async def my_invitations(
    db: Session = Depends(get_db),
    state: SessionState = Depends(require_creator),
):
    return MarketplaceGateway(db).list_invitations_for_creator(state.creator_id)
