"""
Membership routes: tier catalogue and navigation shell decisions
"""
from fastapi import APIRouter, Depends, Query
from typing import List

from .auth import get_session_state
from .navigation import ROUTES, resolve_route
from .schemas import MembershipResponse, RouteDecisionResponse, TierResponse
from .services.session_resolver import SessionState
from .services.tier_policy import TierPolicy, get_tier_policy

router = APIRouter(prefix="/api", tags=["membership"])


@router.get("/membership", response_model=MembershipResponse)
async def membership(policy: TierPolicy = Depends(get_tier_policy)):
    """Tiers with price, features, tag quota and badge, plus the skill tag catalogue"""
    tiers = [
        TierResponse(
            name=rules.name,
            display_name=rules.display_name,
            rank=rules.rank,
            tag_quota=rules.tag_quota,
            badge=rules.badge,
            price=rules.price,
            features=rules.features,
            is_premium=policy.is_premium(rules.name),
        )
        for rules in policy.list_tiers()
    ]
    return MembershipResponse(tiers=tiers, tag_catalogue=policy.tag_catalogue())


@router.get("/navigation/routes")
async def list_routes() -> List[dict]:
    return [
        {
            "name": route.name,
            "path": route.pattern,
            "required_role": route.required_role.value if route.required_role else None,
        }
        for route in ROUTES
    ]


@router.get("/navigation/resolve", response_model=RouteDecisionResponse)
async def resolve(
    path: str = Query("/", description="Client route, e.g. /dashboard or #/creators/3"),
    state: SessionState = Depends(get_session_state),
):
    """What the shell should do with `path` for the caller's session"""
    decision = resolve_route(path, state)
    return RouteDecisionResponse(
        path=decision.path,
        action=decision.action.value,
        route=decision.route.name if decision.route else None,
        redirect_to=decision.redirect_to,
        reason=decision.reason,
        params=decision.params,
    )
