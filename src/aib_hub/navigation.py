"""
Navigation shell: client route table and role-gated access decisions
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import re

from .db.models import UserRole
from .services.session_resolver import SessionState, SessionStatus


class RouteAction(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    NOT_FOUND = "not_found"
    PENDING = "pending"  # session still loading, render nothing yet


@dataclass(frozen=True)
class Route:
    name: str
    pattern: str
    required_role: Optional[UserRole] = None

    def match(self, path: str) -> Optional[Dict[str, Any]]:
        regex = "^" + re.sub(r":(\w+)", r"(?P<\1>\\d+)", self.pattern) + "$"
        found = re.match(regex, path)
        if found is None:
            return None
        return {key: int(value) for key, value in found.groupdict().items()}


@dataclass
class RouteDecision:
    path: str
    action: RouteAction
    route: Optional[Route] = None
    redirect_to: Optional[str] = None
    reason: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)


LOGIN_PATH = "/login"
ONBOARDING_PATH = "/register"
HOME_PATH = "/"

ROUTES: List[Route] = [
    Route("home", "/"),
    Route("creators", "/creators"),
    Route("creator_detail", "/creators/:id"),
    Route("profile", "/profile", UserRole.CREATOR),
    Route("jobs", "/jobs"),
    Route("job_detail", "/jobs/:id"),
    Route("membership", "/membership"),
    Route("login", "/login"),
    Route("register", "/register"),
    Route("dashboard", "/dashboard", UserRole.CREATOR),
    Route("admin", "/admin", UserRole.ADMIN),
    Route("contact", "/contact"),
    Route("about", "/about"),
]


def _normalize(path: str) -> str:
    """Accept hash routes ('#/jobs/3'), drop query strings and trailing slashes"""
    path = path or HOME_PATH
    if "#" in path:
        path = path.split("#", 1)[1]
    path = path.split("?", 1)[0] or HOME_PATH
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/")
    return path


def match_route(path: str) -> Tuple[Optional[Route], Dict[str, Any]]:
    normalized = _normalize(path)
    for route in ROUTES:
        params = route.match(normalized)
        if params is not None:
            return route, params
    return None, {}


def resolve_route(path: str, state: SessionState) -> RouteDecision:
    """
    Decide what the shell shows for a path under the current session.

    Protected routes redirect to /login unless the session holds the exact
    required role. A CREATOR without a linked creator row is sent to
    /register to finish onboarding instead of being let through.
    """
    normalized = _normalize(path)
    route, params = match_route(normalized)
    if route is None:
        return RouteDecision(
            path=normalized,
            action=RouteAction.NOT_FOUND,
            redirect_to=HOME_PATH,
            reason="No such page",
        )

    if route.required_role is None:
        return RouteDecision(path=normalized, action=RouteAction.ALLOW, route=route, params=params)

    if state.status == SessionStatus.LOADING:
        return RouteDecision(path=normalized, action=RouteAction.PENDING, route=route, params=params)

    if not state.has_role(route.required_role):
        return RouteDecision(
            path=normalized,
            action=RouteAction.REDIRECT,
            route=route,
            redirect_to=LOGIN_PATH,
            reason=f"{route.required_role.value} role required",
        )

    if route.required_role == UserRole.CREATOR and state.needs_onboarding:
        return RouteDecision(
            path=normalized,
            action=RouteAction.REDIRECT,
            route=route,
            redirect_to=ONBOARDING_PATH,
            reason="Creator profile not set up",
        )

    return RouteDecision(path=normalized, action=RouteAction.ALLOW, route=route, params=params)
