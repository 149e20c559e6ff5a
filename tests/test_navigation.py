"""
Tests for the navigation shell route table and access decisions
"""
from aib_hub.db.models import UserRole
from aib_hub.navigation import ROUTES, RouteAction, match_route, resolve_route
from aib_hub.services.session_resolver import SessionState, SessionStatus

ANONYMOUS = SessionState(SessionStatus.ANONYMOUS)
LOADING = SessionState(SessionStatus.LOADING)
CREATOR = SessionState(SessionStatus.AUTHENTICATED, user_id=1, email="c@example.com", role=UserRole.CREATOR, creator_id=7)
ONBOARDING = SessionState(SessionStatus.AUTHENTICATED, user_id=2, email="n@example.com", role=UserRole.CREATOR)
ADMIN = SessionState(SessionStatus.AUTHENTICATED, user_id=3, email="a@example.com", role=UserRole.ADMIN)
VISITOR = SessionState(SessionStatus.AUTHENTICATED, user_id=4, email="v@example.com", role=UserRole.VISITOR)


class TestRouteTable:
    """Test route matching"""

    def test_thirteen_routes(self):
        assert len(ROUTES) == 13

    def test_detail_routes_capture_id(self):
        route, params = match_route("/creators/42")

        assert route.name == "creator_detail"
        assert params == {"id": 42}

    def test_hash_and_trailing_slash(self):
        route, params = match_route("#/jobs/3/")

        assert route.name == "job_detail"
        assert params == {"id": 3}

    def test_query_string_ignored(self):
        route, _ = match_route("/creators?city=Indore")

        assert route.name == "creators"

    def test_unknown_path(self):
        route, _ = match_route("/creators/abc")

        assert route is None


class TestResolveRoute:
    """Test role gating"""

    def test_public_routes_allowed_for_anyone(self):
        for path in ["/", "/creators", "/jobs/1", "/membership", "/contact", "/about", "/login", "/register"]:
            assert resolve_route(path, ANONYMOUS).action == RouteAction.ALLOW

    def test_creator_routes_redirect_anonymous_to_login(self):
        for path in ["/profile", "/dashboard"]:
            decision = resolve_route(path, ANONYMOUS)

            assert decision.action == RouteAction.REDIRECT
            assert decision.redirect_to == "/login"

    def test_creator_routes_allowed_for_creator(self):
        assert resolve_route("/dashboard", CREATOR).action == RouteAction.ALLOW
        assert resolve_route("/profile", CREATOR).action == RouteAction.ALLOW

    def test_creator_without_profile_sent_to_onboarding(self):
        decision = resolve_route("/dashboard", ONBOARDING)

        assert decision.action == RouteAction.REDIRECT
        assert decision.redirect_to == "/register"

    def test_admin_route(self):
        assert resolve_route("/admin", ADMIN).action == RouteAction.ALLOW
        assert resolve_route("/admin", CREATOR).redirect_to == "/login"

    def test_admin_is_not_a_creator(self):
        assert resolve_route("/profile", ADMIN).redirect_to == "/login"

    def test_visitor_role_gets_nothing_protected(self):
        for path in ["/profile", "/dashboard", "/admin"]:
            assert resolve_route(path, VISITOR).action == RouteAction.REDIRECT

    def test_loading_session_waits(self):
        assert resolve_route("/dashboard", LOADING).action == RouteAction.PENDING

    def test_unknown_path_is_not_found_with_escape_hatch(self):
        decision = resolve_route("/nowhere", CREATOR)

        assert decision.action == RouteAction.NOT_FOUND
        assert decision.redirect_to == "/"
