"""
Tests for the session store and role derivation
"""
import logging
import pytest

from aib_hub.db.models import UserRole
from aib_hub.exceptions import GatewayError
from aib_hub.services.session_resolver import (
    AuthEvent,
    Identity,
    SessionStatus,
    SessionStore,
    derive_role,
)

ALICE = Identity(user_id=1, email="alice@example.com")
BOB = Identity(user_id=2, email="bob@example.com")


class FakeProfiles:
    """Profile lookup backed by a dict: user_id -> (role, creator_id)"""

    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def __call__(self, user_id):
        self.calls.append(user_id)
        return self.rows.get(user_id, (None, None))


class TestDeriveRole:
    """Test role mapping from the profiles row"""

    def test_known_roles(self):
        assert derive_role("ADMIN") == UserRole.ADMIN
        assert derive_role("CREATOR") == UserRole.CREATOR
        assert derive_role("VISITOR") == UserRole.VISITOR

    def test_case_and_whitespace_tolerant(self):
        assert derive_role(" creator ") == UserRole.CREATOR

    def test_missing_role_never_grants_creator(self, caplog):
        with caplog.at_level(logging.WARNING):
            role = derive_role(None)

        assert role == UserRole.VISITOR
        assert "not recognized" in caplog.text

    def test_unrecognized_role_defaults_to_visitor(self):
        assert derive_role("SUPERUSER") == UserRole.VISITOR

    def test_reject_policy(self):
        assert derive_role("SUPERUSER", "reject") is None
        assert derive_role("ADMIN", "reject") == UserRole.ADMIN

    def test_invalid_policy(self):
        with pytest.raises(ValueError):
            derive_role("ADMIN", "creator")


class TestSessionStoreLifecycle:
    """Test loading -> anonymous/authenticated -> closed"""

    def setup_method(self):
        self.profiles = FakeProfiles({1: ("CREATOR", 10), 2: ("ADMIN", None)})
        self.store = SessionStore(self.profiles)

    def test_starts_loading(self):
        assert self.store.state.status == SessionStatus.LOADING

    def test_probe_without_identity(self):
        state = self.store.probe(None)

        assert state.status == SessionStatus.ANONYMOUS
        assert state.role is None
        assert self.profiles.calls == []

    def test_probe_with_identity(self):
        state = self.store.probe(ALICE)

        assert state.is_authenticated
        assert state.role == UserRole.CREATOR
        assert state.creator_id == 10
        assert not state.needs_onboarding

    def test_sign_out_clears_identity(self):
        self.store.probe(ALICE)

        state = self.store.handle_auth_event(AuthEvent.SIGNED_OUT)

        assert state.status == SessionStatus.ANONYMOUS
        assert state.user_id is None
        assert state.role is None
        assert state.creator_id is None

    def test_sign_in_switches_user(self):
        self.store.probe(ALICE)

        state = self.store.handle_auth_event(AuthEvent.SIGNED_IN, BOB)

        assert state.user_id == 2
        assert state.role == UserRole.ADMIN
        assert state.creator_id is None

    def test_token_refresh_rereads_profile(self):
        self.store.probe(ALICE)
        self.profiles.rows[1] = ("CREATOR", 11)

        state = self.store.handle_auth_event(AuthEvent.TOKEN_REFRESHED, ALICE)

        assert state.creator_id == 11

    def test_creator_without_row_needs_onboarding(self):
        store = SessionStore(FakeProfiles({1: ("CREATOR", None)}))

        state = store.probe(ALICE)

        assert state.needs_onboarding
        assert store.link_creator(42).creator_id == 42
        assert not store.state.needs_onboarding

    def test_reject_policy_leaves_session_anonymous(self):
        store = SessionStore(FakeProfiles({1: ("OWNER", 10)}), unknown_role_policy="reject")

        assert store.probe(ALICE).status == SessionStatus.ANONYMOUS

    def test_teardown_ignores_later_events(self):
        self.store.probe(ALICE)
        self.store.teardown()

        state = self.store.handle_auth_event(AuthEvent.SIGNED_IN, BOB)

        assert state.status == SessionStatus.CLOSED
        assert self.profiles.calls == [1]


class TestStaleLookups:
    """A lookup overtaken by sign-out or a newer lookup is discarded"""

    def setup_method(self):
        self.store = SessionStore(FakeProfiles({}))

    def test_lookup_completing_after_sign_out_is_discarded(self):
        generation = self.store.begin_lookup()
        self.store.sign_out()

        applied = self.store.complete_lookup(generation, ALICE, "CREATOR", 10)

        assert not applied
        assert self.store.state.status == SessionStatus.ANONYMOUS
        assert self.store.state.creator_id is None

    def test_older_lookup_loses_to_newer(self):
        first = self.store.begin_lookup()
        second = self.store.begin_lookup()

        assert self.store.complete_lookup(second, BOB, "ADMIN", None)
        assert not self.store.complete_lookup(first, ALICE, "CREATOR", 10)
        assert self.store.state.user_id == 2

    def test_lookup_after_teardown_is_discarded(self):
        generation = self.store.begin_lookup()
        self.store.teardown()

        assert not self.store.complete_lookup(generation, ALICE, "CREATOR", 10)
        assert self.store.state.status == SessionStatus.CLOSED


class TestSubscribers:
    """Test change notifications"""

    def test_listener_sees_every_transition(self):
        store = SessionStore(FakeProfiles({1: ("CREATOR", 10)}))
        seen = []
        store.subscribe(lambda state: seen.append(state.status))

        store.probe(ALICE)
        store.sign_out()

        assert seen == [SessionStatus.AUTHENTICATED, SessionStatus.ANONYMOUS]

    def test_identity_switch_passes_through_loading(self):
        store = SessionStore(FakeProfiles({1: ("CREATOR", 10), 2: ("CREATOR", 20)}))
        store.probe(ALICE)
        seen = []
        store.subscribe(lambda state: seen.append((state.status, state.user_id)))

        store.handle_auth_event(AuthEvent.SIGNED_IN, BOB)

        assert seen == [(SessionStatus.LOADING, None), (SessionStatus.AUTHENTICATED, 2)]

    def test_unsubscribe(self):
        store = SessionStore(FakeProfiles({}))
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()

        store.probe(None)

        assert seen == []

    def test_lookup_failure_leaves_session_anonymous(self):
        def failing_lookup(user_id):
            raise GatewayError("load profile")

        store = SessionStore(failing_lookup)

        with pytest.raises(GatewayError):
            store.probe(ALICE)
        assert store.state.status == SessionStatus.ANONYMOUS
