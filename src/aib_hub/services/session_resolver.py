"""
Session Resolver - current actor identity, role and linked creator

SessionStore is an explicit observable store with a lifecycle:
loading -> anonymous | authenticated -> closed (teardown).
One store is built per request by the auth dependencies; nothing here is
module-global.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple
import logging

from ..db.models import UserRole

logger = logging.getLogger(__name__)

# (raw role from the profiles row, linked creator id)
ProfileLookup = Callable[[int], Tuple[Optional[str], Optional[int]]]
Listener = Callable[["SessionState"], None]

UNKNOWN_ROLE_POLICIES = ("visitor", "reject")


class SessionStatus(str, Enum):
    LOADING = "loading"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    CLOSED = "closed"


class AuthEvent(str, Enum):
    """Auth-state changes reported by the authentication layer"""
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


@dataclass(frozen=True)
class Identity:
    user_id: int
    email: str


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus
    user_id: Optional[int] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None
    creator_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.status == SessionStatus.AUTHENTICATED

    @property
    def needs_onboarding(self) -> bool:
        """Creator identity without a linked creator row"""
        return self.is_authenticated and self.role == UserRole.CREATOR and self.creator_id is None

    def has_role(self, role: UserRole) -> bool:
        return self.is_authenticated and self.role == role


LOADING = SessionState(SessionStatus.LOADING)
ANONYMOUS = SessionState(SessionStatus.ANONYMOUS)
CLOSED = SessionState(SessionStatus.CLOSED)


def derive_role(raw_role: Optional[str], unknown_role_policy: str = "visitor") -> Optional[UserRole]:
    """
    Map the profiles.role value to a UserRole.

    ADMIN, CREATOR and VISITOR are recognized (case-insensitive). A missing or
    unrecognized value never grants CREATOR: under the 'visitor' policy it
    resolves to VISITOR, under 'reject' it resolves to None and the session is
    treated as anonymous. Both cases are logged.
    """
    if unknown_role_policy not in UNKNOWN_ROLE_POLICIES:
        raise ValueError(f"Unknown role policy: {unknown_role_policy}")

    value = (raw_role or "").strip().upper()
    try:
        return UserRole(value)
    except ValueError:
        pass

    shown = repr(raw_role) if raw_role else "missing"
    if unknown_role_policy == "reject":
        logger.warning(f"Profile role {shown} not recognized, session rejected")
        return None

    logger.warning(f"Profile role {shown} not recognized, defaulting to {UserRole.VISITOR.value}")
    return UserRole.VISITOR


class SessionStore:
    """
    Observable session state.

    Every profile lookup is tagged with a generation number. Signing out,
    starting a newer lookup or tearing the store down bumps the generation,
    so a lookup that completes afterwards is discarded instead of writing a
    stale identity back.
    """

    def __init__(self, lookup: ProfileLookup, unknown_role_policy: str = "visitor"):
        self._lookup = lookup
        self._unknown_role_policy = unknown_role_policy
        self._state = LOADING
        self._listeners: List[Listener] = []
        self._generation = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state.status == SessionStatus.CLOSED

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with every new state; returns an unsubscribe callable"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: SessionState):
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def probe(self, identity: Optional[Identity]) -> SessionState:
        """Initial session probe at startup"""
        if identity is None:
            self._set_state(ANONYMOUS)
            return self._state
        return self._resolve(identity)

    def handle_auth_event(self, event: AuthEvent, identity: Optional[Identity] = None) -> SessionState:
        if self.closed:
            logger.debug(f"Ignoring {event.value} on a closed session store")
            return self._state

        if event == AuthEvent.SIGNED_OUT or identity is None:
            return self.sign_out()
        return self._resolve(identity)

    def _resolve(self, identity: Identity) -> SessionState:
        # A different user must not be observable under the previous identity
        if self._state.status != SessionStatus.LOADING and self._state.user_id != identity.user_id:
            self._set_state(LOADING)

        generation = self.begin_lookup()
        try:
            raw_role, creator_id = self._lookup(identity.user_id)
        except Exception:
            if generation == self._generation and not self.closed:
                self._set_state(ANONYMOUS)
            raise
        self.complete_lookup(generation, identity, raw_role, creator_id)
        return self._state

    def begin_lookup(self) -> int:
        """Start a profile lookup; returns the generation to hand to complete_lookup"""
        self._generation += 1
        return self._generation

    def complete_lookup(
        self,
        generation: int,
        identity: Identity,
        raw_role: Optional[str],
        creator_id: Optional[int],
    ) -> bool:
        """Apply a lookup result unless it has been superseded; returns whether it was applied"""
        if self.closed or generation != self._generation:
            logger.debug(f"Discarding stale profile lookup for user {identity.user_id}")
            return False

        role = derive_role(raw_role, self._unknown_role_policy)
        if role is None:
            self._set_state(ANONYMOUS)
            return True

        self._set_state(SessionState(
            status=SessionStatus.AUTHENTICATED,
            user_id=identity.user_id,
            email=identity.email,
            role=role,
            creator_id=creator_id,
        ))
        return True

    def sign_out(self) -> SessionState:
        """Clear identity, role and creator id synchronously; in-flight lookups are invalidated"""
        if self.closed:
            return self._state
        self._generation += 1
        self._set_state(ANONYMOUS)
        return self._state

    def link_creator(self, creator_id: int) -> SessionState:
        """Record a creator row created during this session (onboarding completed)"""
        if self._state.is_authenticated:
            self._set_state(replace(self._state, creator_id=creator_id))
        return self._state

    def teardown(self):
        self._generation += 1
        self._set_state(CLOSED)
        self._listeners.clear()
