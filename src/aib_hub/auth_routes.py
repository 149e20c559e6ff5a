"""
Authentication API routes
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from .auth import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    AUTH_COOKIE_NAME,
    create_login_session,
    get_auth_token,
    get_current_user,
    get_password_hash,
    get_session_store,
    require_authenticated,
    revoke_login_session,
    verify_password,
)
from .db import get_db, User
from .schemas import (
    CompleteProfileRequest,
    CreatorSchema,
    LoginRequest,
    RegisterRequest,
    RegistrationResponse,
    SessionStateResponse,
    Token,
)
from .services.registration_service import RegistrationService
from .services.session_resolver import AuthEvent, Identity, SessionState, SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["authentication"])


def _set_auth_cookie(response: Response, token: str):
    response.set_cookie(
        AUTH_COOKIE_NAME,
        token,
        httponly=True,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register(
    form: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    """
    Two-step creator sign-up. When the profile step fails the account is kept,
    the user is signed in and `profile_created` is False; retry with
    POST /api/auth/complete-profile.
    """
    logger.info("Signup attempt")
    service = RegistrationService(db, get_password_hash)
    outcome = service.register(form)

    access_token = create_login_session(db, outcome.user)
    _set_auth_cookie(response, access_token)
    state = store.handle_auth_event(AuthEvent.SIGNED_IN, Identity(outcome.user.id, outcome.user.email))

    return RegistrationResponse(
        access_token=access_token,
        token_type="bearer",
        profile_created=outcome.profile_created,
        creator=outcome.creator,
        message=outcome.error,
        session=SessionStateResponse.from_state(state),
    )


@router.post("/complete-profile", response_model=CreatorSchema)
async def complete_profile(
    form: CompleteProfileRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store),
):
    """Retry the creator profile step for a signed-in account"""
    service = RegistrationService(db, get_password_hash)
    creator = service.complete_profile(current_user, form)
    store.link_creator(creator.id)
    return creator


@router.post("/login", response_model=Token)
async def login(
    form: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    """Login with email and password"""
    user = db.query(User).filter(User.email == str(form.email).lower()).first()

    if not user or not verify_password(form.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    access_token = create_login_session(db, user)
    _set_auth_cookie(response, access_token)
    state = store.handle_auth_event(AuthEvent.SIGNED_IN, Identity(user.id, user.email))

    return Token(
        access_token=access_token,
        token_type="bearer",
        session=SessionStateResponse.from_state(state),
    )


@router.post("/refresh", response_model=Token)
async def refresh(
    response: Response,
    token: Optional[str] = Depends(get_auth_token),
    state: SessionState = Depends(require_authenticated),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    """Swap the current token for a fresh one; role and creator are re-read"""
    user = db.query(User).filter(User.id == state.user_id).first()
    revoke_login_session(db, token)
    access_token = create_login_session(db, user)
    _set_auth_cookie(response, access_token)
    new_state = store.handle_auth_event(AuthEvent.TOKEN_REFRESHED, Identity(user.id, user.email))

    return Token(
        access_token=access_token,
        token_type="bearer",
        session=SessionStateResponse.from_state(new_state),
    )


@router.post("/logout", response_model=SessionStateResponse)
async def logout(
    response: Response,
    token: Optional[str] = Depends(get_auth_token),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    """Delete the live session; the token stops working immediately"""
    if token and revoke_login_session(db, token):
        logger.info("Session revoked")
    response.delete_cookie(AUTH_COOKIE_NAME)
    state = store.handle_auth_event(AuthEvent.SIGNED_OUT)
    return SessionStateResponse.from_state(state)


@router.get("/session", response_model=SessionStateResponse)
async def get_session(store: SessionStore = Depends(get_session_store)):
    """Current session state, anonymous when there is no live session"""
    return SessionStateResponse.from_state(store.state)


@router.get("/me", response_model=SessionStateResponse)
async def get_current_user_info(state: SessionState = Depends(require_authenticated)):
    """Get current authenticated user information"""
    return SessionStateResponse.from_state(state)
