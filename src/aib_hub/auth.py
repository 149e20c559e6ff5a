"""
Authentication utilities, JWT token handling and session dependencies
"""
import hashlib
import logging
import uuid
from datetime import datetime, timedelta
from typing import Generator, Optional

import bcrypt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from .config import config
from .db import get_db, User, UserSession, UserRole
from .exceptions import ProfileIncompleteError
from .logging_config import bind_actor
from .services.marketplace_gateway import MarketplaceGateway
from .services.session_resolver import Identity, SessionState, SessionStatus, SessionStore

logger = logging.getLogger(__name__)

# Security configuration
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = config.ACCESS_TOKEN_EXPIRE_MINUTES

# Bcrypt cost factor: each increment doubles hashing time (12 ~ 300ms)
BCRYPT_ROUNDS = config.BCRYPT_ROUNDS

http_bearer = HTTPBearer(auto_error=False)

AUTH_COOKIE_NAME = "auth_token"


def _password_bytes(password: str) -> bytes:
    """
    Bcrypt only reads the first 72 bytes, so longer passwords are hashed with
    SHA256 first (the 64-char hex digest fits under the limit).
    """
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > 72:
        return hashlib.sha256(password_bytes).hexdigest().encode("utf-8")
    return password_bytes


def get_password_hash(password: str) -> str:
    """Hash a password, handling bcrypt's 72-byte limit"""
    if not password:
        raise ValueError("Password cannot be empty")
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError as e:
        # Malformed stored hash
        logger.warning(f"Password verification failed: {type(e).__name__}")
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token

    Args:
        data: Dictionary with user data (must include 'sub' - user ID as string)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({
        "exp": expire,
        "jti": str(uuid.uuid4()),  # Unique token identifier
        "iat": datetime.utcnow(),
    })

    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Verify and decode a JWT token"""
    try:
        return jwt.decode(token, config.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning("Token verification failed: Token has expired")
        return None
    except JWTError as e:
        logger.warning(f"Token verification failed: {type(e).__name__}")
        return None


def token_hash(token: str) -> str:
    """Session rows store a SHA256 of the token, never the token itself"""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_login_session(db: Session, user: User) -> str:
    """
    Issue an access token and record the live session for it.
    Expired sessions of the same user are pruned on the way.
    """
    expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(data={"sub": str(user.id)}, expires_delta=expires_delta)

    db.query(UserSession).filter(
        UserSession.user_id == user.id,
        UserSession.expires_at < datetime.utcnow(),
    ).delete(synchronize_session=False)
    db.add(UserSession(
        user_id=user.id,
        token_hash=token_hash(access_token),
        expires_at=datetime.utcnow() + expires_delta,
    ))
    db.commit()
    logger.info(f"Session created for user ID: {user.id}")
    return access_token


def revoke_login_session(db: Session, token: str) -> bool:
    """Delete the session row for a token; returns whether one existed"""
    deleted = db.query(UserSession).filter(UserSession.token_hash == token_hash(token)).delete(
        synchronize_session=False
    )
    db.commit()
    return deleted > 0


def get_auth_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
) -> Optional[str]:
    """
    Extract authentication token from Authorization header or cookie.
    Returns None if no token is found.
    """
    if credentials and credentials.credentials:
        return credentials.credentials.strip() or None

    cookie_token = request.cookies.get(AUTH_COOKIE_NAME)
    if cookie_token:
        logger.debug("Using token from cookie (no Authorization header present)")
        return cookie_token.strip() or None
    return None


def resolve_identity(db: Session, token: Optional[str]) -> Optional[Identity]:
    """
    Identity behind a token, or None when the token is missing, invalid,
    expired, signed out, or belongs to an inactive account.
    """
    if not token:
        return None

    payload = verify_token(token)
    if payload is None:
        return None

    # JWT 'sub' claim is a string
    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        logger.warning("Authentication failed: Invalid user ID format in token")
        return None

    live_session = db.query(UserSession).filter(
        UserSession.token_hash == token_hash(token),
        UserSession.expires_at > datetime.utcnow(),
    ).first()
    if live_session is None:
        logger.info(f"Token for user {user_id} has no live session (signed out or expired)")
        return None

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        logger.warning(f"Authentication failed: User {user_id} missing or inactive")
        return None

    return Identity(user_id=user.id, email=user.email)


def _log_actor(state: SessionState):
    if state.status in (SessionStatus.AUTHENTICATED, SessionStatus.ANONYMOUS):
        bind_actor(state.user_id, state.role.value if state.role else None)


def get_session_store(
    token: Optional[str] = Depends(get_auth_token),
    db: Session = Depends(get_db),
) -> Generator[SessionStore, None, None]:
    """
    Per-request session store, probed with the request's token.
    Use as FastAPI dependency: store: SessionStore = Depends(get_session_store)
    """
    gateway = MarketplaceGateway(db)

    def lookup(user_id: int):
        return gateway.get_profile_role(user_id), gateway.find_creator_id_for_user(user_id)

    store = SessionStore(lookup, unknown_role_policy=config.UNKNOWN_ROLE_POLICY)
    store.subscribe(_log_actor)
    store.probe(resolve_identity(db, token))
    try:
        yield store
    finally:
        store.teardown()


def get_session_state(store: SessionStore = Depends(get_session_store)) -> SessionState:
    return store.state


def require_authenticated(state: SessionState = Depends(get_session_state)) -> SessionState:
    if not state.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required. Please log in.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return state


def require_creator(state: SessionState = Depends(require_authenticated)) -> SessionState:
    """Authenticated CREATOR with a linked creator row"""
    if state.role != UserRole.CREATOR:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Creator account required",
        )
    if state.creator_id is None:
        raise ProfileIncompleteError(state.user_id)
    return state


def require_admin(state: SessionState = Depends(require_authenticated)) -> SessionState:
    if state.role != UserRole.ADMIN:
        logger.warning(f"Admin access denied for user {state.user_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return state


def get_current_user(
    state: SessionState = Depends(require_authenticated),
    db: Session = Depends(get_db),
) -> User:
    """Current authenticated user row"""
    user = db.query(User).filter(User.id == state.user_id).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account not found. Please log in again.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
