"""
Registration Service - two-step creator sign-up

Step 1 creates the identity (user + profiles row with role CREATOR).
Step 2 creates the linked creator row. When step 2 fails the identity is
kept and step 2 can be retried alone with complete_profile().
"""
from dataclasses import dataclass
from typing import Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.models import Profile, User, UserRole
from ..exceptions import EmailAlreadyRegisteredError, GatewayError
from ..schemas import CompleteProfileRequest, CreatorSchema, RegisterRequest
from .marketplace_gateway import MarketplaceGateway

logger = logging.getLogger(__name__)

PROFILE_RETRY_MESSAGE = (
    "Your account was created but your creator profile could not be set up. "
    "Please try again from Complete Profile."
)


@dataclass
class RegistrationOutcome:
    user: User
    creator: Optional[CreatorSchema] = None
    error: Optional[str] = None

    @property
    def profile_created(self) -> bool:
        return self.creator is not None


class RegistrationService:
    """Service for creator sign-up and profile completion"""

    def __init__(self, db: Session, password_hasher):
        self.db = db
        self.gateway = MarketplaceGateway(db)
        self._hash_password = password_hasher

    def create_identity(self, form: RegisterRequest) -> User:
        """Step 1: user row with name/city metadata plus its CREATOR profile row"""
        email = str(form.email).lower()
        if self.db.query(User.id).filter(User.email == email).first() is not None:
            logger.warning("Signup failed: Email already registered")
            raise EmailAlreadyRegisteredError(email)

        user = User(
            email=email,
            hashed_password=self._hash_password(form.password),
            full_name=form.full_name,
            city=form.city,
            is_active=True,
        )
        try:
            self.db.add(user)
            self.db.flush()
            self.db.add(Profile(id=user.id, role=UserRole.CREATOR.value))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating user: {type(e).__name__}", exc_info=True)
            raise GatewayError("create account") from e

        self.db.refresh(user)
        logger.info(f"User created successfully with ID: {user.id}")
        return user

    def create_profile(self, user: User, full_name: Optional[str] = None, city: Optional[str] = None) -> CreatorSchema:
        """Step 2: linked creator row (BASE, PENDING, no skills or tags)"""
        return self.gateway.create_creator(
            user_id=user.id,
            full_name=full_name or user.full_name or user.email.split("@")[0],
            city=city or user.city or "",
            email=user.email,
        )

    def register(self, form: RegisterRequest) -> RegistrationOutcome:
        """
        Run both steps. A step 1 failure propagates; a step 2 failure is
        reported on the outcome so the caller can keep the new identity.
        """
        user = self.create_identity(form)
        try:
            creator = self.create_profile(user, form.full_name, form.city)
        except GatewayError as e:
            logger.error(f"Profile step failed for user {user.id}; identity kept for retry: {e.message}")
            return RegistrationOutcome(user=user, error=PROFILE_RETRY_MESSAGE)
        return RegistrationOutcome(user=user, creator=creator)

    def complete_profile(self, user: User, form: CompleteProfileRequest) -> CreatorSchema:
        """
        Retry step 2 for an identity without a creator row. Idempotent: when
        the row already exists it is returned unchanged.
        """
        existing_id = self.gateway.find_creator_id_for_user(user.id)
        if existing_id is not None:
            logger.info(f"Profile already complete for user {user.id}")
            return self.gateway.get_creator(existing_id)

        self.gateway.ensure_profile(user.id, UserRole.CREATOR.value)
        return self.create_profile(user, form.full_name, form.city)
