"""
Pydantic schemas for marketplace entities and form submissions
Entity shapes are read from ORM rows; form models validate required fields before any write
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Any, Dict, List, Optional, Union
from datetime import date, datetime

from .db.models import CreatorStatus, MembershipTier, PortfolioItemType


def _required_text(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{field_name} is required")
    return str(value).strip()


def split_skills(value: Union[str, List[str], None]) -> List[str]:
    """Split a comma separated skills field into a trimmed list without blanks"""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)) or not all(isinstance(skill, str) for skill in value):
        raise ValueError("skills must be text")
    return [skill.strip() for skill in value if skill.strip()]


# ---------------------------------------------------------------------------
# Entity shapes
# ---------------------------------------------------------------------------

class PortfolioItemSchema(BaseModel):
    id: int
    type: PortfolioItemType
    url: str
    title: str

    class Config:
        from_attributes = True


class CreatorSchema(BaseModel):
    """Creator profile as stored"""
    id: int
    linked_user_id: Optional[int] = None
    full_name: str
    email: Optional[str] = None
    city: str
    skills: List[str] = []
    purchased_tags: List[str] = []
    bio: str = ""
    experience: str = ""
    profile_photo: Optional[str] = None
    portfolio: List[PortfolioItemSchema] = []
    whatsapp: str = ""
    is_featured: bool = False
    tier: MembershipTier = MembershipTier.BASE
    status: CreatorStatus = CreatorStatus.PENDING

    class Config:
        from_attributes = True

    @field_validator("skills", "purchased_tags", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class CreatorCard(CreatorSchema):
    """Creator with display fields derived from the tier"""
    is_premium: bool = False
    badge: Optional[str] = None
    card_tags: List[str] = []
    whatsapp_link: Optional[str] = None


class JobSchema(BaseModel):
    id: int
    title: str
    city: str
    required_skills: List[str] = []
    description: str
    budget: str
    company: str
    contact_email: str
    whatsapp: Optional[str] = None
    posted_date: date
    whatsapp_link: Optional[str] = None

    class Config:
        from_attributes = True


class ApplicationSchema(BaseModel):
    id: int
    job_id: int
    creator_id: int
    cover_letter: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class InvitationSchema(BaseModel):
    id: int
    creator_id: int
    sender_email: str
    job_title: str
    job_budget: str
    message: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class ContactMessageSchema(BaseModel):
    id: int
    name: str
    email: str
    message: str
    created_at: datetime

    class Config:
        from_attributes = True


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, description="At least 8 characters")
    full_name: str
    city: str

    @field_validator("full_name", "city")
    @classmethod
    def required(cls, v, info):
        return _required_text(v, info.field_name)


class CompleteProfileRequest(BaseModel):
    """Retry of the profile step; name and city default to the sign-up metadata"""
    full_name: Optional[str] = None
    city: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class SessionStateResponse(BaseModel):
    status: str
    user_id: Optional[int] = None
    email: Optional[str] = None
    role: Optional[str] = None
    creator_id: Optional[int] = None
    needs_onboarding: bool = False

    @classmethod
    def from_state(cls, state) -> "SessionStateResponse":
        return cls(
            status=state.status.value,
            user_id=state.user_id,
            email=state.email,
            role=state.role.value if state.role else None,
            creator_id=state.creator_id,
            needs_onboarding=state.needs_onboarding,
        )


class Token(BaseModel):
    access_token: str
    token_type: str
    session: SessionStateResponse


class RegistrationResponse(BaseModel):
    """
    Result of sign-up. When the profile step failed, `profile_created` is False,
    `creator` is None and the user should retry via complete-profile.
    """
    access_token: str
    token_type: str
    profile_created: bool
    creator: Optional[CreatorSchema] = None
    message: Optional[str] = None
    session: SessionStateResponse


# ---------------------------------------------------------------------------
# Workflow forms
# ---------------------------------------------------------------------------

class JobCreate(BaseModel):
    """Public "post a brief" form"""
    title: str
    city: str
    budget: str
    skills: List[str]
    description: str
    contact_email: EmailStr
    company: Optional[str] = None
    whatsapp: Optional[str] = None

    @field_validator("title", "city", "budget", "description")
    @classmethod
    def required(cls, v, info):
        return _required_text(v, info.field_name)

    @field_validator("skills", mode="before")
    @classmethod
    def parse_skills(cls, v):
        skills = split_skills(v)
        if not skills:
            raise ValueError("skills is required")
        return skills

    @field_validator("company", "whatsapp")
    @classmethod
    def blank_as_none(cls, v):
        if v is None or not v.strip():
            return None
        return v.strip()


class InvitationCreate(BaseModel):
    creator_id: int
    sender_email: EmailStr
    job_title: str
    job_budget: str
    message: str = ""

    @field_validator("job_title", "job_budget")
    @classmethod
    def required(cls, v, info):
        return _required_text(v, info.field_name)


class ApplicationCreate(BaseModel):
    job_id: int
    cover_letter: str = ""


class ContactMessageCreate(BaseModel):
    name: str
    email: EmailStr
    message: str

    @field_validator("name", "message")
    @classmethod
    def required(cls, v, info):
        return _required_text(v, info.field_name)


# ---------------------------------------------------------------------------
# Self-service profile editing
# ---------------------------------------------------------------------------

class ProfileInfoUpdate(BaseModel):
    full_name: Optional[str] = None
    city: Optional[str] = None
    whatsapp: Optional[str] = None
    profile_photo: Optional[str] = None
    experience: Optional[str] = None

    @field_validator("full_name", "city")
    @classmethod
    def not_blank(cls, v, info):
        if v is None:
            return v
        return _required_text(v, info.field_name)


class BioUpdate(BaseModel):
    bio: str


class SkillsUpdate(BaseModel):
    skills: List[str]

    @field_validator("skills", mode="before")
    @classmethod
    def parse_skills(cls, v):
        return split_skills(v)


class PortfolioItemCreate(BaseModel):
    type: PortfolioItemType = PortfolioItemType.IMAGE
    url: str
    title: str

    @field_validator("url", "title")
    @classmethod
    def required(cls, v, info):
        return _required_text(v, info.field_name)


class TagToggleRequest(BaseModel):
    tag: str

    @field_validator("tag")
    @classmethod
    def required(cls, v, info):
        return _required_text(v, info.field_name)


class TagToggleResponse(BaseModel):
    allowed: bool
    tags: List[str]
    added: Optional[str] = None
    removed: Optional[str] = None
    message: Optional[str] = None


class TierSelectRequest(BaseModel):
    tier: MembershipTier


class CreatorStatusUpdate(BaseModel):
    status: CreatorStatus


# ---------------------------------------------------------------------------
# Listings and catalogues
# ---------------------------------------------------------------------------

class CreatorListResponse(BaseModel):
    creators: List[CreatorCard]
    total: int
    filters: Dict[str, Optional[str]]
    show_reset_filters: bool


class JobListResponse(BaseModel):
    jobs: List[JobSchema]
    total: int
    filters: Dict[str, Optional[str]]
    show_reset_filters: bool


class HomeFeedResponse(BaseModel):
    featured_creators: List[CreatorCard]
    latest_jobs: List[JobSchema]


class TierResponse(BaseModel):
    name: str
    display_name: str
    rank: int
    tag_quota: int
    badge: Optional[str] = None
    price: Optional[str] = None
    features: List[str] = []
    is_premium: bool


class MembershipResponse(BaseModel):
    tiers: List[TierResponse]
    tag_catalogue: Dict[str, Any]


class RouteDecisionResponse(BaseModel):
    path: str
    action: str
    route: Optional[str] = None
    redirect_to: Optional[str] = None
    reason: Optional[str] = None
    params: Dict[str, Any] = {}
