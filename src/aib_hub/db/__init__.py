"""
Database module for Aib HUB
"""
from .engine import engine, SessionLocal, get_db, init_db
from .base import Base
from .models import (
    User,
    UserSession,
    Profile,
    UserRole,
    Creator,
    PortfolioItem,
    MembershipTier,
    CreatorStatus,
    PortfolioItemType,
    Job,
    Application,
    Invitation,
    ContactMessage,
    ApplicationStatus,
    InvitationStatus,
)

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "init_db",
    "Base",
    "User",
    "UserSession",
    "Profile",
    "UserRole",
    "Creator",
    "PortfolioItem",
    "MembershipTier",
    "CreatorStatus",
    "PortfolioItemType",
    "Job",
    "Application",
    "Invitation",
    "ContactMessage",
    "ApplicationStatus",
    "InvitationStatus",
]
