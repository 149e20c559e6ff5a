"""
Database models for Aib HUB
"""
from .user import User, UserSession, Profile, UserRole
from .creator import Creator, PortfolioItem, MembershipTier, CreatorStatus, PortfolioItemType
from .job import Job
from .engagement import (
    Application,
    Invitation,
    ContactMessage,
    ApplicationStatus,
    InvitationStatus,
)

__all__ = [
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
