"""
Creator and PortfolioItem models
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from ..base import Base


class MembershipTier(str, enum.Enum):
    """Membership tier enum"""
    BASE = "BASE"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"


class CreatorStatus(str, enum.Enum):
    """Moderation status; only APPROVED creators are public"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class PortfolioItemType(str, enum.Enum):
    IMAGE = "image"
    VIDEO = "video"
    SAMPLE = "sample"


class Creator(Base):
    """Creator profile model"""
    __tablename__ = "creators"
    
    id = Column(Integer, primary_key=True, index=True)
    linked_user_id = Column(Integer, ForeignKey("users.id"), nullable=True, unique=True, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    city = Column(String, nullable=False, index=True)
    # Lists are replaced, never mutated in place, so plain JSON change tracking is enough
    skills = Column(JSON, nullable=False, default=list)
    purchased_tags = Column(JSON, nullable=False, default=list)
    bio = Column(Text, nullable=False, default="")
    experience = Column(String, nullable=False, default="")
    profile_photo = Column(String, nullable=True)
    whatsapp = Column(String, nullable=False, default="")
    is_featured = Column(Boolean, nullable=False, default=False)
    tier = Column(String, nullable=False, default=MembershipTier.BASE.value, index=True)
    status = Column(String, nullable=False, default=CreatorStatus.PENDING.value, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    # Relationships
    portfolio = relationship(
        "PortfolioItem",
        back_populates="creator",
        cascade="all, delete-orphan",
        order_by="PortfolioItem.id",
    )
    applications = relationship("Application", back_populates="creator", cascade="all, delete-orphan")
    invitations = relationship("Invitation", back_populates="creator", cascade="all, delete-orphan")


class PortfolioItem(Base):
    """Portfolio entry owned by exactly one creator"""
    __tablename__ = "portfolio_items"
    
    id = Column(Integer, primary_key=True, index=True)
    creator_id = Column(Integer, ForeignKey("creators.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False, default=PortfolioItemType.IMAGE.value)
    url = Column(String, nullable=False)
    title = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    creator = relationship("Creator", back_populates="portfolio")
