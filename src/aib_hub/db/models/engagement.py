"""
Application, Invitation and ContactMessage models
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from ..base import Base


class ApplicationStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class InvitationStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class Application(Base):
    """Creator-initiated response to a job"""
    __tablename__ = "applications"
    
    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    creator_id = Column(Integer, ForeignKey("creators.id", ondelete="CASCADE"), nullable=False, index=True)
    cover_letter = Column(Text, nullable=False, default="")
    status = Column(String, nullable=False, default=ApplicationStatus.PENDING.value)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    # One application per creator per job, enforced by the datastore
    __table_args__ = (
        UniqueConstraint("job_id", "creator_id", name="uq_applications_job_creator"),
    )
    
    job = relationship("Job", back_populates="applications")
    creator = relationship("Creator", back_populates="applications")


class Invitation(Base):
    """Client-initiated outreach to a specific creator"""
    __tablename__ = "invitations"
    
    id = Column(Integer, primary_key=True, index=True)
    creator_id = Column(Integer, ForeignKey("creators.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_email = Column(String, nullable=False)
    job_title = Column(String, nullable=False)
    job_budget = Column(String, nullable=False)
    message = Column(Text, nullable=False, default="")
    status = Column(String, nullable=False, default=InvitationStatus.PENDING.value)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    creator = relationship("Creator", back_populates="invitations")


class ContactMessage(Base):
    """Support message from the public contact form"""
    __tablename__ = "contact_messages"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
