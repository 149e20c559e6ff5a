"""
Job (brief) model
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship
from datetime import datetime, date

from ..base import Base


class Job(Base):
    """Job brief posted by a client; immutable after posting"""
    __tablename__ = "jobs"
    
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    city = Column(String, nullable=False, index=True)
    required_skills = Column(JSON, nullable=False, default=list)
    description = Column(Text, nullable=False)
    budget = Column(String, nullable=False)
    company = Column(String, nullable=False)
    contact_email = Column(String, nullable=False)
    whatsapp = Column(String, nullable=True)
    posted_date = Column(Date, nullable=False, default=date.today, index=True)
    # Set when an authenticated user posted the brief, NULL for the public form
    posted_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")
