"""
Invite model for bringing households into a trip by email.
"""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Invite(BaseModel):
    """Trip invitation addressed to an email."""
    __tablename__ = "invites"

    trip_id = Column(String(32), ForeignKey("trips.id"), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    household_id = Column(String(32), ForeignKey("households.id"), nullable=True)
    code = Column(String(64), unique=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_by = Column(String(32), ForeignKey("users.id"), nullable=False)
    max_uses = Column(Integer, nullable=False, default=1)
    used = Column(Integer, nullable=False, default=0)

    # Relationships
    trip = relationship("Trip", back_populates="invites")
    household = relationship("Household")
