"""
Household model: the billing unit that participates in trips.
"""
from sqlalchemy import Column, String, Float, ForeignKey, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class HouseholdRole(str, enum.Enum):
    """Household membership role enumeration."""
    OWNER = "OWNER"
    MEMBER = "MEMBER"


class Household(BaseModel):
    """Household model grouping one or more users."""
    __tablename__ = "households"

    display_name = Column(String(200), nullable=False)

    # Relationships
    members = relationship("HouseholdMember", back_populates="household", cascade="all, delete-orphan")
    trip_participations = relationship("TripParticipant", back_populates="household", cascade="all, delete-orphan")


class HouseholdMember(BaseModel):
    """Junction table for Household and User with a personal cost weight."""
    __tablename__ = "household_members"

    household_id = Column(String(32), ForeignKey("households.id"), nullable=False, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    role = Column(SQLEnum(HouseholdRole), default=HouseholdRole.MEMBER, nullable=False)
    weight = Column(Float, nullable=True)  # 1.0 = adult, 0.5 = child

    # Relationships
    household = relationship("Household", back_populates="members")
    user = relationship("User", back_populates="household_memberships")

    __table_args__ = (
        UniqueConstraint('user_id', 'household_id', name='uq_user_household'),
    )
