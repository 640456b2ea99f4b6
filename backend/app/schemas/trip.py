"""
Pydantic schemas for Trip entity.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import date, datetime


class TripCreate(BaseModel):
    """Schema for trip creation."""
    name: str = Field(min_length=1)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    user_id: str  # Creator, becomes trip admin


class TripResponse(BaseModel):
    """Schema for trip response."""
    id: str
    name: str
    currency: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TripParticipantResponse(BaseModel):
    """Schema for trip participant response."""
    id: str
    household_id: str
    household_name: str
    weight: float


class TripDetailResponse(TripResponse):
    """Schema for detailed trip response with participants."""
    admin_ids: List[str] = []
    participants: List[TripParticipantResponse] = []
    receipt_count: int = 0


class ParticipantCreate(BaseModel):
    """Schema for adding a household to a trip."""
    household_id: str = Field(min_length=1)
    weight: float = Field(default=1.0, ge=0, le=2)


class MemberCreate(BaseModel):
    """Schema for adding a person to a participating household."""
    household_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    email: EmailStr
    weight: float = Field(default=1.0, ge=0, le=10)
