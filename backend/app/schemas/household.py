"""
Pydantic schemas for Household entity.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from app.models.household import HouseholdRole


class HouseholdCreate(BaseModel):
    """Schema for household creation."""
    display_name: str = Field(min_length=1)
    user_id: str  # Owner user ID


class HouseholdMemberResponse(BaseModel):
    """Schema for household member response."""
    user_id: str
    name: Optional[str] = None
    email: str
    role: HouseholdRole
    weight: Optional[float] = None


class HouseholdResponse(BaseModel):
    """Schema for household response."""
    id: str
    display_name: str
    members: List[HouseholdMemberResponse] = []
    created_at: datetime


class UserRegistrationResponse(BaseModel):
    """Schema for a newly created user with the default household."""
    user_id: str
    email: str
    name: Optional[str] = None
    household_id: str
    household_name: str
