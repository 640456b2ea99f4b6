"""
Pydantic schemas for Invite entity.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class InviteCreate(BaseModel):
    """Schema for invite creation."""
    email: EmailStr
    household_name: str = Field(min_length=1)
    weight: float = Field(default=1.0, ge=0, le=2)
    created_by: str  # Must be a trip admin


class InviteResponse(BaseModel):
    """Schema for invite response."""
    id: str
    trip_id: str
    email: str
    household_id: Optional[str] = None
    household_name: Optional[str] = None
    code: str
    expires_at: datetime
    created_by: str
    max_uses: int
    used: int
    created_at: datetime
