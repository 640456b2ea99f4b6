"""
Household management routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.db.session import get_db
from app.schemas.household import HouseholdCreate, HouseholdResponse
from app.services import household_service

router = APIRouter(prefix="/households", tags=["households"])


@router.post("", response_model=HouseholdResponse, status_code=status.HTTP_201_CREATED)
async def create_household(household_data: HouseholdCreate, db: Session = Depends(get_db)):
    """Create a household owned by the given user."""
    household = household_service.create_household(household_data, db)
    return household_service.to_household_response(household)


@router.get("", response_model=List[HouseholdResponse])
async def list_households(user_id: Optional[str] = None, db: Session = Depends(get_db)):
    """List households the user belongs to."""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID required"
        )

    households = household_service.list_households_for_user(user_id, db)
    return [household_service.to_household_response(h) for h in households]
