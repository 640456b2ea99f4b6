"""
User management routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.user import UserCreate, UserResponse
from app.schemas.household import UserRegistrationResponse
from app.services import household_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRegistrationResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """Create a user with a default household and accept pending invites."""
    user, household = household_service.create_user(user_data, db)
    return UserRegistrationResponse(
        user_id=user.id,
        email=user.email,
        name=user.name,
        household_id=household.id,
        household_name=household.display_name
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db: Session = Depends(get_db)):
    """Get a user."""
    return household_service.get_user(user_id, db)
