"""
Trip management routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.db.session import get_db
from app.models.trip import Trip, TripParticipant
from app.schemas.trip import (
    TripCreate, TripResponse, TripDetailResponse,
    TripParticipantResponse, ParticipantCreate, MemberCreate
)
from app.services import trip_service

router = APIRouter(prefix="/trips", tags=["trips"])


def to_participant_response(participant: TripParticipant) -> TripParticipantResponse:
    """Build the API representation of a trip participant."""
    return TripParticipantResponse(
        id=participant.id,
        household_id=participant.household_id,
        household_name=participant.household.display_name,
        weight=participant.weight
    )


def to_trip_detail(trip: Trip, db: Session) -> TripDetailResponse:
    """Build the detailed API representation of a trip."""
    participants = trip_service.list_participants(trip.id, db)
    return TripDetailResponse(
        id=trip.id,
        name=trip.name,
        currency=trip.currency,
        start_date=trip.start_date,
        end_date=trip.end_date,
        created_at=trip.created_at,
        updated_at=trip.updated_at,
        admin_ids=[a.user_id for a in trip.admins],
        participants=[to_participant_response(p) for p in participants],
        receipt_count=trip_service.count_receipts(trip.id, db)
    )


@router.post("", response_model=TripDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(trip_data: TripCreate, db: Session = Depends(get_db)):
    """Create a new trip."""
    trip = trip_service.create_trip(trip_data, db)
    return to_trip_detail(trip, db)


@router.get("", response_model=List[TripResponse])
async def list_trips(user_id: Optional[str] = None, db: Session = Depends(get_db)):
    """List all trips the user administers."""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID required"
        )
    return trip_service.list_trips_for_admin(user_id, db)


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(trip_id: str, db: Session = Depends(get_db)):
    """Get trip details."""
    trip = trip_service.get_trip(trip_id, db)
    return to_trip_detail(trip, db)


@router.get("/{trip_id}/participants", response_model=List[TripParticipantResponse])
async def get_participants(trip_id: str, db: Session = Depends(get_db)):
    """Get participating households with their weights."""
    participants = trip_service.list_participants(trip_id, db)
    return [to_participant_response(p) for p in participants]


@router.post(
    "/{trip_id}/participants",
    response_model=TripParticipantResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_participant(
    trip_id: str,
    participant_data: ParticipantCreate,
    db: Session = Depends(get_db)
):
    """Add a household to the trip."""
    participant = trip_service.add_participant(trip_id, participant_data, db)
    return to_participant_response(participant)


@router.delete("/{trip_id}/participants")
async def remove_participant(
    trip_id: str,
    participant_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Remove a household from the trip."""
    trip_service.remove_participant(trip_id, participant_id, db)
    return {"success": True}


@router.post(
    "/{trip_id}/participants/members",
    response_model=TripParticipantResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_household_member(
    trip_id: str,
    member_data: MemberCreate,
    db: Session = Depends(get_db)
):
    """Add a person to a participating household and refresh its weight."""
    participant = trip_service.add_household_member(trip_id, member_data, db)
    return to_participant_response(participant)
