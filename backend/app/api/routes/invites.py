"""
Trip invite routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.schemas.invite import InviteCreate, InviteResponse
from app.services import invite_service

router = APIRouter(prefix="/trips", tags=["invites"])


@router.get("/{trip_id}/invites", response_model=List[InviteResponse])
async def list_invites(trip_id: str, db: Session = Depends(get_db)):
    """List invites of a trip."""
    invites = invite_service.list_invites(trip_id, db)
    return [invite_service.to_invite_response(i) for i in invites]


@router.post("/{trip_id}/invites", response_model=InviteResponse, status_code=status.HTTP_201_CREATED)
async def create_invite(trip_id: str, invite_data: InviteCreate, db: Session = Depends(get_db)):
    """Invite a household to the trip by email."""
    invite = invite_service.create_invite(trip_id, invite_data, db)
    return invite_service.to_invite_response(invite)
