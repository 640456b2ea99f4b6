"""
Invite service for adding households to a trip by email.
"""
import logging
import secrets
from datetime import timedelta
from sqlalchemy.orm import Session, joinedload
from typing import List
from app.core.config import settings
from app.core.utils import utcnow
from app.models.household import Household, HouseholdMember, HouseholdRole
from app.models.invite import Invite
from app.models.trip import TripParticipant
from app.models.user import User
from app.schemas.invite import InviteCreate, InviteResponse
from app.services.exceptions import ForbiddenError
from app.services.household_service import upsert_owner_membership
from app.services.trip_service import get_trip, get_owned_household, is_trip_admin

logger = logging.getLogger(__name__)


def list_invites(trip_id: str, db: Session) -> List[Invite]:
    """List invites of a trip, newest first."""
    get_trip(trip_id, db)
    return db.query(Invite).options(
        joinedload(Invite.household)
    ).filter(
        Invite.trip_id == trip_id
    ).order_by(Invite.created_at.desc()).all()


def create_invite(trip_id: str, invite_data: InviteCreate, db: Session) -> Invite:
    """
    Invite a household to a trip.

    An existing user brings their own household and the invite is used
    right away; otherwise a new household waits for the user to register.
    The household joins the trip immediately in both cases.
    """
    get_trip(trip_id, db)
    if not is_trip_admin(trip_id, invite_data.created_by, db):
        raise ForbiddenError("Not authorized")

    existing_user = db.query(User).filter(User.email == invite_data.email).first()

    household = get_owned_household(existing_user.id, db) if existing_user else None
    if household is None:
        household = Household(display_name=invite_data.household_name)
        db.add(household)
        db.flush()
        if existing_user:
            db.add(HouseholdMember(
                user_id=existing_user.id,
                household_id=household.id,
                role=HouseholdRole.OWNER
            ))

    existing_participant = db.query(TripParticipant).filter(
        TripParticipant.trip_id == trip_id,
        TripParticipant.household_id == household.id
    ).first()
    if not existing_participant:
        db.add(TripParticipant(
            trip_id=trip_id,
            household_id=household.id,
            weight=invite_data.weight
        ))

    invite = Invite(
        trip_id=trip_id,
        email=invite_data.email,
        household_id=household.id,
        code=secrets.token_hex(16),
        expires_at=utcnow() + timedelta(days=settings.INVITE_EXPIRE_DAYS),
        created_by=invite_data.created_by,
        max_uses=settings.INVITE_MAX_USES,
        used=1 if existing_user else 0
    )
    db.add(invite)
    db.flush()

    if existing_user:
        upsert_owner_membership(existing_user.id, household.id, db)

    db.commit()
    db.refresh(invite)
    logger.info(f"Invite {invite.id} created for trip {trip_id}")
    return invite


def to_invite_response(invite: Invite) -> InviteResponse:
    """Build the API representation of an invite."""
    return InviteResponse(
        id=invite.id,
        trip_id=invite.trip_id,
        email=invite.email,
        household_id=invite.household_id,
        household_name=invite.household.display_name if invite.household else None,
        code=invite.code,
        expires_at=invite.expires_at,
        created_by=invite.created_by,
        max_uses=invite.max_uses,
        used=invite.used,
        created_at=invite.created_at
    )
