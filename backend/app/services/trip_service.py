"""
Trip service for trips, participating households and their members.
"""
import logging
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from app.core.config import settings
from app.models.household import Household, HouseholdMember, HouseholdRole
from app.models.receipt import Receipt
from app.models.trip import Trip, TripAdmin, TripParticipant
from app.models.user import User
from app.schemas.trip import TripCreate, ParticipantCreate, MemberCreate
from app.services.exceptions import NotFoundError, ConflictError, InvalidRequestError

logger = logging.getLogger(__name__)


def get_trip(trip_id: str, db: Session) -> Trip:
    """Get a trip or raise NotFoundError."""
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFoundError("Trip not found")
    return trip


def is_trip_admin(trip_id: str, user_id: str, db: Session) -> bool:
    """Check whether a user administers a trip."""
    return db.query(TripAdmin).filter(
        TripAdmin.trip_id == trip_id,
        TripAdmin.user_id == user_id
    ).first() is not None


def get_owned_household(user_id: str, db: Session) -> Optional[Household]:
    """Return the household a user owns, if any."""
    membership = db.query(HouseholdMember).filter(
        HouseholdMember.user_id == user_id,
        HouseholdMember.role == HouseholdRole.OWNER
    ).order_by(HouseholdMember.created_at).first()
    return membership.household if membership else None


def create_trip(trip_data: TripCreate, db: Session) -> Trip:
    """
    Create a trip with its creator as admin.

    The creator's own household joins the trip with the default weight.
    """
    user = db.query(User).filter(User.id == trip_data.user_id).first()
    if not user:
        raise NotFoundError("User not found")

    trip = Trip(
        name=trip_data.name,
        currency=(trip_data.currency or settings.DEFAULT_CURRENCY).upper(),
        start_date=trip_data.start_date,
        end_date=trip_data.end_date
    )
    db.add(trip)
    db.flush()

    db.add(TripAdmin(trip_id=trip.id, user_id=user.id))

    household = get_owned_household(user.id, db)
    if household:
        db.add(TripParticipant(
            trip_id=trip.id,
            household_id=household.id,
            weight=settings.DEFAULT_PARTICIPANT_WEIGHT
        ))

    db.commit()
    db.refresh(trip)
    logger.info(f"Trip {trip.id} created by user {user.id}")
    return trip


def list_trips_for_admin(user_id: str, db: Session) -> List[Trip]:
    """List trips a user administers, newest first."""
    return db.query(Trip).join(TripAdmin).filter(
        TripAdmin.user_id == user_id
    ).order_by(Trip.created_at.desc()).all()


def count_receipts(trip_id: str, db: Session) -> int:
    """Count receipts recorded for a trip."""
    return db.query(Receipt).filter(Receipt.trip_id == trip_id).count()


def list_participants(trip_id: str, db: Session) -> List[TripParticipant]:
    """List participating households of a trip in joining order."""
    get_trip(trip_id, db)
    return db.query(TripParticipant).options(
        joinedload(TripParticipant.household)
    ).filter(
        TripParticipant.trip_id == trip_id
    ).order_by(TripParticipant.created_at, TripParticipant.id).all()


def add_participant(trip_id: str, participant_data: ParticipantCreate, db: Session) -> TripParticipant:
    """Add a household to a trip."""
    get_trip(trip_id, db)

    household = db.query(Household).filter(Household.id == participant_data.household_id).first()
    if not household:
        raise NotFoundError("Household not found")

    existing = db.query(TripParticipant).filter(
        TripParticipant.trip_id == trip_id,
        TripParticipant.household_id == household.id
    ).first()
    if existing:
        raise ConflictError("Household already participating")

    participant = TripParticipant(
        trip_id=trip_id,
        household_id=household.id,
        weight=participant_data.weight
    )
    db.add(participant)
    db.commit()
    db.refresh(participant)
    return participant


def remove_participant(trip_id: str, participant_id: Optional[str], db: Session) -> None:
    """Remove a participating household from a trip."""
    if not participant_id:
        raise InvalidRequestError("Participant ID required")

    participant = db.query(TripParticipant).filter(
        TripParticipant.id == participant_id,
        TripParticipant.trip_id == trip_id
    ).first()
    if not participant:
        raise NotFoundError("Participant not found")

    db.delete(participant)
    db.commit()


def recompute_household_weight(trip_id: str, household_id: str, db: Session) -> Optional[TripParticipant]:
    """
    Set a participant's weight to the sum of its household members' weights.

    Falls back to 1 when the members carry no weight.
    """
    participant = db.query(TripParticipant).filter(
        TripParticipant.trip_id == trip_id,
        TripParticipant.household_id == household_id
    ).first()
    if not participant:
        return None

    members = db.query(HouseholdMember).filter(
        HouseholdMember.household_id == household_id
    ).all()
    total_weight = sum(m.weight or 0 for m in members)
    participant.weight = total_weight if total_weight > 0 else 1.0
    return participant


def add_household_member(trip_id: str, member_data: MemberCreate, db: Session) -> TripParticipant:
    """
    Add a person to a household taking part in a trip.

    Finds or creates the user by email, stores the member weight and
    refreshes the household's trip weight.
    """
    participant = db.query(TripParticipant).filter(
        TripParticipant.trip_id == trip_id,
        TripParticipant.household_id == member_data.household_id
    ).first()
    if not participant:
        raise InvalidRequestError("Household is not part of this trip")

    user = db.query(User).filter(User.email == member_data.email).first()
    if not user:
        user = User(email=member_data.email, name=member_data.name)
        db.add(user)
        db.flush()
    elif not user.name and member_data.name:
        user.name = member_data.name

    membership = db.query(HouseholdMember).filter(
        HouseholdMember.user_id == user.id,
        HouseholdMember.household_id == member_data.household_id
    ).first()
    if membership:
        membership.weight = member_data.weight
    else:
        db.add(HouseholdMember(
            user_id=user.id,
            household_id=member_data.household_id,
            weight=member_data.weight
        ))
    db.flush()

    recompute_household_weight(trip_id, member_data.household_id, db)
    db.commit()
    db.refresh(participant)
    return participant
