"""
Household service for users and the households they belong to.
"""
import logging
from sqlalchemy.orm import Session, joinedload
from typing import List, Tuple
from app.core.utils import utcnow
from app.models.household import Household, HouseholdMember, HouseholdRole
from app.models.invite import Invite
from app.models.user import User
from app.schemas.household import HouseholdCreate, HouseholdResponse, HouseholdMemberResponse
from app.schemas.user import UserCreate
from app.services.exceptions import NotFoundError, ConflictError

logger = logging.getLogger(__name__)


def get_user(user_id: str, db: Session) -> User:
    """Get a user or raise NotFoundError."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def default_household_name(user: User) -> str:
    """Name of the household created for a new user."""
    return f"{user.name or user.email}'s Household"


def upsert_owner_membership(user_id: str, household_id: str, db: Session) -> HouseholdMember:
    """Make a user the owner of a household, creating the membership if needed."""
    membership = db.query(HouseholdMember).filter(
        HouseholdMember.user_id == user_id,
        HouseholdMember.household_id == household_id
    ).first()
    if membership:
        membership.role = HouseholdRole.OWNER
    else:
        membership = HouseholdMember(
            user_id=user_id,
            household_id=household_id,
            role=HouseholdRole.OWNER
        )
        db.add(membership)
    return membership


def accept_pending_invites(user: User, db: Session) -> int:
    """
    Attach a new user to the households of open invites sent to their email.

    Returns the number of invites used.
    """
    pending_invites = db.query(Invite).filter(
        Invite.email == user.email,
        Invite.expires_at > utcnow(),
        Invite.used < Invite.max_uses
    ).all()

    for invite in pending_invites:
        if invite.household_id:
            upsert_owner_membership(user.id, invite.household_id, db)
            db.flush()
        invite.used += 1

    if pending_invites:
        logger.info(f"User {user.id} joined through {len(pending_invites)} pending invite(s)")
    return len(pending_invites)


def create_user(user_data: UserCreate, db: Session) -> Tuple[User, Household]:
    """Create a user together with their default household."""
    existing = db.query(User).filter(User.email == user_data.email).first()
    if existing:
        raise ConflictError("Email already exists")

    user = User(email=user_data.email, name=user_data.name)
    db.add(user)
    db.flush()

    household = Household(display_name=default_household_name(user))
    db.add(household)
    db.flush()
    db.add(HouseholdMember(
        user_id=user.id,
        household_id=household.id,
        role=HouseholdRole.OWNER
    ))
    db.flush()

    accept_pending_invites(user, db)

    db.commit()
    db.refresh(user)
    db.refresh(household)
    return user, household


def create_household(household_data: HouseholdCreate, db: Session) -> Household:
    """Create a household owned by a user."""
    user = get_user(household_data.user_id, db)

    household = Household(display_name=household_data.display_name)
    db.add(household)
    db.flush()
    db.add(HouseholdMember(
        user_id=user.id,
        household_id=household.id,
        role=HouseholdRole.OWNER
    ))
    db.commit()
    db.refresh(household)
    return household


def list_households_for_user(user_id: str, db: Session) -> List[Household]:
    """List households a user belongs to, newest first."""
    return db.query(Household).join(HouseholdMember).filter(
        HouseholdMember.user_id == user_id
    ).options(
        joinedload(Household.members).joinedload(HouseholdMember.user)
    ).order_by(Household.created_at.desc()).all()


def to_household_response(household: Household) -> HouseholdResponse:
    """Build the API representation of a household with its members."""
    return HouseholdResponse(
        id=household.id,
        display_name=household.display_name,
        members=[
            HouseholdMemberResponse(
                user_id=m.user_id,
                name=m.user.name,
                email=m.user.email,
                role=m.role,
                weight=m.weight
            )
            for m in household.members
        ],
        created_at=household.created_at
    )
