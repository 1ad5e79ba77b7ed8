import logging

from sqlalchemy import case, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from data.plans import UNLIMITED
from errors import QuotaExceeded
from models import Profile

logger = logging.getLogger(__name__)


def is_unlimited(profile: Profile) -> bool:
    return profile.documents_limit == UNLIMITED


def remaining_scans(profile: Profile):
    if is_unlimited(profile):
        return "unlimited"
    return max(0, profile.documents_limit - profile.documents_uploaded)


def check(profile: Profile):
    """Raise QuotaExceeded when the profile has no scans left"""
    if is_unlimited(profile):
        return
    if profile.documents_uploaded >= profile.documents_limit:
        raise QuotaExceeded()


def increment(db: Session, user_id: str):
    """Add one scan to the counter in a single UPDATE so concurrent scans don't lose counts"""
    _apply(db, user_id, Profile.documents_uploaded + 1)


def decrement(db: Session, user_id: str):
    """Remove one scan from the counter, never going below zero"""
    _apply(db, user_id, case(
        (Profile.documents_uploaded > 0, Profile.documents_uploaded - 1),
        else_=0,
    ))


def _apply(db: Session, user_id: str, value):
    try:
        db.execute(
            update(Profile)
            .where(Profile.id == user_id)
            .values(documents_uploaded=value)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
