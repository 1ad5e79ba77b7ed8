import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import case
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from data.plans import DEFAULT_PLAN, PRICING_PLANS
from models import User, Profile, Contract, ChatMessage

logger = logging.getLogger(__name__)


def upsert_user(db: Session, user_id: str, name: Optional[str] = None, email: Optional[str] = None,
                login_method: Optional[str] = None, owner_id: Optional[str] = None) -> User:
    """Create the user on first sign-in, refresh it on every later one"""
    try:
        user = db.get(User, user_id)
        if user is None:
            user = User(id=user_id)
            db.add(user)
        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        if login_method is not None:
            user.login_method = login_method
        if owner_id and user_id == owner_id:
            user.role = "admin"
        elif not user.role:
            user.role = "user"
        user.last_signed_in = datetime.utcnow()
        db.commit()
        db.refresh(user)
        return user
    except SQLAlchemyError:
        logger.exception("Failed to upsert user %s", user_id)
        db.rollback()
        raise


def get_profile(db: Session, user_id: str) -> Optional[Profile]:
    return db.get(Profile, user_id)


def ensure_profile(db: Session, user: User) -> Profile:
    """Return the user's profile, creating a free one if it doesn't exist yet"""
    profile = db.get(Profile, user.id)
    if profile is not None:
        return profile

    try:
        plan = PRICING_PLANS[DEFAULT_PLAN]
        profile = Profile(
            id=user.id,
            email=user.email,
            full_name=user.name,
            subscription_plan=DEFAULT_PLAN,
            documents_uploaded=0,
            documents_limit=plan["documents_limit"],
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        logger.info("Provisioned %s profile for user %s", DEFAULT_PLAN, user.id)
        return profile
    except IntegrityError:
        # a concurrent first request provisioned it between the read and the insert
        db.rollback()
        profile = db.get(Profile, user.id)
        if profile is None:
            raise
        return profile
    except SQLAlchemyError:
        logger.exception("Failed to create profile for user %s", user.id)
        db.rollback()
        raise


def update_profile(db: Session, profile: Profile, full_name: Optional[str] = None,
                   avatar_url: Optional[str] = None) -> Profile:
    try:
        if full_name is not None:
            profile.full_name = full_name
        if avatar_url is not None:
            profile.avatar_url = avatar_url
        db.commit()
        db.refresh(profile)
        return profile
    except SQLAlchemyError:
        logger.exception("Failed to update profile %s", profile.id)
        db.rollback()
        raise


def set_plan(db: Session, profile: Profile, plan: str, customer_id: Optional[str] = None,
             subscription_id: Optional[str] = None) -> Profile:
    """Switch a profile to a plan and its document limit"""
    try:
        profile.subscription_plan = plan
        profile.documents_limit = PRICING_PLANS[plan]["documents_limit"]
        if customer_id:
            profile.stripe_customer_id = customer_id
        if plan == DEFAULT_PLAN:
            profile.stripe_subscription_id = None
        elif subscription_id:
            profile.stripe_subscription_id = subscription_id
        db.commit()
        db.refresh(profile)
        return profile
    except SQLAlchemyError:
        logger.exception("Failed to set plan %s on profile %s", plan, profile.id)
        db.rollback()
        raise


def get_profile_by_subscription(db: Session, subscription_id: str) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.stripe_subscription_id == subscription_id).first()


# Contract queries

def create_contract(db: Session, **fields) -> Contract:
    try:
        contract = Contract(**fields)
        db.add(contract)
        db.commit()
        db.refresh(contract)
        return contract
    except SQLAlchemyError:
        logger.exception("Failed to save contract %s", fields.get("id"))
        db.rollback()
        raise


def get_contract(db: Session, contract_id: str) -> Optional[Contract]:
    return db.get(Contract, contract_id)


def get_user_contracts(db: Session, user_id: str, contract_type: Optional[str] = None,
                       status: Optional[str] = None) -> list[Contract]:
    query = db.query(Contract).filter(Contract.user_id == user_id)
    if contract_type:
        query = query.filter(Contract.contract_type == contract_type)
    if status:
        query = query.filter(Contract.status == status)
    return query.order_by(Contract.created_at.desc()).all()


def delete_contract(db: Session, contract_id: str, user_id: str) -> bool:
    """Delete a contract and its chat messages. Returns False if not the owner's."""
    contract = get_contract(db, contract_id)
    if not contract or contract.user_id != user_id:
        return False

    try:
        db.query(ChatMessage).filter(ChatMessage.contract_id == contract_id).delete(synchronize_session=False)
        db.delete(contract)
        db.commit()
        return True
    except SQLAlchemyError:
        logger.exception("Failed to delete contract %s", contract_id)
        db.rollback()
        raise


# Chat message queries

def create_chat_messages(db: Session, messages: list[dict]) -> list[ChatMessage]:
    """Insert several messages in one transaction"""
    try:
        rows = [ChatMessage(**m) for m in messages]
        db.add_all(rows)
        db.commit()
        for row in rows:
            db.refresh(row)
        return rows
    except SQLAlchemyError:
        logger.exception("Failed to save chat messages")
        db.rollback()
        raise


def get_chat_history(db: Session, contract_id: str, limit: Optional[int] = 10) -> list[ChatMessage]:
    """Most recent messages of a contract, returned oldest first"""
    # a user message and its reply can share a timestamp; the question sorts first
    role_order = case((ChatMessage.role == "user", 0), else_=1)
    query = db.query(ChatMessage).filter(ChatMessage.contract_id == contract_id) \
        .order_by(ChatMessage.created_at.desc(), role_order.desc())
    if limit:
        query = query.limit(limit)
    return list(reversed(query.all()))


def get_user_stats(db: Session, user_id: str) -> dict:
    contracts = get_user_contracts(db, user_id)

    total_contracts = len(contracts)
    total_savings = sum(c.potential_savings or 0 for c in contracts)
    avg_score = 0
    if contracts:
        avg_score = round(sum(c.optimization_score or 0 for c in contracts) / total_contracts)

    return {
        "total_contracts": total_contracts,
        "total_savings": total_savings,
        "avg_score": avg_score,
    }
