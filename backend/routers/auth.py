from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from models import User
from schemas.auth import ProfileOut, ProfileUpdateInput, UserOut
from services import db_ops
from services.auth import COOKIE_NAME, get_current_user, require_user
from services.container import get_db

router = APIRouter(prefix="/api", tags=["auth"])


@router.get("/auth/me", response_model=Optional[UserOut])
async def get_me(user: Optional[User] = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get current user info, provisioning the profile on first visit"""
    if user is None:
        return None

    profile = db_ops.ensure_profile(db, user)
    return UserOut(
        id=user.id,
        name=user.name,
        email=user.email,
        login_method=user.login_method,
        role=user.role,
        created_at=user.created_at,
        last_signed_in=user.last_signed_in,
        profile=ProfileOut.from_row(profile),
    )


@router.post("/auth/logout")
async def logout(response: Response):
    """Log out (clear the session cookie)"""
    response.delete_cookie(COOKIE_NAME)
    return {"success": True}


@router.get("/profile", response_model=ProfileOut)
async def get_profile(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return ProfileOut.from_row(db_ops.ensure_profile(db, user))


@router.patch("/profile", response_model=ProfileOut)
async def update_profile(input: ProfileUpdateInput, user: User = Depends(require_user),
                         db: Session = Depends(get_db)):
    profile = db_ops.ensure_profile(db, user)
    profile = db_ops.update_profile(db, profile, full_name=input.full_name, avatar_url=input.avatar_url)
    return ProfileOut.from_row(profile)
