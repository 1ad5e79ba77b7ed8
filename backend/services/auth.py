from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from models import User
from services import db_ops
from services.container import Services, get_db, get_services

COOKIE_NAME = "auth_token"


def get_token(request: Request) -> Optional[str]:
    """Extract the session token from the auth header or cookie"""
    # Try Authorization header first
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]

    return request.cookies.get(COOKIE_NAME)


async def get_current_user(request: Request, db: Session = Depends(get_db),
                           services: Services = Depends(get_services)) -> Optional[User]:
    """Current user, or None for anonymous requests. Refreshes last sign-in."""
    token = get_token(request)
    if not token:
        return None

    identity = await services.identity.verify(token)
    if identity is None:
        return None

    return db_ops.upsert_user(
        db,
        identity["id"],
        name=identity.get("name"),
        email=identity.get("email"),
        login_method=identity.get("login_method"),
        owner_id=services.owner_id,
    )


async def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user
