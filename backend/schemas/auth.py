from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import Field

from schemas.analysis import CamelModel
from services import quota


class ProfileOut(CamelModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    subscription_plan: str = "free"
    documents_uploaded: int = 0
    documents_limit: int = 3
    remaining_scans: Union[int, str] = 3
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, profile) -> "ProfileOut":
        return cls(
            id=profile.id,
            email=profile.email,
            full_name=profile.full_name,
            avatar_url=profile.avatar_url,
            subscription_plan=profile.subscription_plan,
            documents_uploaded=profile.documents_uploaded,
            documents_limit=profile.documents_limit,
            remaining_scans=quota.remaining_scans(profile),
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class ProfileUpdateInput(CamelModel):
    full_name: Optional[str] = Field(None, max_length=255)
    avatar_url: Optional[str] = Field(None, max_length=2048)


class UserOut(CamelModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    login_method: Optional[str] = None
    role: str = "user"
    created_at: Optional[datetime] = None
    last_signed_in: Optional[datetime] = None
    profile: Optional[ProfileOut] = None


class CheckoutInput(CamelModel):
    plan: Literal["premium", "enterprise"]


class RedirectResponse(CamelModel):
    url: str
