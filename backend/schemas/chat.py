from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.analysis import CamelModel


class ChatInput(CamelModel):
    message: str = Field(..., min_length=1, max_length=2000)


class ChatMessageOut(CamelModel):
    id: str
    user_id: str
    contract_id: Optional[str] = None
    role: str
    content: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, message) -> "ChatMessageOut":
        return cls(
            id=message.id,
            user_id=message.user_id,
            contract_id=message.contract_id,
            role=message.role,
            content=message.content,
            created_at=message.created_at,
        )


class ChatReply(CamelModel):
    success: bool
    response: str
    timestamp: str
