from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from models import User
from schemas.chat import ChatInput, ChatMessageOut, ChatReply
from services import chat
from services.auth import require_user
from services.container import Services, get_db, get_services

router = APIRouter(prefix="/api/contracts", tags=["chat"])


@router.post("/{contract_id}/chat", response_model=ChatReply)
async def send_chat_message(
    contract_id: str,
    input: ChatInput,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    """Ask ClaireAI a question about one of the user's contracts"""
    result = await chat.send_message(db, services.chat_client, user.id, contract_id, input.message)
    return ChatReply(**result)


@router.get("/{contract_id}/chat", response_model=list[ChatMessageOut])
async def get_chat_history(
    contract_id: str,
    limit: Optional[int] = Query(None, ge=1, le=200),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return [ChatMessageOut.from_row(m) for m in chat.history(db, user.id, contract_id, limit)]
