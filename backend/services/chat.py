"""
ClaireAI chat: follow-up questions about one analyzed contract.

The model only sees the contract summary and the last turns of the
conversation; a user message and its reply are stored together once the
reply has arrived.
"""

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from openai import AsyncOpenAI
from sqlalchemy.orm import Session

from config import OPENROUTER_MODEL
from errors import ChatError, NotFoundOrForbidden
from prompts.chat import CHAT_SYSTEM_PROMPT
from services import db_ops
from services.llm import complete
from services.mock.chat import mock_chat_reply

logger = logging.getLogger(__name__)

HISTORY_TURNS = 10


@dataclass
class ContractSummary:
    contract_type: str = "inconnu"
    main_coverages: list[str] = field(default_factory=list)
    amounts: dict = field(default_factory=dict)
    exclusions: list[str] = field(default_factory=list)
    optimization_score: int = 0
    potential_savings: int = 0
    coverage_gap_count: int = 0

    @classmethod
    def from_contract(cls, contract) -> "ContractSummary":
        return cls(
            contract_type=contract.contract_type or "inconnu",
            main_coverages=contract.main_coverages or [],
            amounts=contract.amounts or {},
            exclusions=contract.exclusions or [],
            optimization_score=contract.optimization_score or 0,
            potential_savings=contract.potential_savings or 0,
            coverage_gap_count=len(contract.coverage_gaps or []),
        )


def _amount(value) -> str:
    return "non précisé" if value is None else f"{value}€"


def build_system_prompt(summary: ContractSummary) -> str:
    return CHAT_SYSTEM_PROMPT.format(
        contract_type=summary.contract_type,
        coverages=", ".join(summary.main_coverages) or "aucune",
        prime=_amount(summary.amounts.get("prime_mensuelle")),
        franchise=_amount(summary.amounts.get("franchise")),
        plafond=_amount(summary.amounts.get("plafond_garantie")),
        exclusions=", ".join(summary.exclusions) or "aucune",
        score=summary.optimization_score,
        savings=summary.potential_savings,
        gap_count=summary.coverage_gap_count,
    )


class ChatClient:
    temperature = 0.7
    max_tokens = 500

    def __init__(self, client: Optional[AsyncOpenAI], model: str = OPENROUTER_MODEL):
        self.client = client
        self.model = model

    async def reply(self, user_message: str, contract_context: ContractSummary,
                    history: list[dict]) -> str:
        messages = [{"role": "system", "content": build_system_prompt(contract_context)}]
        for turn in history[-HISTORY_TURNS:]:
            messages.append({"role": turn["role"], "content": turn["content"]})
        messages.append({"role": "user", "content": user_message})

        return await complete(
            self.client,
            ChatError,
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )


class MockChatClient:
    """Canned replies used when MOCK_MODE is on"""

    async def reply(self, user_message: str, contract_context: ContractSummary,
                    history: list[dict]) -> str:
        return mock_chat_reply(user_message, contract_context, history)


def _owned_contract(db: Session, user_id: str, contract_id: str):
    contract = db_ops.get_contract(db, contract_id)
    if not contract or contract.user_id != user_id:
        raise NotFoundOrForbidden()
    return contract


async def send_message(db: Session, chat_client, user_id: str, contract_id: str, message: str) -> dict:
    contract = _owned_contract(db, user_id, contract_id)

    turns = [
        {"role": m.role, "content": m.content}
        for m in db_ops.get_chat_history(db, contract_id, HISTORY_TURNS)
    ]
    reply = await chat_client.reply(message, ContractSummary.from_contract(contract), turns)

    now = datetime.utcnow()
    db_ops.create_chat_messages(db, [
        {"id": secrets.token_hex(16), "user_id": user_id, "contract_id": contract_id,
         "role": "user", "content": message, "created_at": now},
        {"id": secrets.token_hex(16), "user_id": user_id, "contract_id": contract_id,
         "role": "assistant", "content": reply, "created_at": now},
    ])
    logger.info("Chat reply stored for contract %s", contract_id)

    return {
        "success": True,
        "response": reply,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def history(db: Session, user_id: str, contract_id: str, limit: Optional[int] = None) -> list:
    _owned_contract(db, user_id, contract_id)
    return db_ops.get_chat_history(db, contract_id, limit)
