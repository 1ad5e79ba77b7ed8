import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

import config
from database import Database
from services.analysis import AnalysisClient, MockAnalysisClient
from services.billing import BillingBridge
from services.chat import ChatClient, MockChatClient
from services.extraction import TextExtractor
from services.identity import IdentityVerifier
from services.llm import create_client
from services.storage import StorageGateway
from services.workflow import ContractWorkflow

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Every external collaborator, built once per process at startup"""

    database: Database
    storage: StorageGateway
    extractor: TextExtractor
    analysis_client: object
    chat_client: object
    billing: BillingBridge
    identity: IdentityVerifier
    owner_id: Optional[str] = None

    @property
    def workflow(self) -> ContractWorkflow:
        return ContractWorkflow(self.storage, self.extractor, self.analysis_client)

    def close(self):
        self.database.dispose()


def build_services() -> Services:
    """Wire the collaborators from environment configuration"""
    if config.MOCK_MODE:
        logger.info("MOCK_MODE on - analysis and chat use canned responses")
        analysis_client = MockAnalysisClient()
        chat_client = MockChatClient()
    else:
        llm = create_client(config.get_api_key())
        if llm is None:
            logger.warning("OPENROUTER_API_KEY not configured - analysis and chat will fail")
        analysis_client = AnalysisClient(llm, config.OPENROUTER_MODEL)
        chat_client = ChatClient(llm, config.OPENROUTER_MODEL)

    return Services(
        database=Database(config.DATABASE_URL),
        storage=StorageGateway(config.STORAGE_API_URL, config.STORAGE_API_KEY),
        extractor=TextExtractor(mock_ocr=config.MOCK_OCR),
        analysis_client=analysis_client,
        chat_client=chat_client,
        billing=BillingBridge(
            config.STRIPE_SECRET_KEY,
            config.STRIPE_WEBHOOK_SECRET,
            {
                "premium": config.STRIPE_PREMIUM_PRICE_ID,
                "enterprise": config.STRIPE_ENTERPRISE_PRICE_ID,
            },
            config.APP_URL,
        ),
        identity=IdentityVerifier(config.IDENTITY_URL, config.IDENTITY_API_KEY),
        owner_id=config.OWNER_ID,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_db(request: Request):
    db = get_services(request).database.session()
    try:
        yield db
    finally:
        db.close()
