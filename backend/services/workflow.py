import logging
import secrets

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errors import NotFoundOrForbidden
from models import User
from services import db_ops, quota
from services.extraction import guess_content_type

logger = logging.getLogger(__name__)


class ContractWorkflow:
    """Scan pipeline: quota check, upload, text extraction, analysis, persistence.

    The steps are independent calls with no rollback between them. A file
    uploaded before a failed analysis stays in storage, and a failed counter
    increment leaves the saved contract in place.
    """

    def __init__(self, storage, extractor, analysis_client):
        self.storage = storage
        self.extractor = extractor
        self.analysis_client = analysis_client

    async def submit_scan(self, db: Session, user: User, file_name: str, file_bytes: bytes) -> dict:
        profile = db_ops.ensure_profile(db, user)
        quota.check(profile)

        stored = await self.storage.put(
            self.storage.build_key(file_name), file_bytes, guess_content_type(file_name)
        )
        extracted_text = self.extractor.extract(file_name, file_bytes)
        analysis = await self.analysis_client.analyze(extracted_text)

        contract = db_ops.create_contract(
            db,
            id=secrets.token_hex(16),
            user_id=user.id,
            file_name=file_name,
            file_url=stored["url"],
            extracted_text=extracted_text,
            contract_type=analysis.contract_type,
            main_coverages=analysis.main_coverages,
            amounts=analysis.amounts.model_dump(),
            exclusions=analysis.exclusions,
            optimization_score=analysis.optimization_score,
            potential_savings=analysis.potential_savings,
            coverage_gaps=[gap.model_dump() for gap in analysis.coverage_gaps],
            recommendations=[rec.model_dump() for rec in analysis.recommendations],
        )

        try:
            quota.increment(db, user.id)
        except SQLAlchemyError:
            logger.exception("Could not count scan %s for user %s", contract.id, user.id)

        logger.info("Contract %s scanned for user %s (score %s)",
                    contract.id, user.id, analysis.optimization_score)
        return {"contract": contract, "analysis": analysis}

    def delete_scan(self, db: Session, user_id: str, contract_id: str) -> dict:
        success = db_ops.delete_contract(db, contract_id, user_id)
        if success:
            quota.decrement(db, user_id)
        return {"success": success}

    def get_scan(self, db: Session, user_id: str, contract_id: str):
        contract = db_ops.get_contract(db, contract_id)
        if not contract or contract.user_id != user_id:
            raise NotFoundOrForbidden()
        return contract
