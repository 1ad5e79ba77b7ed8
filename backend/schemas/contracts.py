from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.analysis import CamelModel, Amounts, CoverageGap, Recommendation, AnalysisResult


class ContractCreateInput(CamelModel):
    file_name: str = Field(..., min_length=1, max_length=255)
    file_data: str = Field(..., min_length=1)  # base64 encoded file


class ContractOut(CamelModel):
    id: str
    user_id: str
    file_name: str
    file_url: Optional[str] = None
    contract_type: Optional[str] = None
    status: Optional[str] = None
    extracted_text: Optional[str] = None
    main_coverages: list[str] = []
    amounts: Amounts = Amounts()
    exclusions: list[str] = []
    optimization_score: Optional[int] = None
    potential_savings: Optional[int] = None
    coverage_gaps: list[CoverageGap] = []
    recommendations: list[Recommendation] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, contract) -> "ContractOut":
        return cls(
            id=contract.id,
            user_id=contract.user_id,
            file_name=contract.file_name,
            file_url=contract.file_url,
            contract_type=contract.contract_type,
            status=contract.status,
            extracted_text=contract.extracted_text,
            main_coverages=contract.main_coverages or [],
            amounts=contract.amounts or {},
            exclusions=contract.exclusions or [],
            optimization_score=contract.optimization_score,
            potential_savings=contract.potential_savings,
            coverage_gaps=contract.coverage_gaps or [],
            recommendations=contract.recommendations or [],
            created_at=contract.created_at,
            updated_at=contract.updated_at,
        )


class ScanResponse(CamelModel):
    contract: ContractOut
    analysis: AnalysisResult


class DeleteResponse(CamelModel):
    success: bool


class ContractStats(CamelModel):
    total_contracts: int
    total_savings: int
    avg_score: int
