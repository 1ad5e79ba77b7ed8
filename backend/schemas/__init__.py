from schemas.analysis import CamelModel, Amounts, CoverageGap, Recommendation, AnalysisResult
from schemas.contracts import (
    ContractCreateInput, ContractOut, ScanResponse, DeleteResponse, ContractStats
)
from schemas.auth import ProfileOut, ProfileUpdateInput, UserOut, CheckoutInput, RedirectResponse
from schemas.chat import ChatInput, ChatMessageOut, ChatReply
