from services.mock.extract import mock_extract, SAMPLE_CONTRACT_TEXT
from services.mock.analysis import mock_contract_analysis
from services.mock.chat import mock_chat_reply

__all__ = [
    "mock_extract",
    "SAMPLE_CONTRACT_TEXT",
    "mock_contract_analysis",
    "mock_chat_reply",
]
