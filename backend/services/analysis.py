import json
import logging
from typing import Optional

from openai import AsyncOpenAI
from pydantic import ValidationError

from config import OPENROUTER_MODEL
from errors import AnalysisError
from prompts.analysis import ANALYSIS_PROMPT, ANALYSIS_SYSTEM_PROMPT
from schemas.analysis import AnalysisResult
from services.llm import complete, extract_json_block
from services.mock.analysis import mock_contract_analysis

logger = logging.getLogger(__name__)

# Keep the prompt well inside the model context
MAX_DOCUMENT_CHARS = 15000


class AnalysisClient:
    """Turns extracted contract text into a validated AnalysisResult.

    One completion per call at low temperature; the JSON object is pulled out
    of whatever prose the model wraps around it.
    """

    temperature = 0.3
    max_tokens = 2000

    def __init__(self, client: Optional[AsyncOpenAI], model: str = OPENROUTER_MODEL):
        self.client = client
        self.model = model

    async def analyze(self, extracted_text: str) -> AnalysisResult:
        prompt = ANALYSIS_PROMPT.replace("<<DOCUMENT>>", extracted_text[:MAX_DOCUMENT_CHARS])
        response_text = await complete(
            self.client,
            AnalysisError,
            model=self.model,
            messages=[
                {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return parse_analysis(response_text)


class MockAnalysisClient:
    """Keyword-based stand-in used when MOCK_MODE is on"""

    async def analyze(self, extracted_text: str) -> AnalysisResult:
        return AnalysisResult.model_validate(mock_contract_analysis(extracted_text))


def parse_analysis(response_text: str) -> AnalysisResult:
    block = extract_json_block(response_text)
    if block is None:
        logger.warning("No JSON object in analysis reply: %s", response_text[:200])
        raise AnalysisError("invalid JSON")
    try:
        data = json.loads(block)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.warning("Analysis reply is not valid JSON: %s", e)
        raise AnalysisError("invalid JSON") from e

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        logger.warning("Analysis reply failed validation: %s", e)
        raise AnalysisError("invalid analysis") from e
