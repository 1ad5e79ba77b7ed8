import logging
import math
from typing import Optional, Union

import httpx
from openai import AsyncOpenAI, APIStatusError, APIError

from config import OPENROUTER_BASE_URL, OPENROUTER_REFERER, OPENROUTER_TITLE

logger = logging.getLogger(__name__)


def create_client(api_key: Optional[str], base_url: str = OPENROUTER_BASE_URL,
                  http_client: Optional[httpx.AsyncClient] = None) -> Optional[AsyncOpenAI]:
    """Build the OpenRouter client, or None when no key is configured.

    Retries are disabled: every analysis or chat call is a single attempt.
    """
    if not api_key:
        return None
    return AsyncOpenAI(
        api_key=api_key,
        base_url=base_url,
        max_retries=0,
        http_client=http_client,
        default_headers={"HTTP-Referer": OPENROUTER_REFERER, "X-Title": OPENROUTER_TITLE},
    )


async def complete(client: Optional[AsyncOpenAI], error_cls, *, model: str, messages: list[dict],
                   temperature: float, max_tokens: int) -> str:
    """Run one chat completion and return the text content.

    Every failure is raised as ``error_cls`` so callers only see their own
    error type.
    """
    if client is None:
        raise error_cls("missing config")

    try:
        response = await client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except APIStatusError as e:
        logger.warning("OpenRouter returned %s: %s", e.status_code, e.message)
        raise error_cls(f"upstream error {e.status_code}") from e
    except APIError as e:
        logger.warning("OpenRouter request failed: %s", e)
        raise error_cls("upstream error") from e

    content = None
    if response.choices:
        content = response.choices[0].message.content
    if not content or not content.strip():
        raise error_cls("empty response")
    return content


def extract_json_block(response_text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` block in an LLM reply.

    Models like to wrap JSON in prose or ```json fences; braces inside JSON
    strings are skipped so they don't unbalance the scan.
    """
    start = response_text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(response_text)):
            ch = response_text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return response_text[start:i + 1]
        # unbalanced from this brace, try the next one
        start = response_text.find("{", start + 1)
    return None


def parse_amount(value) -> Optional[Union[int, float]]:
    """Parse an amount like 45, '45€', '50 000 €', '1,5k' or '12.5' to a number"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        cleaned = str(value).upper().replace("€", "").replace("EUR", "")
        # plain, no-break and narrow no-break spaces are thousands separators
        for space in (" ", "\xa0", "\u202f"):
            cleaned = cleaned.replace(space, "")
        if not cleaned:
            return None
        multiplier = 1
        if cleaned.endswith("K"):
            multiplier = 1000
            cleaned = cleaned[:-1]
        elif cleaned.endswith("M"):
            multiplier = 1000000
            cleaned = cleaned[:-1]
        # French decimal comma
        if "," in cleaned and "." not in cleaned:
            head, _, tail = cleaned.rpartition(",")
            cleaned = f"{head}.{tail}" if len(tail) != 3 else head + tail
        cleaned = cleaned.replace(",", "")
        try:
            number = float(cleaned) * multiplier
        except ValueError:
            return None
    if isinstance(number, int):
        return number
    # inf and nan come back as floats; callers decide whether to accept them
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number
