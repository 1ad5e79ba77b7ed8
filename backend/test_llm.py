import httpx
import pytest

from conftest import FakeOpenRouter
from errors import AnalysisError, ChatError
from services.llm import complete, create_client, extract_json_block, parse_amount


class TestParseAmount:
    @pytest.mark.parametrize("raw,expected", [
        (45, 45),
        (12.5, 12.5),
        ("45€", 45),
        ("45 €", 45),
        ("50 000 €", 50000),
        ("50\xa0000", 50000),
        ("1 500 EUR", 1500),
        ("12,50", 12.5),
        ("1,500", 1500),
        ("1,5k", 1500),
        ("2M", 2000000),
        ("45.0", 45),
    ])
    def test_parses_french_formats(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "€", "non précisé", True])
    def test_unparseable_is_none(self, raw):
        assert parse_amount(raw) is None

    def test_integral_values_are_ints(self):
        assert isinstance(parse_amount("350.00"), int)

    def test_huge_integers_pass_through(self):
        assert parse_amount(10 ** 400) == 10 ** 400

    def test_infinity_is_not_an_integer(self):
        assert parse_amount("inf") == float("inf")
        assert parse_amount(float("inf")) == float("inf")


class TestExtractJsonBlock:
    def test_json_wrapped_in_prose(self):
        text = 'Voici mon analyse :\n{"score": 72, "gaps": []}\nBonne journée !'
        assert extract_json_block(text) == '{"score": 72, "gaps": []}'

    def test_code_fence(self):
        text = '```json\n{"a": {"b": 1}}\n```'
        assert extract_json_block(text) == '{"a": {"b": 1}}'

    def test_braces_inside_strings(self):
        text = 'ok {"title": "franchise {élevée}", "n": 1} fin'
        assert extract_json_block(text) == '{"title": "franchise {élevée}", "n": 1}'

    def test_escaped_quote_inside_string(self):
        text = '{"t": "il a dit \\"}\\"", "n": 2}'
        assert extract_json_block(text) == text

    def test_skips_unbalanced_leading_brace(self):
        assert extract_json_block('{ broken then {"a": 1}') == '{"a": 1}'

    def test_no_object(self):
        assert extract_json_block("Désolé, je ne peux pas analyser ce document.") is None


class TestComplete:
    def test_create_client_without_key(self):
        assert create_client(None) is None
        assert create_client("") is None

    @pytest.mark.asyncio
    async def test_missing_client_is_missing_config(self):
        with pytest.raises(AnalysisError) as exc:
            await complete(None, AnalysisError, model="m", messages=[], temperature=0.3, max_tokens=10)
        assert exc.value.message == "missing config"

    @pytest.mark.asyncio
    async def test_returns_content_and_sends_parameters(self):
        fake = FakeOpenRouter("Bonjour")
        content = await complete(
            fake.client(), ChatError, model="openai/gpt-4o",
            messages=[{"role": "user", "content": "Salut"}], temperature=0.7, max_tokens=500,
        )
        assert content == "Bonjour"
        sent = fake.requests[0]
        assert sent["model"] == "openai/gpt-4o"
        assert sent["temperature"] == 0.7
        assert sent["max_tokens"] == 500

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 429, 500, 503])
    async def test_non_2xx_is_upstream_error(self, status):
        fake = FakeOpenRouter(httpx.Response(status, json={"error": {"message": "nope"}}))
        with pytest.raises(ChatError) as exc:
            await complete(fake.client(), ChatError, model="m", messages=[], temperature=0.7, max_tokens=5)
        assert exc.value.message == f"upstream error {status}"
        # single attempt, no retries
        assert len(fake.requests) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_empty_content(self, content):
        fake = FakeOpenRouter(content)
        with pytest.raises(ChatError) as exc:
            await complete(fake.client(), ChatError, model="m", messages=[], temperature=0.7, max_tokens=5)
        assert exc.value.message == "empty response"
