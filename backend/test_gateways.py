import re

import httpx
import pytest

from conftest import FakeStorage, fake_identity
from errors import ConfigError, ExtractionError, UploadError
from services.extraction import TextExtractor, guess_content_type
from services.identity import IdentityVerifier
from services.mock.extract import SAMPLE_CONTRACT_TEXT
from services.storage import StorageGateway


class TestStorageGateway:
    def test_build_key(self):
        key = StorageGateway.build_key("mon contrat/auto.pdf")
        assert re.fullmatch(r"contracts/\d{13}-mon contrat_auto\.pdf", key)

    def test_configured(self):
        assert StorageGateway("https://storage.test", "key").configured
        assert not StorageGateway(None, "key").configured
        assert not StorageGateway("https://storage.test", None).configured

    @pytest.mark.asyncio
    async def test_put_returns_public_url(self):
        storage = FakeStorage()

        stored = await storage.gateway().put("contracts/1-auto.pdf", b"%PDF", "application/pdf")

        assert stored == {"key": "contracts/1-auto.pdf", "url": "https://cdn.test/contracts/1-auto.pdf"}
        assert storage.uploads == [{"path": "contracts/1-auto.pdf", "auth": "Bearer storage-key"}]

    @pytest.mark.asyncio
    async def test_put_unconfigured(self):
        with pytest.raises(ConfigError):
            await StorageGateway(None, None).put("contracts/1-auto.pdf", b"data")

    @pytest.mark.asyncio
    async def test_put_error_status(self):
        with pytest.raises(UploadError) as exc:
            await FakeStorage(status_code=500).gateway().put("contracts/1-auto.pdf", b"data")
        assert exc.value.message == "upload failed 500"

    @pytest.mark.asyncio
    async def test_put_network_failure(self):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway = StorageGateway("https://storage.test", "key",
                                 http_client=httpx.AsyncClient(transport=httpx.MockTransport(unreachable)))
        with pytest.raises(UploadError) as exc:
            await gateway.put("contracts/1-auto.pdf", b"data")
        assert exc.value.message == "upload failed"

    @pytest.mark.asyncio
    async def test_put_response_without_url(self):
        gateway = StorageGateway(
            "https://storage.test", "key",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={}))),
        )
        with pytest.raises(UploadError):
            await gateway.put("contracts/1-auto.pdf", b"data")


class TestTextExtractor:
    def test_plain_text_is_decoded(self):
        text = TextExtractor(mock_ocr=False).extract("contrat.txt", "  Prime mensuelle : 45€\n".encode("utf-8"))
        assert text == "Prime mensuelle : 45€"

    def test_pdf_uses_mock_ocr(self):
        assert TextExtractor(mock_ocr=True).extract("scan.pdf", b"%PDF-1.7 ...") == SAMPLE_CONTRACT_TEXT

    def test_binary_without_ocr(self):
        with pytest.raises(ExtractionError) as exc:
            TextExtractor(mock_ocr=False).extract("photo.jpg", b"\xff\xd8\xff\xe0\x00\x10JFIF")
        assert exc.value.message == "unsupported document format"

    def test_blank_document(self):
        with pytest.raises(ExtractionError) as exc:
            TextExtractor(mock_ocr=False).extract("vide.txt", b"   \n  ")
        assert exc.value.message == "no text extracted"

    @pytest.mark.parametrize("name,expected", [
        ("contrat.pdf", "application/pdf"),
        ("photo.png", "image/png"),
        ("notes.txt", "text/plain"),
        ("sans-extension", "application/pdf"),
    ])
    def test_guess_content_type(self, name, expected):
        assert guess_content_type(name) == expected


class TestIdentityVerifier:
    def verifier(self, handler=fake_identity):
        return IdentityVerifier("https://identity.test", "anon-key",
                                http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    @pytest.mark.asyncio
    async def test_valid_token(self):
        identity = await self.verifier().verify("token-alice")
        assert identity == {"id": "user-alice", "email": "alice@example.com",
                            "name": "Alice Martin", "login_method": "google"}

    @pytest.mark.asyncio
    async def test_invalid_token(self):
        assert await self.verifier().verify("token-mallory") is None
        assert await self.verifier().verify("") is None

    @pytest.mark.asyncio
    async def test_sends_api_key(self):
        seen = {}

        def handler(request):
            seen["apikey"] = request.headers.get("apikey")
            seen["authorization"] = request.headers.get("Authorization")
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"id": "u1"})

        await self.verifier(handler).verify("tok")
        assert seen == {"apikey": "anon-key", "authorization": "Bearer tok",
                        "url": "https://identity.test/auth/v1/user"}

    @pytest.mark.asyncio
    async def test_provider_down(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        assert await self.verifier(handler).verify("token-alice") is None

    @pytest.mark.asyncio
    async def test_unconfigured(self):
        assert await IdentityVerifier(None, None).verify("token-alice") is None
