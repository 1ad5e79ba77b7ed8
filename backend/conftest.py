"""Shared pytest fixtures: in-memory database and fake HTTP collaborators."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from database import Database
from main import create_app
from services import db_ops
from services.analysis import AnalysisClient
from services.billing import BillingBridge
from services.chat import ChatClient
from services.container import Services
from services.extraction import TextExtractor
from services.identity import IdentityVerifier
from services.llm import create_client
from services.storage import StorageGateway

VALID_ANALYSIS = {
    "contractType": "auto",
    "mainCoverages": ["Responsabilité civile", "Vol et incendie"],
    "amounts": {"prime_mensuelle": 45, "franchise": 350, "plafond_garantie": 50000},
    "exclusions": ["Conduite en état d'ivresse"],
    "optimizationScore": 80,
    "potentialSavings": 240,
    "coverageGaps": [
        {"title": "Pas d'assistance", "description": "Aucune assistance 0 km",
         "impact": "Remorquage à vos frais", "solution": "Ajouter l'option assistance"},
        {"title": "Catastrophes naturelles", "description": "Exclues du contrat",
         "impact": "Jusqu'à 20 000€", "solution": "Ajouter la garantie"},
    ],
    "recommendations": [
        {"title": "Négocier la franchise", "description": "Franchise élevée",
         "savings": 60, "priority": "moyenne"},
    ],
}


def completion_response(content, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json={
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "openai/gpt-4o",
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": content},
            "finish_reason": "stop",
        }],
    })


class FakeOpenRouter:
    """Queue of canned chat-completion replies behind an httpx mock transport"""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        reply = self.replies.pop(0)
        if isinstance(reply, httpx.Response):
            return reply
        return completion_response(reply)

    def client(self):
        return create_client(
            "test-key",
            base_url="https://openrouter.test/api/v1",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self)),
        )


class FakeStorage:
    """Object store that records uploads and answers with a CDN URL"""

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.uploads = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.params.get("path")
        self.uploads.append({"path": path, "auth": request.headers.get("Authorization")})
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="storage down")
        return httpx.Response(200, json={"key": path, "url": f"https://cdn.test/{path}"})

    def gateway(self) -> StorageGateway:
        return StorageGateway(
            "https://storage.test",
            "storage-key",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self)),
        )


IDENTITIES = {
    "token-alice": {"id": "user-alice", "email": "alice@example.com",
                    "user_metadata": {"full_name": "Alice Martin"}, "app_metadata": {"provider": "google"}},
    "token-bob": {"id": "user-bob", "email": "bob@example.com",
                  "user_metadata": {}, "app_metadata": {"provider": "email"}},
}


def fake_identity(request: httpx.Request) -> httpx.Response:
    token = request.headers.get("Authorization", "")[len("Bearer "):]
    if token in IDENTITIES:
        return httpx.Response(200, json=IDENTITIES[token])
    return httpx.Response(401, json={"msg": "invalid token"})


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    def _make(user_id: str = "user-alice", documents_uploaded: int = 0, documents_limit: int = 3):
        user = db_ops.upsert_user(db, user_id, name="Alice Martin", email=f"{user_id}@example.com")
        profile = db_ops.ensure_profile(db, user)
        profile.documents_uploaded = documents_uploaded
        profile.documents_limit = documents_limit
        db.commit()
        return user
    return _make


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def openrouter():
    return FakeOpenRouter()


@pytest.fixture
def billing():
    return BillingBridge("sk_test_123", "whsec_test", {"premium": "price_premium", "enterprise": ""},
                         "https://app.test")


@pytest.fixture
def services(database, storage, openrouter, billing):
    llm = openrouter.client()
    return Services(
        database=database,
        storage=storage.gateway(),
        extractor=TextExtractor(mock_ocr=True),
        analysis_client=AnalysisClient(llm),
        chat_client=ChatClient(llm),
        billing=billing,
        identity=IdentityVerifier(
            "https://identity.test", "anon-key",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(fake_identity)),
        ),
        owner_id="user-bob",
    )


@pytest.fixture
def client(services):
    app = create_app(services)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def alice_headers():
    return {"Authorization": "Bearer token-alice"}
