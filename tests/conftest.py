"""Shared pytest configuration and fixtures."""

import json
from typing import List, Optional, Set, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import get_settings
from app.models.identity import SessionIdentity
from app.models.plan import build_plan_catalog
from app.services.ai.gemini_service import GeminiService
from app.services.auth.identity_provider import LocalIdentityProvider
from app.services.billing.payment_provider import CheckoutSession, PaymentProvider
from app.services.quota.quota_store import InMemoryQuotaStore
from app.services.quota.quota_tracker import QuotaTracker

GEMINI_URL = "https://gemini.test/v1/models/gemini-pro:generateContent"
CHECKOUT_URL = "https://checkout.stripe.test/c/pay/cs_test_123"


def gemini_payload(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


class GeminiStub:
    """httpx handler that records requests and answers with a configurable response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body = gemini_payload("Generated text")
        self.raise_error: Optional[Exception] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_error is not None:
            raise self.raise_error
        if isinstance(self.body, (bytes, str)):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)

    @property
    def last_prompt(self) -> str:
        return self.last_body["contents"][0]["parts"][0]["text"]


class FakePaymentProvider(PaymentProvider):
    """In-memory payment provider that records every call."""

    def __init__(self):
        self.customers = {}  # email -> customer id
        self.active: Set[Tuple[str, str]] = set()  # (customer id, price id)
        self.sessions: List[dict] = []
        self.calls: List[str] = []
        self.session_url: Optional[str] = CHECKOUT_URL

    async def find_customer_id(self, email: str) -> Optional[str]:
        self.calls.append("find_customer_id")
        return self.customers.get(email)

    async def has_active_subscription(self, customer_id: str, price_id: str) -> bool:
        self.calls.append("has_active_subscription")
        return (customer_id, price_id) in self.active

    async def create_checkout_session(
        self,
        price_id: str,
        success_url: str,
        cancel_url: str,
        customer_id: Optional[str] = None,
        customer_email: Optional[str] = None,
    ) -> CheckoutSession:
        self.calls.append("create_checkout_session")
        session = {
            "id": f"cs_test_{len(self.sessions) + 1}",
            "price_id": price_id,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "customer_id": customer_id,
            "customer_email": customer_email,
        }
        self.sessions.append(session)
        return CheckoutSession(id=session["id"], url=self.session_url)


@pytest.fixture
def gemini_stub() -> GeminiStub:
    return GeminiStub()


@pytest.fixture
def gemini_service(gemini_stub: GeminiStub) -> GeminiService:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(gemini_stub))
    return GeminiService(endpoint=GEMINI_URL, api_key="test-key", http_client=http_client)


@pytest.fixture
def quota_tracker() -> QuotaTracker:
    return QuotaTracker(InMemoryQuotaStore(), ceiling=10)


@pytest.fixture
def identity_provider() -> LocalIdentityProvider:
    return LocalIdentityProvider()


@pytest.fixture
def payment_provider() -> FakePaymentProvider:
    return FakePaymentProvider()


@pytest.fixture
def identity() -> SessionIdentity:
    return SessionIdentity(user_id="user-1", email="writer@example.com", access_token="token-1")


@pytest.fixture
def plan_catalog():
    settings = get_settings()
    return build_plan_catalog(settings.stripe_pro_price_id, settings.stripe_enterprise_price_id)


@pytest.fixture
def client(gemini_service, quota_tracker, identity_provider, payment_provider):
    """TestClient with every external provider replaced."""
    from app import dependencies
    from app.main import app

    app.dependency_overrides[dependencies.get_gemini_service] = lambda: gemini_service
    app.dependency_overrides[dependencies.get_quota_tracker] = lambda: quota_tracker
    app.dependency_overrides[dependencies.get_identity_provider] = lambda: identity_provider
    app.dependency_overrides[dependencies.get_payment_provider] = lambda: payment_provider
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def signed_up(client) -> dict:
    """Session data for a freshly registered user."""
    response = client.post(
        "/api/v1/auth/signup",
        json={"email": "writer@example.com", "password": "s3cret-pass"},
    )
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
def auth_headers(signed_up) -> dict:
    return {"Authorization": f"Bearer {signed_up['access_token']}"}
