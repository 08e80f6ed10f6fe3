"""
Tests for checkout issuing and plan selection.
"""

from unittest.mock import AsyncMock

import pytest

from app.config import Settings
from app.models.identity import SessionIdentity
from app.models.plan import CapabilityTier, Plan, build_plan_catalog
from app.services.billing.checkout_issuer import CheckoutSessionIssuer
from app.services.billing.plan_selection import PlanSelectionService
from app.utils.exceptions import (
    AlreadySubscribedError,
    AuthRequiredError,
    MissingEmailError,
    MissingRedirectUrlError,
    ValidationError,
)

from tests.conftest import CHECKOUT_URL

ORIGIN = "https://app.example.com"


@pytest.fixture
def identity_provider_mock(identity):
    provider = AsyncMock()
    provider.get_user.return_value = identity
    return provider


@pytest.fixture
def issuer(identity_provider_mock, payment_provider) -> CheckoutSessionIssuer:
    return CheckoutSessionIssuer(identity_provider_mock, payment_provider)


class TestCheckoutSessionIssuer:
    """Tests for CheckoutSessionIssuer.issue_checkout."""

    @pytest.mark.asyncio
    async def test_new_customer_gets_session_by_email(self, issuer, payment_provider, plan_catalog, identity):
        """Test an unknown customer gets a session keyed by email."""
        plan = plan_catalog.get("pro")

        url = await issuer.issue_checkout("token-1", plan, ORIGIN)

        assert url == CHECKOUT_URL
        session = payment_provider.sessions[0]
        assert session["price_id"] == plan.price_id
        assert session["customer_id"] is None
        assert session["customer_email"] == identity.email
        assert session["success_url"] == f"{ORIGIN}/"
        assert session["cancel_url"] == f"{ORIGIN}/"

    @pytest.mark.asyncio
    async def test_existing_customer_without_subscription(self, issuer, payment_provider, plan_catalog, identity):
        """Test an existing customer is reused and the email is not sent again."""
        payment_provider.customers[identity.email] = "cus_123"

        await issuer.issue_checkout("token-1", plan_catalog.get("pro"), ORIGIN + "/")

        session = payment_provider.sessions[0]
        assert session["customer_id"] == "cus_123"
        assert session["customer_email"] is None
        assert session["success_url"] == f"{ORIGIN}/"

    @pytest.mark.asyncio
    async def test_already_subscribed_creates_no_session(self, issuer, payment_provider, plan_catalog, identity):
        """Test an active subscription to the same price stops before session creation."""
        plan = plan_catalog.get("pro")
        payment_provider.customers[identity.email] = "cus_123"
        payment_provider.active.add(("cus_123", plan.price_id))

        with pytest.raises(AlreadySubscribedError) as exc_info:
            await issuer.issue_checkout("token-1", plan, ORIGIN)

        assert exc_info.value.message == "You are already subscribed to this plan"
        assert payment_provider.sessions == []
        assert "create_checkout_session" not in payment_provider.calls

    @pytest.mark.asyncio
    async def test_subscription_to_other_price_allows_checkout(self, issuer, payment_provider, plan_catalog, identity):
        """Test holding Pro does not block buying Enterprise."""
        payment_provider.customers[identity.email] = "cus_123"
        payment_provider.active.add(("cus_123", plan_catalog.get("pro").price_id))

        url = await issuer.issue_checkout("token-1", plan_catalog.get("enterprise"), ORIGIN)

        assert url == CHECKOUT_URL

    @pytest.mark.asyncio
    async def test_missing_email(self, issuer, identity_provider_mock, payment_provider, plan_catalog):
        """Test an identity without email fails before any payment call."""
        identity_provider_mock.get_user.return_value = SessionIdentity(user_id="u", access_token="token-1")

        with pytest.raises(MissingEmailError) as exc_info:
            await issuer.issue_checkout("token-1", plan_catalog.get("pro"), ORIGIN)

        assert exc_info.value.message == "No email found"
        assert payment_provider.calls == []

    @pytest.mark.asyncio
    async def test_unrecognised_token(self, issuer, identity_provider_mock, payment_provider, plan_catalog):
        """Test a token the provider rejects is treated as having no email."""
        identity_provider_mock.get_user.return_value = None

        with pytest.raises(MissingEmailError):
            await issuer.issue_checkout("stale", plan_catalog.get("pro"), ORIGIN)

        assert payment_provider.calls == []

    @pytest.mark.asyncio
    async def test_no_token(self, issuer, identity_provider_mock, plan_catalog):
        """Test a missing token fails without contacting the identity provider."""
        with pytest.raises(AuthRequiredError):
            await issuer.issue_checkout("", plan_catalog.get("pro"), ORIGIN)

        identity_provider_mock.get_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_session_without_url(self, issuer, payment_provider, plan_catalog):
        """Test a session with no redirect URL is an error."""
        payment_provider.session_url = None

        with pytest.raises(MissingRedirectUrlError):
            await issuer.issue_checkout("token-1", plan_catalog.get("pro"), ORIGIN)

    @pytest.mark.asyncio
    async def test_free_plan_rejected(self, issuer, payment_provider, plan_catalog):
        """Test the issuer refuses plans with no price."""
        with pytest.raises(ValidationError):
            await issuer.issue_checkout("token-1", plan_catalog.get("basic"), ORIGIN)

        assert payment_provider.calls == []


class TestPlanSelectionService:
    """Tests for PlanSelectionService.select."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "token-1"])
    async def test_free_plan_makes_no_network_call(self, plan_catalog, token):
        """Test the free plan succeeds immediately, signed in or not."""
        issuer = AsyncMock()
        service = PlanSelectionService(plan_catalog, issuer)

        selection = await service.select("basic", token, ORIGIN)

        assert selection.checkout_url is None
        assert selection.message == "You now have access to the Basic Plan features!"
        issuer.issue_checkout.assert_not_called()

    @pytest.mark.asyncio
    async def test_paid_plan_returns_checkout_url(self, plan_catalog, issuer):
        """Test a paid plan goes through checkout."""
        service = PlanSelectionService(plan_catalog, issuer)

        selection = await service.select("pro", "token-1", ORIGIN)

        assert selection.checkout_url == CHECKOUT_URL
        assert selection.plan.id == "pro"

    @pytest.mark.asyncio
    async def test_paid_plan_requires_sign_in(self, plan_catalog):
        """Test a paid plan without a token asks the user to sign in."""
        issuer = AsyncMock()
        service = PlanSelectionService(plan_catalog, issuer)

        with pytest.raises(AuthRequiredError) as exc_info:
            await service.select("enterprise", None, ORIGIN)

        assert exc_info.value.message == "Please sign in to continue"
        issuer.issue_checkout.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_plan(self, plan_catalog):
        """Test an unknown plan ID is a validation error."""
        service = PlanSelectionService(plan_catalog, AsyncMock())

        with pytest.raises(ValidationError):
            await service.select("platinum", "token-1", ORIGIN)


class TestPlanCatalog:
    """Tests for the built-in plan list."""

    def test_three_plans_in_order(self, plan_catalog):
        """Test Basic, Pro and Enterprise are offered."""
        assert [plan.id for plan in plan_catalog] == ["basic", "pro", "enterprise"]

    def test_only_basic_is_free(self, plan_catalog):
        """Test paid plans carry a price ID and the free plan does not."""
        assert plan_catalog.get("basic").is_free
        assert not plan_catalog.get("pro").is_free
        assert not plan_catalog.get("enterprise").is_free

    def test_lookup_by_price_id(self, plan_catalog):
        """Test plans can be found by provider price ID."""
        pro = plan_catalog.get("pro")

        assert plan_catalog.by_price_id(pro.price_id) is pro
        assert plan_catalog.by_price_id("price_unknown") is None

    @pytest.mark.parametrize(
        "pro_price_id, enterprise_price_id",
        [("", "price_ent"), ("price_pro", ""), ("   ", "price_ent")],
    )
    def test_blank_price_id_rejected(self, pro_price_id, enterprise_price_id):
        """Test a paid plan cannot be built with an empty price ID."""
        with pytest.raises(ValueError, match="STRIPE_PRO_PRICE_ID"):
            build_plan_catalog(pro_price_id, enterprise_price_id)

    def test_blank_price_from_environment(self, monkeypatch):
        """Test blanking the price variable fails at catalog build instead of reaching checkout."""
        monkeypatch.setenv("STRIPE_PRO_PRICE_ID", "")

        settings = Settings()

        assert settings.stripe_pro_price_id == ""
        with pytest.raises(ValueError):
            build_plan_catalog(settings.stripe_pro_price_id, settings.stripe_enterprise_price_id)

    def test_plan_rejects_empty_price_id(self):
        """Test an empty price ID is not accepted as a paid plan."""
        with pytest.raises(ValueError):
            Plan(id="pro", name="Pro Plan", price_usd=19.99, tier=CapabilityTier.PRO, price_id="")
