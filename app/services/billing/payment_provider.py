"""Payment provider adapter (Stripe)."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool

from app.utils.exceptions import ProviderNotConfiguredError
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckoutSession:
    """What the provider hands back after creating a hosted checkout."""
    id: str
    url: Optional[str]


class PaymentProvider(ABC):
    """The three payment-provider calls checkout issuance needs."""

    @abstractmethod
    async def find_customer_id(self, email: str) -> Optional[str]:
        """First customer registered under this email, if any."""

    @abstractmethod
    async def has_active_subscription(self, customer_id: str, price_id: str) -> bool:
        """Whether the customer already pays for this price."""

    @abstractmethod
    async def create_checkout_session(
        self,
        price_id: str,
        success_url: str,
        cancel_url: str,
        customer_id: Optional[str] = None,
        customer_email: Optional[str] = None,
    ) -> CheckoutSession:
        """Create a subscription-mode hosted checkout for one unit of the price."""


class StripePaymentProvider(PaymentProvider):
    """Stripe-backed payment provider. SDK calls are blocking and run in the threadpool."""

    def __init__(self, api_key: Optional[str]):
        self.api_key = api_key

    def _stripe(self):
        import stripe
        if not self.api_key:
            raise ProviderNotConfiguredError(message="Stripe API key not configured (STRIPE_SECRET_KEY)")
        stripe.api_key = self.api_key
        return stripe

    def _find_customer_id(self, email: str) -> Optional[str]:
        stripe = self._stripe()
        # Several customers may share an email; the first one wins
        customers = stripe.Customer.list(email=email, limit=1)
        if not customers.data:
            return None
        return str(customers.data[0].id)

    def _has_active_subscription(self, customer_id: str, price_id: str) -> bool:
        stripe = self._stripe()
        subscriptions = stripe.Subscription.list(
            customer=customer_id,
            status="active",
            price=price_id,
            limit=1,
        )
        return len(subscriptions.data) > 0

    def _create_checkout_session(self, params: Dict[str, Any]) -> CheckoutSession:
        stripe = self._stripe()
        session = stripe.checkout.Session.create(**params)
        return CheckoutSession(id=str(session.id), url=session.url)

    async def find_customer_id(self, email: str) -> Optional[str]:
        return await run_in_threadpool(self._find_customer_id, email)

    async def has_active_subscription(self, customer_id: str, price_id: str) -> bool:
        return await run_in_threadpool(self._has_active_subscription, customer_id, price_id)

    async def create_checkout_session(
        self,
        price_id: str,
        success_url: str,
        cancel_url: str,
        customer_id: Optional[str] = None,
        customer_email: Optional[str] = None,
    ) -> CheckoutSession:
        params: Dict[str, Any] = {
            "line_items": [{"price": price_id, "quantity": 1}],
            "mode": "subscription",
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if customer_id:
            params["customer"] = customer_id
        else:
            params["customer_email"] = customer_email
        return await run_in_threadpool(self._create_checkout_session, params)
