"""Issues hosted checkout sessions for paid plans."""

from app.models.plan import Plan
from app.services.auth.identity_provider import IdentityProvider
from app.services.billing.payment_provider import PaymentProvider
from app.utils.exceptions import (
    AlreadySubscribedError,
    AuthRequiredError,
    MissingEmailError,
    MissingRedirectUrlError,
    ValidationError,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)


class CheckoutSessionIssuer:
    """Resolves the caller's email, guards against duplicate subscriptions, creates the session.

    Every step before the final create call is a read, so a failure part-way
    leaves nothing to undo. Nothing is retried.
    """

    def __init__(self, identity_provider: IdentityProvider, payment_provider: PaymentProvider):
        self.identity_provider = identity_provider
        self.payment_provider = payment_provider

    async def issue_checkout(self, access_token: str, plan: Plan, origin: str) -> str:
        """
        Create a checkout session for a paid plan and return its redirect URL.

        Args:
            access_token: Caller's bearer token
            plan: Paid plan to subscribe to
            origin: Base URL the provider sends the user back to

        Returns:
            Provider-issued checkout URL

        Raises:
            AuthRequiredError: No access token
            ValidationError: Plan has no provider price ID
            MissingEmailError: Token does not resolve to an email
            AlreadySubscribedError: Customer already actively holds this price
            MissingRedirectUrlError: Provider created a session without a URL
        """
        if not access_token:
            raise AuthRequiredError(message="No valid session found")
        if plan.is_free:
            raise ValidationError(message="Free plans do not need checkout", details={"plan": plan.id})

        identity = await self.identity_provider.get_user(access_token)
        email = identity.email if identity else None
        if not email:
            raise MissingEmailError()

        customer_id = await self.payment_provider.find_customer_id(email)
        if customer_id:
            if await self.payment_provider.has_active_subscription(customer_id, plan.price_id):
                logger.info("Customer %s already subscribed to %s", customer_id, plan.id)
                raise AlreadySubscribedError(details={"plan": plan.id})

        logger.info("Creating payment session for plan %s", plan.id)
        return_url = f"{origin.rstrip('/')}/"
        session = await self.payment_provider.create_checkout_session(
            price_id=plan.price_id,
            success_url=return_url,
            cancel_url=return_url,
            customer_id=customer_id,
            customer_email=None if customer_id else email,
        )
        logger.info("Payment session created: %s", session.id)

        if not session.url:
            raise MissingRedirectUrlError()
        return session.url
