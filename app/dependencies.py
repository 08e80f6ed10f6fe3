"""
Shared application dependencies.
Builds the provider adapters and services once per process and hands them to routes.
"""

from typing import Optional

from fastapi import Depends, Header

from app.config import Settings, get_settings
from app.models.identity import SessionIdentity
from app.models.plan import PlanCatalog, build_plan_catalog
from app.services.ai.gemini_service import GeminiService
from app.services.auth.identity_provider import (
    IdentityProvider,
    LocalIdentityProvider,
    SupabaseIdentityProvider,
)
from app.services.billing.checkout_issuer import CheckoutSessionIssuer
from app.services.billing.payment_provider import PaymentProvider, StripePaymentProvider
from app.services.billing.plan_selection import PlanSelectionService
from app.services.gating import GatingCoordinator
from app.services.generation_service import GenerationService
from app.services.quota.quota_store import InMemoryQuotaStore, LocalFileQuotaStore
from app.services.quota.quota_tracker import QuotaTracker
from app.utils.exceptions import AuthenticationError, AuthRequiredError
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Global Instances
_identity_provider: Optional[IdentityProvider] = None
_payment_provider: Optional[PaymentProvider] = None
_quota_tracker: Optional[QuotaTracker] = None
_gemini_service: Optional[GeminiService] = None


def build_identity_provider(settings: Settings) -> IdentityProvider:
    kind = settings.resolved_identity_provider()
    if kind == "supabase":
        logger.info("Using Supabase identity provider")
        return SupabaseIdentityProvider(settings.supabase_url, settings.supabase_anon_key)
    if kind == "firebase":
        from app.services.auth.firebase_provider import FirebaseIdentityProvider
        logger.info("Using Firebase identity provider")
        return FirebaseIdentityProvider(settings.firebase_credentials_path)
    if kind != "local":
        raise ValueError(f"Unknown identity provider: {kind}")
    logger.info("No identity provider configured - running in LOCAL DEV mode")
    return LocalIdentityProvider()


def build_quota_tracker(settings: Settings) -> QuotaTracker:
    if settings.quota_store == "file":
        store = LocalFileQuotaStore(settings.quota_data_dir)
        logger.info("Using file quota store at %s", settings.quota_data_dir)
    else:
        store = InMemoryQuotaStore()
        logger.info("Using in-memory quota store")
    return QuotaTracker(store, ceiling=settings.generation_quota_limit)


def build_gemini_service(settings: Settings) -> GeminiService:
    if not settings.gemini_api_key:
        logger.warning("No Gemini API key - generation requests will be rejected by the provider")
    return GeminiService(
        endpoint=settings.gemini_endpoint,
        api_key=settings.gemini_api_key,
        timeout=settings.gemini_timeout,
    )


def build_payment_provider(settings: Settings) -> PaymentProvider:
    if not settings.stripe_secret_key:
        logger.warning("No Stripe secret key - checkout will be unavailable")
    return StripePaymentProvider(settings.stripe_secret_key)


def get_identity_provider(settings: Settings = Depends(get_settings)) -> IdentityProvider:
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = build_identity_provider(settings)
    return _identity_provider


def get_payment_provider(settings: Settings = Depends(get_settings)) -> PaymentProvider:
    global _payment_provider
    if _payment_provider is None:
        _payment_provider = build_payment_provider(settings)
    return _payment_provider


def get_quota_tracker(settings: Settings = Depends(get_settings)) -> QuotaTracker:
    global _quota_tracker
    if _quota_tracker is None:
        _quota_tracker = build_quota_tracker(settings)
    return _quota_tracker


def get_gemini_service(settings: Settings = Depends(get_settings)) -> GeminiService:
    global _gemini_service
    if _gemini_service is None:
        _gemini_service = build_gemini_service(settings)
    return _gemini_service


def get_plan_catalog(settings: Settings = Depends(get_settings)) -> PlanCatalog:
    return build_plan_catalog(settings.stripe_pro_price_id, settings.stripe_enterprise_price_id)


def get_generation_service(
    quota: QuotaTracker = Depends(get_quota_tracker),
    client: GeminiService = Depends(get_gemini_service),
) -> GenerationService:
    return GenerationService(GatingCoordinator(quota.ceiling), quota, client)


def get_checkout_issuer(
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    payment_provider: PaymentProvider = Depends(get_payment_provider),
) -> CheckoutSessionIssuer:
    return CheckoutSessionIssuer(identity_provider, payment_provider)


def get_plan_selection_service(
    catalog: PlanCatalog = Depends(get_plan_catalog),
    issuer: CheckoutSessionIssuer = Depends(get_checkout_issuer),
) -> PlanSelectionService:
    return PlanSelectionService(catalog, issuer)


def get_bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Bearer token from the Authorization header, if one was sent."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer "):].strip()
    return token or None


async def resolve_optional_identity(
    token: Optional[str],
    identity_provider: IdentityProvider,
) -> Optional[SessionIdentity]:
    """Identity behind the token if one was sent, otherwise None.

    Called from route bodies, after request validation.
    """
    if token is None:
        return None
    return await identity_provider.get_user(token)


async def get_current_identity(
    token: Optional[str] = Depends(get_bearer_token),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> SessionIdentity:
    """Get current identity from the bearer token."""
    if token is None:
        raise AuthRequiredError(message="Authorization header missing")
    identity = await identity_provider.get_user(token)
    if identity is None:
        raise AuthenticationError(message="Invalid or expired token")
    return identity


def reset_dependencies() -> None:
    """Forget every cached provider and service."""
    global _identity_provider, _payment_provider, _quota_tracker, _gemini_service
    _identity_provider = None
    _payment_provider = None
    _quota_tracker = None
    _gemini_service = None
