"""Hosted checkout issuance endpoint.

Keeps the flat contract browser clients already use: ``200 {url}`` on
success, ``500 {error}`` on any failure. Failures are rendered by
``ErrorHandlerMiddleware`` through ``FLAT_ERROR_ROUTES``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError

from app.api.v1.subscriptions import resolve_origin
from app.config import Settings, get_settings
from app.dependencies import get_bearer_token, get_checkout_issuer, get_plan_catalog
from app.models.plan import PlanCatalog
from app.schemas.responses import CheckoutErrorResponse, CheckoutUrlResponse
from app.schemas.subscription_schema import CreateCheckoutSessionRequest
from app.services.billing.checkout_issuer import CheckoutSessionIssuer
from app.utils.exceptions import AuthRequiredError, ValidationError
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


async def _parse_body(request: Request) -> CreateCheckoutSessionRequest:
    try:
        return CreateCheckoutSessionRequest.model_validate(await request.json())
    except (ValueError, PydanticValidationError) as e:
        raise ValidationError(message="priceId is required") from e


@router.post(
    "/create-checkout-session",
    response_model=CheckoutUrlResponse,
    responses={500: {"model": CheckoutErrorResponse}},
    tags=["Checkout"],
)
async def create_checkout_session(
    request: Request,
    token: Optional[str] = Depends(get_bearer_token),
    issuer: CheckoutSessionIssuer = Depends(get_checkout_issuer),
    catalog: PlanCatalog = Depends(get_plan_catalog),
    settings: Settings = Depends(get_settings),
) -> CheckoutUrlResponse:
    """Create a checkout session for the plan behind ``priceId``."""
    body = await _parse_body(request)
    if token is None:
        raise AuthRequiredError(message="No valid session found")

    plan = catalog.by_price_id(body.price_id)
    if plan is None:
        raise ValidationError(message="Unknown plan", details={"price_id": body.price_id})

    url = await issuer.issue_checkout(token, plan, resolve_origin(request, settings))
    logger.info(f"Checkout URL issued for plan {plan.id}")
    return CheckoutUrlResponse(url=url)
