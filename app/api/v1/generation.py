"""AI content generation endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, status

from app.dependencies import (
    get_bearer_token,
    get_current_identity,
    get_generation_service,
    get_identity_provider,
    get_quota_tracker,
    resolve_optional_identity,
)
from app.models.generation import GenerationErrorKind
from app.models.identity import SessionIdentity
from app.schemas.generation_schema import (
    GenerateContentRequest,
    GenerateContentResponse,
    QuotaResponse,
)
from app.schemas.responses import ApiResponse
from app.services.auth.identity_provider import IdentityProvider
from app.services.generation_service import GenerationService
from app.services.quota.quota_tracker import QuotaTracker
from app.utils.exceptions import ContentCraftException, FormatError, TransportError
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


def _error_for(kind: GenerationErrorKind, message: str, details: dict) -> ContentCraftException:
    if kind is GenerationErrorKind.FORMAT:
        return FormatError(message=message, details=details)
    return TransportError(message=message, details=details)


@router.post("", response_model=ApiResponse[GenerateContentResponse], status_code=status.HTTP_200_OK)
async def generate_content(
    request: GenerateContentRequest,
    token: Optional[str] = Depends(get_bearer_token),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    service: GenerationService = Depends(get_generation_service),
) -> ApiResponse[GenerateContentResponse]:
    """
    Generate a piece of content for the signed-in user.

    Empty topic, missing sign-in and exhausted quota are rejected before any
    provider call. A failed provider call does not consume quota.
    """
    generation_request = request.to_domain()
    # Topic is checked before the identity provider is contacted
    service.gate.validate(generation_request)
    identity = await resolve_optional_identity(token, identity_provider)

    outcome = await service.generate(generation_request, identity)
    quota = QuotaResponse(**outcome.usage())

    if not outcome.result.ok:
        raise _error_for(
            outcome.result.error_kind,
            outcome.result.error,
            {"text": "", "error": outcome.result.error, "quota": quota.model_dump()},
        )

    logger.info(f"Content generated for user {identity.user_id}")
    return ApiResponse.success_response(
        GenerateContentResponse(text=outcome.result.text, quota=quota),
        "Content generated successfully!",
    )


@router.get("/quota", response_model=ApiResponse[QuotaResponse])
async def get_quota(
    identity: SessionIdentity = Depends(get_current_identity),
    tracker: QuotaTracker = Depends(get_quota_tracker),
) -> ApiResponse[QuotaResponse]:
    """Current generation usage for the signed-in user."""
    return ApiResponse.success_response(
        QuotaResponse(**tracker.usage(identity.user_id)),
        "Quota retrieved successfully",
    )
