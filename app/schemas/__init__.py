"""
ContentCraft Schemas
Pydantic request/response schemas for API validation and documentation.
"""

from app.schemas.auth_schema import (
    CredentialsRequest,
    RefreshRequest,
    SessionResponse,
)
from app.schemas.generation_schema import (
    GenerateContentRequest,
    GenerateContentResponse,
    QuotaResponse,
)
from app.schemas.responses import (
    ApiResponse,
    CheckoutErrorResponse,
    CheckoutUrlResponse,
)
from app.schemas.subscription_schema import (
    CreateCheckoutSessionRequest,
    PlanInfo,
    SelectPlanRequest,
    SelectPlanResponse,
)

__all__ = [
    "CredentialsRequest",
    "RefreshRequest",
    "SessionResponse",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "QuotaResponse",
    "ApiResponse",
    "CheckoutErrorResponse",
    "CheckoutUrlResponse",
    "CreateCheckoutSessionRequest",
    "PlanInfo",
    "SelectPlanRequest",
    "SelectPlanResponse",
]
