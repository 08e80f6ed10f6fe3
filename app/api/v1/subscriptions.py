"""Plan listing and plan selection endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from app.config import Settings, get_settings
from app.dependencies import get_bearer_token, get_plan_catalog, get_plan_selection_service
from app.models.plan import PlanCatalog
from app.schemas.responses import ApiResponse
from app.schemas.subscription_schema import PlanInfo, SelectPlanRequest, SelectPlanResponse
from app.services.billing.plan_selection import PlanSelectionService
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


def resolve_origin(request: Request, settings: Settings) -> str:
    """Where checkout should send the user back to."""
    origin = request.headers.get("origin") or settings.public_app_url
    if origin:
        return origin
    return str(request.base_url).rstrip("/")


@router.get("/plans", response_model=ApiResponse[dict])
async def get_plans(catalog: PlanCatalog = Depends(get_plan_catalog)) -> ApiResponse[dict]:
    """
    Get available plans.

    Returns:
        ApiResponse with list of plans
    """
    return ApiResponse.success_response(
        {"plans": catalog.to_list(), "total": len(catalog)},
        "Plans retrieved successfully",
    )


@router.post("/select", response_model=ApiResponse[SelectPlanResponse])
async def select_plan(
    body: SelectPlanRequest,
    request: Request,
    token: Optional[str] = Depends(get_bearer_token),
    service: PlanSelectionService = Depends(get_plan_selection_service),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[SelectPlanResponse]:
    """
    Select a plan.

    The free plan succeeds immediately without contacting the payment
    provider. Paid plans return a checkout URL to redirect the user to.
    """
    selection = await service.select(body.plan_id, token, resolve_origin(request, settings))
    logger.info(f"Plan selected: {selection.plan.id}")
    return ApiResponse.success_response(
        SelectPlanResponse(
            plan=PlanInfo(**selection.plan.to_dict()),
            checkout_url=selection.checkout_url,
        ),
        selection.message,
    )
