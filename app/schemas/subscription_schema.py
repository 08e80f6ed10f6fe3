"""
Subscription Request/Response Schemas
API schemas for plan listing, plan selection and checkout.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class PlanInfo(BaseModel):
    """Information about a plan."""

    id: str = Field(description="Plan identifier")
    name: str = Field(description="Plan display name")
    price: str = Field(description="Display price")
    price_usd: float = Field(ge=0, description="Monthly price in USD")
    tier: str = Field(description="Capability tier")
    price_id: Optional[str] = Field(default=None, description="Payment provider price ID")
    features: List[str] = Field(description="List of features included")
    popular: bool = Field(default=False, description="Highlighted plan")
    is_free: bool = Field(description="Whether the plan skips checkout")


class SelectPlanRequest(BaseModel):
    """Request to select a plan."""

    plan_id: str = Field(min_length=1, description="Plan to select")


class SelectPlanResponse(BaseModel):
    """Result of selecting a plan."""

    plan: PlanInfo = Field(description="Selected plan")
    checkout_url: Optional[str] = Field(default=None, description="Where to send the user, for paid plans")


class CreateCheckoutSessionRequest(BaseModel):
    """Checkout endpoint request body."""

    model_config = ConfigDict(populate_by_name=True)

    price_id: str = Field(alias="priceId", min_length=1, description="Payment provider price ID")
