"""
Plan Models
Defines the static subscription plan catalog.
"""

from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


class CapabilityTier(str, Enum):
    """Capability tier granted by a plan."""
    BASIC = "BASIC"
    PRO = "PRO"
    ENTERPRISE = "ENTERPRISE"


class Plan(BaseModel):
    """A plan a user can pick. Only paid plans carry a provider price ID."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Plan identifier")
    name: str = Field(description="Display name")
    price_usd: float = Field(ge=0, description="Monthly price in USD")
    tier: CapabilityTier = Field(description="Capability tier")
    price_id: Optional[str] = Field(default=None, min_length=1, description="Payment provider price ID")
    features: Tuple[str, ...] = Field(default_factory=tuple, description="Feature list")
    popular: bool = Field(default=False, description="Highlighted in plan selection")

    @property
    def is_free(self) -> bool:
        return self.price_id is None

    @property
    def display_price(self) -> str:
        return "Free" if self.is_free else f"${self.price_usd:.2f}"

    def to_dict(self) -> dict:
        """Convert plan to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "price": self.display_price,
            "price_usd": self.price_usd,
            "tier": self.tier.value,
            "price_id": self.price_id,
            "features": list(self.features),
            "popular": self.popular,
            "is_free": self.is_free,
        }


class PlanCatalog:
    """Immutable, ordered collection of plans."""

    def __init__(self, plans: Tuple[Plan, ...]):
        self._plans = tuple(plans)

    def __iter__(self):
        return iter(self._plans)

    def __len__(self) -> int:
        return len(self._plans)

    def get(self, plan_id: str) -> Optional[Plan]:
        return next((p for p in self._plans if p.id == plan_id), None)

    def by_price_id(self, price_id: str) -> Optional[Plan]:
        if not price_id:
            return None
        return next((p for p in self._plans if p.price_id == price_id), None)

    def to_list(self) -> list:
        return [p.to_dict() for p in self._plans]


def build_plan_catalog(pro_price_id: str, enterprise_price_id: str) -> PlanCatalog:
    """Build the catalog with the payment provider's price IDs.

    Raises:
        ValueError: If either paid plan has no price ID
    """
    if not (pro_price_id or "").strip() or not (enterprise_price_id or "").strip():
        raise ValueError(
            "Paid plans need payment provider price IDs (STRIPE_PRO_PRICE_ID, STRIPE_ENTERPRISE_PRICE_ID)"
        )
    return PlanCatalog((
        Plan(
            id="basic",
            name="Basic Plan",
            price_usd=0.0,
            tier=CapabilityTier.BASIC,
            features=(
                "Generate up to 10 articles per month",
                "Basic writing styles",
                "Standard support",
            ),
        ),
        Plan(
            id="pro",
            name="Pro Plan",
            price_usd=19.99,
            tier=CapabilityTier.PRO,
            price_id=pro_price_id,
            features=(
                "Generate up to 50 articles per month",
                "Advanced writing styles",
                "Priority support",
                "Custom templates",
            ),
            popular=True,
        ),
        Plan(
            id="enterprise",
            name="Enterprise Plan",
            price_usd=49.99,
            tier=CapabilityTier.ENTERPRISE,
            price_id=enterprise_price_id,
            features=(
                "Unlimited article generation",
                "All writing styles",
                "24/7 Premium support",
                "Custom templates",
                "API access",
            ),
        ),
    ))
