"""
ContentCraft Models
Domain data models shared by services and API.
"""

from app.models.identity import SessionIdentity
from app.models.generation import (
    ContentStyle,
    ContentLength,
    GenerationErrorKind,
    GenerationRequest,
    GenerationResult,
)
from app.models.plan import CapabilityTier, Plan, PlanCatalog, build_plan_catalog
from app.models.quota import DEFAULT_QUOTA_CEILING, QuotaState

__all__ = [
    "SessionIdentity",
    "ContentStyle",
    "ContentLength",
    "GenerationErrorKind",
    "GenerationRequest",
    "GenerationResult",
    "CapabilityTier",
    "Plan",
    "PlanCatalog",
    "build_plan_catalog",
    "DEFAULT_QUOTA_CEILING",
    "QuotaState",
]
