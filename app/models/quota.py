"""
Quota Model
Counter of successful generations and its two pure transitions.
"""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_QUOTA_CEILING = 10


class QuotaState(BaseModel):
    """Number of successful generations recorded for one user."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(default=0, ge=0, description="Successful generations so far")


def increment(state: QuotaState) -> QuotaState:
    """Record one successful generation. The only transition; it never decreases."""
    return QuotaState(count=state.count + 1)


def check(state: QuotaState, ceiling: int = DEFAULT_QUOTA_CEILING) -> bool:
    """True while the user is still under the ceiling."""
    return state.count < ceiling
