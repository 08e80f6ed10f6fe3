"""Decides whether a generation request may proceed."""

from enum import Enum
from typing import Optional

from app.models.generation import GenerationRequest
from app.models.identity import SessionIdentity
from app.models.quota import DEFAULT_QUOTA_CEILING, QuotaState, check
from app.utils.exceptions import ValidationError


class GateDecision(str, Enum):
    """Outcome of gating a generation request."""
    ALLOW = "allow"
    REQUIRE_SIGN_IN = "require_sign_in"
    REQUIRE_UPGRADE = "require_upgrade"


class GatingCoordinator:
    """Stateless gate: validation first, then identity, then quota."""

    def __init__(self, ceiling: int = DEFAULT_QUOTA_CEILING):
        self.ceiling = ceiling

    def validate(self, request: GenerationRequest) -> None:
        """
        Reject a request with an empty topic. Needs no identity or quota.

        Raises:
            ValidationError: If the topic is empty
        """
        if not request.has_topic:
            raise ValidationError(message="Please enter a topic", details={"field": "topic"})

    def request_generation(
        self,
        request: GenerationRequest,
        identity: Optional[SessionIdentity],
        quota_state: QuotaState,
    ) -> GateDecision:
        """
        Gate one generation request. Has no side effects.

        Raises:
            ValidationError: If the topic is empty
        """
        self.validate(request)

        if identity is None:
            return GateDecision.REQUIRE_SIGN_IN

        if not check(quota_state, self.ceiling):
            return GateDecision.REQUIRE_UPGRADE

        return GateDecision.ALLOW
