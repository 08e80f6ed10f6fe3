"""Generation pipeline: gate, call the provider, account for quota."""

from dataclasses import dataclass
from typing import Dict, Optional

from app.models.generation import GenerationRequest, GenerationResult
from app.models.identity import SessionIdentity
from app.models.quota import QuotaState
from app.services.ai.gemini_service import GeminiService
from app.services.gating import GateDecision, GatingCoordinator
from app.services.quota.quota_tracker import QuotaTracker
from app.utils.exceptions import AuthRequiredError, QuotaExhaustedError
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GenerationOutcome:
    """Generation result plus the quota state after accounting for it."""

    result: GenerationResult
    quota: QuotaState
    limit: int

    def usage(self) -> Dict[str, int]:
        return {
            "used": self.quota.count,
            "limit": self.limit,
            "remaining": max(0, self.limit - self.quota.count),
        }


class GenerationService:
    """Runs one generation request end to end."""

    def __init__(
        self,
        gate: GatingCoordinator,
        quota: QuotaTracker,
        client: GeminiService,
    ):
        self.gate = gate
        self.quota = quota
        self.client = client

    async def generate(
        self,
        request: GenerationRequest,
        identity: Optional[SessionIdentity],
    ) -> GenerationOutcome:
        """
        Gate the request and, if allowed, generate.

        Failed generations come back in the outcome and do not consume quota.

        Raises:
            ValidationError: Empty topic
            AuthRequiredError: No signed-in identity
            QuotaExhaustedError: Quota ceiling reached
        """
        state = self.quota.state_for(identity.user_id) if identity else QuotaState()
        decision = self.gate.request_generation(request, identity, state)

        if decision is GateDecision.REQUIRE_SIGN_IN:
            raise AuthRequiredError(details={"action": "sign_in"})
        if decision is GateDecision.REQUIRE_UPGRADE:
            logger.info("User %s reached quota %d/%d", identity.user_id, state.count, self.quota.ceiling)
            raise QuotaExhaustedError(
                details={"action": "select_plan", "used": state.count, "limit": self.quota.ceiling}
            )

        result = await self.client.generate(request.topic, request.style, request.length)

        if result.ok:
            state = self.quota.record_success(identity.user_id)
        else:
            logger.warning(
                "Generation failed for user %s: %s",
                identity.user_id,
                result.error,
                extra={"extra_data": {"error_kind": result.error_kind.value}},
            )

        return GenerationOutcome(result=result, quota=state, limit=self.quota.ceiling)
