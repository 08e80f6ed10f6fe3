"""
Tests for the end-to-end generation pipeline.
"""

import pytest

from app.models.generation import ContentLength, ContentStyle, GenerationRequest
from app.services.gating import GatingCoordinator
from app.services.generation_service import GenerationService
from app.utils.exceptions import AuthRequiredError, QuotaExhaustedError, ValidationError

from tests.conftest import gemini_payload


@pytest.fixture
def service(quota_tracker, gemini_service) -> GenerationService:
    return GenerationService(GatingCoordinator(quota_tracker.ceiling), quota_tracker, gemini_service)


def _request(topic: str = "space travel") -> GenerationRequest:
    return GenerationRequest(topic=topic, style=ContentStyle.BLOG, length=ContentLength.SHORT)


def _seed(quota_tracker, user_id: str, count: int) -> None:
    quota_tracker.store.set(user_id, count)


class TestGenerationService:
    """Tests for GenerationService.generate."""

    @pytest.mark.asyncio
    async def test_success_increments_quota(self, service, quota_tracker, identity, gemini_stub):
        """Test a signed-in user at 3 gets text back and moves to 4."""
        _seed(quota_tracker, identity.user_id, 3)
        gemini_stub.body = gemini_payload("Rockets are fun.")

        outcome = await service.generate(_request(), identity)

        assert outcome.result.text == "Rockets are fun."
        assert outcome.quota.count == 4
        assert quota_tracker.state_for(identity.user_id).count == 4
        assert outcome.usage() == {"used": 4, "limit": 10, "remaining": 6}
        assert "Write a short blog about: space travel" in gemini_stub.last_prompt

    @pytest.mark.asyncio
    async def test_failure_leaves_quota_unchanged(self, service, quota_tracker, identity, gemini_stub):
        """Test a provider failure is returned and does not consume quota."""
        _seed(quota_tracker, identity.user_id, 3)
        gemini_stub.status_code = 429

        outcome = await service.generate(_request(), identity)

        assert outcome.result.error == "API request failed with status 429"
        assert outcome.result.text == ""
        assert outcome.quota.count == 3
        assert quota_tracker.state_for(identity.user_id).count == 3

    @pytest.mark.asyncio
    async def test_no_identity_requires_sign_in(self, service, gemini_stub):
        """Test an anonymous request raises and never reaches the provider."""
        with pytest.raises(AuthRequiredError) as exc_info:
            await service.generate(_request(), None)

        assert exc_info.value.details == {"action": "sign_in"}
        assert gemini_stub.requests == []

    @pytest.mark.asyncio
    async def test_exhausted_quota_requires_upgrade(self, service, quota_tracker, identity, gemini_stub):
        """Test a user at the ceiling is sent to plan selection."""
        _seed(quota_tracker, identity.user_id, 10)

        with pytest.raises(QuotaExhaustedError) as exc_info:
            await service.generate(_request(), identity)

        assert exc_info.value.status_code == 429
        assert exc_info.value.details == {"action": "select_plan", "used": 10, "limit": 10}
        assert gemini_stub.requests == []
        assert quota_tracker.state_for(identity.user_id).count == 10

    @pytest.mark.asyncio
    async def test_empty_topic_checked_first(self, service, gemini_stub):
        """Test an empty topic is rejected even for anonymous callers."""
        with pytest.raises(ValidationError):
            await service.generate(_request("  "), None)

        assert gemini_stub.requests == []

    @pytest.mark.asyncio
    async def test_tenth_generation_then_blocked(self, service, quota_tracker, identity):
        """Test a user can generate up to the ceiling and no further."""
        for expected in range(1, 11):
            outcome = await service.generate(_request(), identity)
            assert outcome.quota.count == expected

        with pytest.raises(QuotaExhaustedError):
            await service.generate(_request(), identity)
