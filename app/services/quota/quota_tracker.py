"""Per-user generation quota accounting."""

from typing import Dict

from app.models.quota import DEFAULT_QUOTA_CEILING, QuotaState, check, increment
from app.services.quota.quota_store import QuotaStore
from app.utils.logger import get_logger

logger = get_logger(__name__)


class QuotaTracker:
    """Reads and advances quota state through an injected store.

    There is no reset: once a user reaches the ceiling the counter stays
    there until something outside this class (an upgrade) changes the rules.
    """

    def __init__(self, store: QuotaStore, ceiling: int = DEFAULT_QUOTA_CEILING):
        if ceiling < 0:
            raise ValueError("ceiling must be non-negative")
        self.store = store
        self.ceiling = ceiling

    def state_for(self, user_id: str) -> QuotaState:
        return QuotaState(count=self.store.get(user_id))

    def has_room(self, user_id: str) -> bool:
        return check(self.state_for(user_id), self.ceiling)

    def record_success(self, user_id: str) -> QuotaState:
        """Advance the counter after a successful generation."""
        new_state = increment(self.state_for(user_id))
        self.store.set(user_id, new_state.count)
        logger.info("Quota for user %s now %d/%d", user_id, new_state.count, self.ceiling)
        return new_state

    def usage(self, user_id: str) -> Dict[str, int]:
        used = self.state_for(user_id).count
        return {
            "used": used,
            "limit": self.ceiling,
            "remaining": max(0, self.ceiling - used),
        }
