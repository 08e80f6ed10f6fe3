"""Client-side session holder with auth-state change notifications."""

from enum import Enum
from typing import Callable, Dict, Optional

from app.models.identity import SessionIdentity
from app.services.auth.identity_provider import IdentityProvider
from app.utils.logger import get_logger

logger = get_logger(__name__)


class AuthEvent(str, Enum):
    """Kinds of identity change published to listeners."""
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


AuthListener = Callable[[AuthEvent, Optional[SessionIdentity]], None]


class Subscription:
    """Handle returned by AuthSession.on_auth_state_change."""

    def __init__(self, session: "AuthSession", key: int):
        self._session = session
        self._key = key

    @property
    def active(self) -> bool:
        return self._key in self._session._listeners

    def unsubscribe(self) -> None:
        self._session._listeners.pop(self._key, None)


class AuthSession:
    """Holds the current identity for one client and tells listeners when it changes."""

    def __init__(self, provider: IdentityProvider):
        self.provider = provider
        self._identity: Optional[SessionIdentity] = None
        self._listeners: Dict[int, AuthListener] = {}
        self._next_key = 0

    @property
    def identity(self) -> Optional[SessionIdentity]:
        return self._identity

    def get_session(self) -> Optional[SessionIdentity]:
        return self._identity

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        key = self._next_key
        self._next_key += 1
        self._listeners[key] = listener
        return Subscription(self, key)

    def _set(self, event: AuthEvent, identity: Optional[SessionIdentity]) -> None:
        self._identity = identity
        for listener in list(self._listeners.values()):
            try:
                listener(event, identity)
            except Exception:
                logger.exception("Auth state listener failed on %s", event.value)

    async def restore(self, access_token: str) -> Optional[SessionIdentity]:
        """Adopt an existing token, if the provider still accepts it."""
        identity = await self.provider.get_user(access_token)
        if identity is not None:
            self._set(AuthEvent.SIGNED_IN, identity)
        return identity

    async def sign_up(self, email: str, password: str) -> Optional[SessionIdentity]:
        identity = await self.provider.sign_up(email, password)
        if identity is not None:
            self._set(AuthEvent.SIGNED_IN, identity)
        return identity

    async def sign_in(self, email: str, password: str) -> SessionIdentity:
        identity = await self.provider.sign_in(email, password)
        self._set(AuthEvent.SIGNED_IN, identity)
        return identity

    async def sign_out(self) -> None:
        if self._identity is not None:
            await self.provider.sign_out(self._identity.access_token)
        self._set(AuthEvent.SIGNED_OUT, None)

    async def refresh(self) -> SessionIdentity:
        if self._identity is None or not self._identity.refresh_token:
            raise ValueError("No refreshable session")
        identity = await self.provider.refresh(self._identity.refresh_token)
        self._set(AuthEvent.TOKEN_REFRESHED, identity)
        return identity
