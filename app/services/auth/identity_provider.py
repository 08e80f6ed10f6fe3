"""
Identity provider adapters.
The core never handles passwords or tokens itself; it asks one of these.
"""

import hashlib
import secrets
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from app.models.identity import SessionIdentity
from app.utils.exceptions import AuthenticationError, TransportError
from app.utils.logger import get_logger

logger = get_logger(__name__)

EMAIL_NOT_CONFIRMED = "Email not confirmed"


class IdentityProvider(ABC):
    """Narrow contract over an external identity service."""

    name: str = "abstract"

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> Optional[SessionIdentity]:
        """Register a user. Returns None when the provider wants the email confirmed first."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> SessionIdentity:
        """Exchange credentials for a session."""

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        """End the session behind the token."""

    @abstractmethod
    async def refresh(self, refresh_token: str) -> SessionIdentity:
        """Exchange a refresh token for a new session."""

    @abstractmethod
    async def get_user(self, access_token: str) -> Optional[SessionIdentity]:
        """Verify a token. Returns None if the provider does not recognise it."""

    async def aclose(self) -> None:
        return None


# Local Auth Store (for dev mode without an external provider)
class LocalIdentityProvider(IdentityProvider):
    """In-process user/token store. Development and tests only."""

    name = "local"

    def __init__(self):
        self._users: Dict[str, dict] = {}  # email -> user
        self._tokens: Dict[str, str] = {}  # access token -> uid
        self._refresh_tokens: Dict[str, str] = {}  # refresh token -> uid

    @staticmethod
    def _hash_password(password: str) -> str:
        return hashlib.sha256(password.encode()).hexdigest()

    def _issue(self, user: dict) -> SessionIdentity:
        access_token = secrets.token_hex(32)
        refresh_token = secrets.token_hex(32)
        self._tokens[access_token] = user["uid"]
        self._refresh_tokens[refresh_token] = user["uid"]
        return SessionIdentity(
            user_id=user["uid"],
            email=user["email"],
            access_token=access_token,
            refresh_token=refresh_token,
        )

    def _user_by_uid(self, uid: str) -> Optional[dict]:
        return next((u for u in self._users.values() if u["uid"] == uid), None)

    async def sign_up(self, email: str, password: str) -> Optional[SessionIdentity]:
        email = email.strip().lower()
        if not email or "@" not in email:
            raise AuthenticationError(message="Invalid email address")
        if len(password) < 6:
            raise AuthenticationError(message="Password should be at least 6 characters")
        if email in self._users:
            raise AuthenticationError(message="User already registered")

        uid = hashlib.sha256(email.encode()).hexdigest()[:28]
        user = {"uid": uid, "email": email, "password": self._hash_password(password)}
        self._users[email] = user
        logger.info("Local user created: %s", uid)
        return self._issue(user)

    async def sign_in(self, email: str, password: str) -> SessionIdentity:
        user = self._users.get(email.strip().lower())
        if not user or user["password"] != self._hash_password(password):
            raise AuthenticationError(message="Invalid login credentials")
        return self._issue(user)

    async def sign_out(self, access_token: str) -> None:
        uid = self._tokens.pop(access_token, None)
        if uid is None:
            return
        self._refresh_tokens = {t: u for t, u in self._refresh_tokens.items() if u != uid}

    async def refresh(self, refresh_token: str) -> SessionIdentity:
        uid = self._refresh_tokens.pop(refresh_token, None)
        user = self._user_by_uid(uid) if uid else None
        if user is None:
            raise AuthenticationError(message="Invalid refresh token")
        return self._issue(user)

    async def get_user(self, access_token: str) -> Optional[SessionIdentity]:
        uid = self._tokens.get(access_token)
        user = self._user_by_uid(uid) if uid else None
        if user is None:
            return None
        return SessionIdentity(user_id=user["uid"], email=user["email"], access_token=access_token)


class SupabaseIdentityProvider(IdentityProvider):
    """Supabase GoTrue over REST."""

    name = "supabase"
    DEFAULT_TIMEOUT = 15.0

    def __init__(
        self,
        url: str,
        anon_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not url or not anon_key:
            raise ValueError("Supabase URL and anon key are required")
        self.base_url = f"{url.rstrip('/')}/auth/v1"
        self.anon_key = anon_key
        self.timeout = timeout
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        headers = {"apikey": self.anon_key, "Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        access_token: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            return await self._client.request(
                method,
                f"{self.base_url}{path}",
                headers=self._headers(access_token),
                **kwargs,
            )
        except httpx.HTTPError as e:
            logger.error("Identity provider request %s %s failed: %s", method, path, e)
            raise TransportError(message="Identity provider is unreachable") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"Identity provider request failed with status {response.status_code}"
        for key in ("error_description", "msg", "message", "error"):
            if isinstance(body, dict) and body.get(key):
                return str(body[key])
        return f"Identity provider request failed with status {response.status_code}"

    def _raise_for_auth(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        message = self._error_message(response)
        if EMAIL_NOT_CONFIRMED.lower() in message.lower():
            message = EMAIL_NOT_CONFIRMED
        if response.status_code >= 500:
            raise TransportError(message=message, details={"status": response.status_code})
        raise AuthenticationError(message=message, details={"status": response.status_code})

    @staticmethod
    def _session_from(body: Dict[str, Any]) -> Optional[SessionIdentity]:
        access_token = body.get("access_token")
        user = body.get("user") or {}
        if not access_token or not user.get("id"):
            return None
        return SessionIdentity(
            user_id=user["id"],
            email=user.get("email"),
            access_token=access_token,
            refresh_token=body.get("refresh_token"),
        )

    async def sign_up(self, email: str, password: str) -> Optional[SessionIdentity]:
        response = await self._request("POST", "/signup", json={"email": email, "password": password})
        self._raise_for_auth(response)
        # Without auto-confirm the provider returns only the user record
        return self._session_from(response.json())

    async def sign_in(self, email: str, password: str) -> SessionIdentity:
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        self._raise_for_auth(response)
        identity = self._session_from(response.json())
        if identity is None:
            raise AuthenticationError(message="Identity provider returned no session")
        return identity

    async def sign_out(self, access_token: str) -> None:
        response = await self._request("POST", "/logout", access_token=access_token)
        # An already-invalid token means the session is gone anyway
        if response.status_code in (401, 403, 404):
            return
        self._raise_for_auth(response)

    async def refresh(self, refresh_token: str) -> SessionIdentity:
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        self._raise_for_auth(response)
        identity = self._session_from(response.json())
        if identity is None:
            raise AuthenticationError(message="Identity provider returned no session")
        return identity

    async def get_user(self, access_token: str) -> Optional[SessionIdentity]:
        if not access_token:
            return None
        response = await self._request("GET", "/user", access_token=access_token)
        if response.status_code in (401, 403):
            return None
        if not response.is_success:
            raise TransportError(
                message=f"Identity provider request failed with status {response.status_code}",
                details={"status": response.status_code},
            )
        user = response.json()
        if not user.get("id"):
            return None
        return SessionIdentity(user_id=user["id"], email=user.get("email"), access_token=access_token)

    async def aclose(self) -> None:
        await self._client.aclose()
