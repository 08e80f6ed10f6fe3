"""
Firebase Admin identity adapter.
Only imports firebase_admin when actually needed (not in local dev mode).
"""

from typing import Optional

from fastapi.concurrency import run_in_threadpool

from app.models.identity import SessionIdentity
from app.services.auth.identity_provider import IdentityProvider
from app.utils.exceptions import AuthenticationError
from app.utils.logger import get_logger

logger = get_logger(__name__)


class FirebaseIdentityProvider(IdentityProvider):
    """Verifies Firebase ID tokens and manages users through the Admin SDK.

    Password sign-in and token refresh happen in the Firebase client SDK;
    the Admin SDK has no endpoint for them.
    """

    name = "firebase"

    def __init__(self, credentials_path: str) -> None:
        self.credentials_path = credentials_path
        self._initialized = False

    def initialize(self) -> None:
        """Initialize Firebase app if not already initialized."""
        if self._initialized:
            return

        import firebase_admin
        from firebase_admin import credentials

        try:
            if not firebase_admin._apps:
                cred = credentials.Certificate(self.credentials_path)
                firebase_admin.initialize_app(cred)
            self._initialized = True
            logger.info("Firebase initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize Firebase: {str(e)}")
            raise

    def _verify(self, token: str) -> Optional[dict]:
        self.initialize()
        from firebase_admin import auth

        try:
            return auth.verify_id_token(token)
        except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError) as e:
            logger.info(f"Token verification failed: {str(e)}")
            return None
        except ValueError as e:
            logger.info(f"Malformed token: {str(e)}")
            return None

    def _create_user(self, email: str, password: str) -> str:
        self.initialize()
        from firebase_admin import auth

        try:
            user = auth.create_user(email=email, password=password)
        except auth.EmailAlreadyExistsError as e:
            raise AuthenticationError(message="User already registered") from e
        except ValueError as e:
            raise AuthenticationError(message=str(e)) from e
        return user.uid

    def _revoke(self, uid: str) -> None:
        self.initialize()
        from firebase_admin import auth

        auth.revoke_refresh_tokens(uid)

    async def sign_up(self, email: str, password: str) -> Optional[SessionIdentity]:
        uid = await run_in_threadpool(self._create_user, email, password)
        logger.info(f"Firebase user created: {uid}")
        # The client SDK signs in to obtain an ID token
        return None

    async def sign_in(self, email: str, password: str) -> SessionIdentity:
        raise AuthenticationError(message="Password sign-in is handled by the Firebase client SDK")

    async def sign_out(self, access_token: str) -> None:
        decoded = await run_in_threadpool(self._verify, access_token)
        if decoded is None:
            return
        await run_in_threadpool(self._revoke, decoded["uid"])
        logger.info(f"Tokens revoked for user: {decoded['uid']}")

    async def refresh(self, refresh_token: str) -> SessionIdentity:
        raise AuthenticationError(message="Token refresh is handled by the Firebase client SDK")

    async def get_user(self, access_token: str) -> Optional[SessionIdentity]:
        if not access_token:
            return None
        decoded = await run_in_threadpool(self._verify, access_token)
        if decoded is None:
            return None
        return SessionIdentity(
            user_id=decoded["uid"],
            email=decoded.get("email"),
            access_token=access_token,
        )
