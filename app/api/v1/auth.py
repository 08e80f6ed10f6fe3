"""Authentication endpoints, delegated to the configured identity provider."""

from typing import Optional

from fastapi import APIRouter, Depends, status

from app.dependencies import get_bearer_token, get_current_identity, get_identity_provider
from app.models.identity import SessionIdentity
from app.schemas.auth_schema import CredentialsRequest, RefreshRequest, SessionResponse
from app.schemas.responses import ApiResponse
from app.services.auth.identity_provider import IdentityProvider
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/signup", response_model=ApiResponse[SessionResponse], status_code=status.HTTP_201_CREATED)
async def signup(
    request: CredentialsRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> ApiResponse[SessionResponse]:
    """
    Create a new account.

    When the provider requires email confirmation no session is returned yet.
    """
    identity = await provider.sign_up(request.email, request.password)
    if identity is None:
        logger.info("Sign-up pending email confirmation")
        return ApiResponse(
            success=True,
            data=None,
            message="Please check your email to verify your account.",
        )

    logger.info(f"New user signed up: {identity.user_id}")
    return ApiResponse.success_response(SessionResponse.from_identity(identity), "Signup successful")


@router.post("/login", response_model=ApiResponse[SessionResponse])
async def login(
    request: CredentialsRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> ApiResponse[SessionResponse]:
    """Exchange email and password for a session."""
    identity = await provider.sign_in(request.email, request.password)
    logger.info(f"User signed in: {identity.user_id}")
    return ApiResponse.success_response(SessionResponse.from_identity(identity), "Successfully signed in.")


@router.post("/logout", response_model=ApiResponse[dict])
async def logout(
    token: Optional[str] = Depends(get_bearer_token),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> ApiResponse[dict]:
    """End the current session. Signing out without a session is a no-op."""
    if token:
        await provider.sign_out(token)
    return ApiResponse.success_response({}, "Successfully signed out.")


@router.post("/refresh", response_model=ApiResponse[SessionResponse])
async def refresh(
    request: RefreshRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> ApiResponse[SessionResponse]:
    """Exchange a refresh token for a new session."""
    identity = await provider.refresh(request.refresh_token)
    return ApiResponse.success_response(SessionResponse.from_identity(identity), "Session refreshed")


@router.get("/session", response_model=ApiResponse[dict])
async def get_session(
    identity: SessionIdentity = Depends(get_current_identity),
) -> ApiResponse[dict]:
    """Return the identity behind the bearer token."""
    return ApiResponse.success_response(identity.public_dict(), "Session retrieved successfully")
