"""
Auth Request/Response Schemas
API schemas for sign-up, sign-in and session management.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from app.models.identity import SessionIdentity


class CredentialsRequest(BaseModel):
    """Email/password pair for sign-up and sign-in."""

    email: str = Field(min_length=3, max_length=254, description="User email")
    password: str = Field(min_length=6, description="Password (minimum 6 characters)")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Loose email shape check; the identity provider has the final say."""
        v = v.strip()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class RefreshRequest(BaseModel):
    """Refresh token exchange request."""

    refresh_token: str = Field(min_length=1, description="Refresh token")


class SessionResponse(BaseModel):
    """Session returned after sign-in, sign-up or refresh."""

    user_id: str = Field(description="User ID")
    email: Optional[str] = Field(default=None, description="User email")
    access_token: str = Field(description="Bearer access token")
    refresh_token: Optional[str] = Field(default=None, description="Refresh token")
    token_type: str = Field(default="bearer", description="Token type")

    @classmethod
    def from_identity(cls, identity: SessionIdentity) -> "SessionResponse":
        return cls(
            user_id=identity.user_id,
            email=identity.email,
            access_token=identity.access_token,
            refresh_token=identity.refresh_token,
        )
