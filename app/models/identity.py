"""
Identity Model
Read-only view of the identity provider's session.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SessionIdentity(BaseModel):
    """Signed-in user as reported by the identity provider."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(description="Provider-issued user ID")
    email: Optional[str] = Field(default=None, description="User email, if the provider has one")
    access_token: str = Field(default="", description="Bearer token for outbound calls")
    refresh_token: Optional[str] = Field(default=None, description="Token used to refresh the session")

    def public_dict(self) -> dict:
        """Identity fields that are safe to echo back to a client."""
        return {"user_id": self.user_id, "email": self.email}
