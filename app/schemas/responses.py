"""
Standard API Response Wrappers
Generic response schemas for API endpoints.
"""

from typing import TypeVar, Generic, Optional
from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    success: bool = Field(description="Whether the operation was successful")
    data: Optional[T] = Field(default=None, description="Response data")
    message: str = Field(default="", description="Response message")

    @classmethod
    def success_response(cls, data: T, message: str = "Success") -> "ApiResponse[T]":
        """Create a successful response."""
        return cls(success=True, data=data, message=message)


class CheckoutUrlResponse(BaseModel):
    """Checkout endpoint success body."""

    url: str = Field(description="Hosted checkout URL")


class CheckoutErrorResponse(BaseModel):
    """Checkout endpoint failure body."""

    error: str = Field(description="Sanitized error message")
