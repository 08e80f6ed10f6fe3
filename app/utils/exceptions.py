"""Custom exceptions for ContentCraft backend."""

from typing import Any, Dict, Optional


class ContentCraftException(Exception):
    """Base exception for ContentCraft application."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize ContentCraftException.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code.
            error_code: Machine-readable error code.
            details: Additional error details.
        """
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ContentCraftException):
    """Raised when a request fails validation (e.g. empty topic)."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize ValidationError."""
        super().__init__(
            message=message,
            status_code=422,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class AuthRequiredError(ContentCraftException):
    """Raised when an action needs a signed-in identity and none is present."""

    def __init__(
        self,
        message: str = "Please sign in to generate content",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize AuthRequiredError."""
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_REQUIRED",
            details=details,
        )


class AuthenticationError(ContentCraftException):
    """Raised when the identity provider rejects credentials or a token."""

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize AuthenticationError."""
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTHENTICATION_ERROR",
            details=details,
        )


class QuotaExhaustedError(ContentCraftException):
    """Raised when the user has used up their generation quota."""

    def __init__(
        self,
        message: str = (
            "You've reached your monthly limit. "
            "Please upgrade your plan to continue generating content."
        ),
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize QuotaExhaustedError."""
        super().__init__(
            message=message,
            status_code=429,
            error_code="QUOTA_EXHAUSTED",
            details=details,
        )


class TransportError(ContentCraftException):
    """Raised when an external provider answers with a non-2xx status or is unreachable."""

    def __init__(
        self,
        message: str = "External provider request failed",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize TransportError."""
        super().__init__(
            message=message,
            status_code=502,
            error_code="TRANSPORT_ERROR",
            details=details,
        )


class FormatError(ContentCraftException):
    """Raised when a provider's success response has an unexpected shape."""

    def __init__(
        self,
        message: str = "Invalid response format from API",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize FormatError."""
        super().__init__(
            message=message,
            status_code=502,
            error_code="FORMAT_ERROR",
            details=details,
        )


class AlreadySubscribedError(ContentCraftException):
    """Raised when the customer already holds an active subscription to the price."""

    def __init__(
        self,
        message: str = "You are already subscribed to this plan",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize AlreadySubscribedError."""
        super().__init__(
            message=message,
            status_code=409,
            error_code="ALREADY_SUBSCRIBED",
            details=details,
        )


class MissingEmailError(ContentCraftException):
    """Raised when the identity behind a token has no email."""

    def __init__(
        self,
        message: str = "No email found",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize MissingEmailError."""
        super().__init__(
            message=message,
            status_code=400,
            error_code="MISSING_EMAIL",
            details=details,
        )


class MissingRedirectUrlError(ContentCraftException):
    """Raised when the payment provider creates a session without a URL."""

    def __init__(
        self,
        message: str = "No checkout URL received",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize MissingRedirectUrlError."""
        super().__init__(
            message=message,
            status_code=502,
            error_code="MISSING_REDIRECT_URL",
            details=details,
        )


class ProviderNotConfiguredError(ContentCraftException):
    """Raised when a required provider secret is absent from the environment."""

    def __init__(
        self,
        message: str = "Provider is not configured",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize ProviderNotConfiguredError."""
        super().__init__(
            message=message,
            status_code=503,
            error_code="PROVIDER_NOT_CONFIGURED",
            details=details,
        )
