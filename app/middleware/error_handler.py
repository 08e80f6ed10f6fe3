"""
Error rendering middleware.

Most routes answer failures with the ``{success, error: {code, message, details}}``
envelope. Routes listed in ``FLAT_ERROR_ROUTES`` keep the flat ``500 {"error": ...}``
body their browser clients already parse.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.schemas.responses import CheckoutErrorResponse
from app.utils.exceptions import ContentCraftException
from app.utils.logger import get_logger

logger = get_logger(__name__)

# path -> message shown for unexpected failures
FLAT_ERROR_ROUTES: Dict[str, str] = {
    "/create-checkout-session": "Failed to create checkout session",
}


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turns domain and unexpected exceptions into JSON responses."""

    async def dispatch(self, request: Request, call_next: Any) -> JSONResponse:
        if request.method == "OPTIONS":
            return await call_next(request)

        flat_fallback = FLAT_ERROR_ROUTES.get(request.url.path)
        try:
            return await call_next(request)
        except ContentCraftException as e:
            self._log_domain_error(request, e)
            if flat_fallback is not None:
                return self._flat_response(e.message)
            return self._envelope_response(e.status_code, e.error_code, e.message, e.details)
        except Exception as e:
            logger.error(
                f"Unhandled exception on {request.method} {request.url.path}: {str(e)}",
                extra={"extra_data": {"exception_type": type(e).__name__}},
                exc_info=True,
            )
            if flat_fallback is not None:
                return self._flat_response(flat_fallback)
            return self._envelope_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_SERVER_ERROR",
                "An unexpected error occurred",
                {"error": str(e)} if logger.getEffectiveLevel() == logging.DEBUG else {},
            )

    @staticmethod
    def _log_domain_error(request: Request, e: ContentCraftException) -> None:
        # 5xx at error, 4xx at warning
        log = logger.error if e.status_code >= 500 else logger.warning
        log(
            f"{request.method} {request.url.path} failed: {e.error_code} - {e.message}",
            extra={"extra_data": {"error_code": e.error_code, "details": e.details}},
        )

    @staticmethod
    def _flat_response(message: str) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=CheckoutErrorResponse(error=message).model_dump(),
        )

    @staticmethod
    def _envelope_response(
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]],
    ) -> JSONResponse:
        """
        Build the standard error envelope.

        Args:
            status_code: HTTP status code.
            error_code: Error code identifier.
            message: User-facing message.
            details: Additional error details.

        Returns:
            JSON response.
        """
        return JSONResponse(
            status_code=status_code,
            content={
                "success": False,
                "error": {
                    "code": error_code,
                    "message": message,
                    "details": details or {},
                },
            },
        )
