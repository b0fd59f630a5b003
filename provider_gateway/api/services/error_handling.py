"""Error responses for API endpoints.

Every error is rendered in the same envelope:

    {
        "type": "error",
        "error": {
            "type": "<error_type>",
            "message": "<error_message>"
        }
    }

User-credential errors additionally carry their typed payload under
``error.payload`` so clients can prompt the user to connect a key.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from fastapi import Request
from fastapi.responses import JSONResponse

from provider_gateway.core.error_types import ErrorType
from provider_gateway.core.exceptions import (
    ProviderGatewayError,
    ProviderNotSupportedError,
    UserCredentialError,
)

logger = logging.getLogger(__name__)


def _envelope(error_type: str, message: str, **fields: Any) -> dict[str, Any]:
    return {"type": "error", "error": {"type": error_type, "message": message, **fields}}


@dataclass(frozen=True, slots=True)
class ErrorResponseBuilder:
    """Centralized builder for consistent error responses across all endpoints."""

    @staticmethod
    def unsupported_provider(exception: ProviderNotSupportedError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=_envelope(ErrorType.UNSUPPORTED_PROVIDER.value, str(exception)),
        )

    @staticmethod
    def user_credential(exception: UserCredentialError) -> JSONResponse:
        """Build a 401 response carrying the typed credential payload.

        Args:
            exception: NoUserKeyError, NoBaseURLError or UserKeyExpiredError

        Returns:
            JSONResponse with 401 status and the payload under ``error.payload``
        """
        return JSONResponse(
            status_code=401,
            content=_envelope(
                exception.error_type.value,
                "User credentials are missing or expired",
                payload=exception.payload,
            ),
        )

    @staticmethod
    def upstream_error(exception: Exception, context: str | None = None) -> JSONResponse:
        """Build a 502 Bad Gateway or 504 Gateway Timeout error response."""
        if isinstance(exception, httpx.TimeoutException):
            message = "Upstream request timed out"
            if context:
                message += f" while {context}"
            return JSONResponse(
                status_code=504,
                content=_envelope(ErrorType.UPSTREAM_TIMEOUT.value, message),
            )

        message = "Upstream service error"
        if context:
            message += f" while {context}"
        return JSONResponse(
            status_code=502,
            content=_envelope(ErrorType.UPSTREAM_ERROR.value, message, details=str(exception)),
        )

    @staticmethod
    def internal_error(
        message: str, error_type: str = "internal_error", details: Any | None = None
    ) -> JSONResponse:
        """Build a 500 Internal Server Error response.

        Args:
            message: Human-readable error message
            error_type: Specific error type for classification
            details: Optional additional error details
        """
        content = _envelope(error_type, message)
        if details is not None:
            content["error"]["details"] = details
        return JSONResponse(status_code=500, content=content)

    @classmethod
    def from_exception(cls, exception: ProviderGatewayError) -> JSONResponse:
        """Pick the response for a gateway exception by its category.

        Configuration errors and anything unexpected render as 500.
        """
        if isinstance(exception, ProviderNotSupportedError):
            return cls.unsupported_provider(exception)
        if isinstance(exception, UserCredentialError):
            return cls.user_credential(exception)
        return cls.internal_error(str(exception), error_type=exception.error_type.value)


async def gateway_exception_handler(request: Request, exc: ProviderGatewayError) -> JSONResponse:
    """FastAPI exception handler for ProviderGatewayError."""
    if isinstance(exc, UserCredentialError):
        logger.info(f"User credential error on {request.url.path}: {exc}")
    else:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc}")
    return ErrorResponseBuilder.from_exception(exc)


async def upstream_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """FastAPI exception handler for httpx errors raised by provider calls."""
    logger.error(f"Upstream error on {request.url.path}: {type(exc).__name__}: {exc}")
    return ErrorResponseBuilder.upstream_error(exc)
