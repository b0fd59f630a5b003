"""
Exception hierarchy for Provider Gateway.

All exceptions inherit from ProviderGatewayError, allowing callers to
catch every gateway error with a single except clause. Each carries an
ErrorType so the HTTP layer can render it without string matching.

Example:
    >>> try:
    ...     result = get_provider_config(provider="mystery", app_config=app_config)
    ... except ProviderGatewayError as e:
    ...     print(e.error_type, e)
"""

from __future__ import annotations

import json
from typing import Any

from provider_gateway.core.error_types import ErrorType


class ProviderGatewayError(Exception):
    """Base exception for all gateway errors."""

    error_type: ErrorType = ErrorType.UNEXPECTED_ERROR


class ProviderNotSupportedError(ProviderGatewayError):
    """Raised when a provider identifier cannot be resolved."""

    error_type = ErrorType.UNSUPPORTED_PROVIDER

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"Provider {provider} not supported")


class EndpointConfigNotFoundError(ProviderGatewayError):
    """Raised when no custom endpoint configuration exists for a name."""

    error_type = ErrorType.CONFIG_NOT_FOUND

    def __init__(self, endpoint: str) -> None:
        self.endpoint = endpoint
        super().__init__(f"Config not found for the {endpoint} custom endpoint.")


class CredentialUnresolvedError(ProviderGatewayError):
    """Raised when an API key or base URL is missing after placeholder resolution.

    This indicates a server misconfiguration, not a user error.

    Attributes:
        endpoint: Endpoint name
        field: Either "api_key" or "base_url"
    """

    error_type = ErrorType.CREDENTIAL_UNRESOLVED

    def __init__(self, endpoint: str, field: str, message: str) -> None:
        self.endpoint = endpoint
        self.field = field
        super().__init__(message)


class CredentialStorageError(ProviderGatewayError):
    """Raised when the credentials file exists but cannot be read or parsed."""

    error_type = ErrorType.CREDENTIAL_STORAGE


class UserCredentialError(ProviderGatewayError):
    """Base for user-credential policy errors.

    The message is the JSON-encoded payload so that it survives layers
    that only propagate ``str(exc)``.
    """

    def __init__(self, **details: Any) -> None:
        self.details = details
        super().__init__(json.dumps(self.payload))

    @property
    def payload(self) -> dict[str, Any]:
        return {"type": self.error_type.value, **self.details}


class NoUserKeyError(UserCredentialError):
    """The endpoint expects a user-provided API key, but none is stored."""

    error_type = ErrorType.NO_USER_KEY


class NoBaseURLError(UserCredentialError):
    """The endpoint expects a user-provided base URL, but none is stored."""

    error_type = ErrorType.NO_BASE_URL


class UserKeyExpiredError(UserCredentialError):
    """The caller's user-provided credential claim has expired."""

    error_type = ErrorType.EXPIRED_USER_KEY


class ModelFetchError(ProviderGatewayError):
    """Fetching a provider's model list failed.

    Non-fatal for endpoint initialization; callers log and continue.
    """

    error_type = ErrorType.MODEL_FETCH_ERROR

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        self.reason = reason
        super().__init__(f"Failed to fetch models for {provider}: {reason}")
