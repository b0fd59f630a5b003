"""Error type enumeration for Provider Gateway.

Provides type-safe error categorization for typed error payloads and
HTTP error responses.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type categories.

    The user-credential values are part of the payload contract with the
    boundary layer, which renders a "connect your API key" prompt for them.
    """

    # Resolution errors
    UNSUPPORTED_PROVIDER = "unsupported_provider"

    # Configuration errors (server misconfiguration)
    CONFIG_NOT_FOUND = "config_not_found"
    CREDENTIAL_UNRESOLVED = "credential_unresolved"
    CREDENTIAL_STORAGE = "credential_storage_error"

    # User-credential policy errors
    NO_USER_KEY = "no_user_key"
    NO_BASE_URL = "no_base_url"
    EXPIRED_USER_KEY = "expired_user_key"

    # Enrichment errors (non-fatal)
    MODEL_FETCH_ERROR = "model_fetch_error"

    # Transport errors
    UPSTREAM_ERROR = "upstream_error"
    UPSTREAM_TIMEOUT = "upstream_timeout"

    # Catch-all
    UNEXPECTED_ERROR = "unexpected_error"
