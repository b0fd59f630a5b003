"""Per-request inputs shared by every provider initializer."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from provider_gateway.core.config.app_config import AppConfig

if TYPE_CHECKING:
    from provider_gateway.core.cache import NamespacedCache
    from provider_gateway.core.credentials import CredentialStore
    from provider_gateway.core.credentials.expiry import ExpiresAt
    from provider_gateway.core.provider.options import ClientOptions


@dataclass(frozen=True)
class RequestContext:
    """What the gateway knows about the caller of one request.

    Attributes:
        user_id: Authenticated user id, empty when anonymous
        app_config: Application configuration in effect for the request
        expires_at: Expiry claim of the user's stored credentials, if any
        session_id: Conversation/session id forwarded to providers on request
    """

    user_id: str = ""
    app_config: AppConfig | None = None
    expires_at: ExpiresAt | None = None
    session_id: str | None = None


FetchModelsFn = Callable[..., Awaitable[list[str]]]


@dataclass
class InitializeParams:
    """Arguments handed to a provider initializer."""

    request: RequestContext
    endpoint: str
    model_parameters: dict[str, Any] = field(default_factory=dict)
    credential_store: CredentialStore | None = None
    cache: NamespacedCache | None = None
    fetch_models: FetchModelsFn | None = None
    proxy: str | None = None


InitializeFn = Callable[[InitializeParams], Awaitable["ClientOptions"]]
