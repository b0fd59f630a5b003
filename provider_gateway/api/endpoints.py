import logging
import uuid
from typing import Any

from fastapi import APIRouter, Header
from pydantic import BaseModel, Field

from provider_gateway.core.cache import TOKEN_CONFIG_NAMESPACE
from provider_gateway.core.config.config import get_config
from provider_gateway.core.logging import ConversationLogger
from provider_gateway.core.provider.context import InitializeParams, RequestContext
from provider_gateway.core.provider.resolver import ProviderConfigResult, get_provider_config

logger = logging.getLogger(__name__)

router = APIRouter()


class EndpointOptionsRequest(BaseModel):
    """Body of POST /v1/endpoints/{endpoint}/options."""

    model_parameters: dict[str, Any] = Field(default_factory=dict)
    # Expiry claim of the user's stored credentials (epoch seconds or ISO-8601)
    key: str | float | None = None
    conversation_id: str | None = None


def _describe(provider: str, resolved: ProviderConfigResult) -> dict[str, Any]:
    custom = resolved.custom_endpoint_config
    return {
        "provider": provider,
        "override_provider": resolved.override_provider,
        "initializer": getattr(resolved.get_options, "__name__", repr(resolved.get_options)),
        "custom_endpoint": custom.name if custom else None,
    }


@router.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/v1/providers/{provider}")
async def resolve_provider(provider: str) -> dict[str, Any]:
    resolved = get_provider_config(provider, get_config().app_config)
    return _describe(provider, resolved)


@router.post("/v1/endpoints/{endpoint}/options")
async def endpoint_options(
    endpoint: str,
    body: EndpointOptionsRequest,
    x_user_id: str | None = Header(None),
) -> dict[str, Any]:
    """Resolve `endpoint` and return the redacted client options it produces."""
    cfg = get_config()
    request_id = str(uuid.uuid4())

    with ConversationLogger.correlation_context(request_id):
        app_config = cfg.app_config
        resolved = get_provider_config(endpoint, app_config)
        custom = resolved.custom_endpoint_config
        endpoint_name = custom.name if custom else resolved.override_provider

        params = InitializeParams(
            request=RequestContext(
                user_id=x_user_id or "",
                app_config=app_config,
                expires_at=body.key,
                session_id=body.conversation_id,
            ),
            endpoint=endpoint_name,
            model_parameters=body.model_parameters,
            credential_store=cfg.credential_store,
            cache=cfg.cache.namespace(TOKEN_CONFIG_NAMESPACE),
            proxy=cfg.proxy,
        )
        logger.info(f"Building client options for {endpoint_name}", extra={"request_id": request_id})
        options = await resolved.get_options(params)

    return {**_describe(endpoint, resolved), "options": options.to_summary()}
