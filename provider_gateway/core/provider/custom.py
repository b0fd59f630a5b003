"""Initialization of operator-declared, OpenAI-compatible custom endpoints.

Custom endpoints are declared in the application config. Their API key and
base URL may reference environment variables (``${VAR}``) or be marked
``user_provided``, in which case each user's stored credentials are used.
"""

from __future__ import annotations

import logging
from typing import Any

from provider_gateway.core.cache import TOKEN_CONFIG_NAMESPACE, standard_cache
from provider_gateway.core.config.app_config import (
    AppConfig,
    EndpointConfig,
    get_custom_endpoint_config,
)
from provider_gateway.core.config.config import get_config
from provider_gateway.core.credentials import UserKeyValues
from provider_gateway.core.credentials.expiry import check_user_key_expiry
from provider_gateway.core.exceptions import (
    CredentialUnresolvedError,
    EndpointConfigNotFoundError,
    ModelFetchError,
    NoBaseURLError,
    NoUserKeyError,
)
from provider_gateway.core.placeholders import (
    extract_env_variable,
    is_unresolved,
    is_user_provided,
)
from provider_gateway.core.provider.constants import FETCH_TOKEN_CONFIG
from provider_gateway.core.provider.context import InitializeParams
from provider_gateway.core.provider.models_fetcher import fetch_models
from provider_gateway.core.provider.options import ClientOptions, build_openai_options

logger = logging.getLogger(__name__)

DEFAULT_TITLE_METHOD = "completion"


def build_custom_options(
    endpoint_config: EndpointConfig,
    app_config: AppConfig | None,
) -> dict[str, Any]:
    """Behavioural options of a custom endpoint.

    `title_method` defaults to "completion", `context_strategy` follows the
    endpoint's `summarize` flag, and a stream rate set for all endpoints
    replaces the endpoint's own.
    """
    custom_options: dict[str, Any] = {
        "headers": endpoint_config.headers,
        "add_params": endpoint_config.add_params,
        "drop_params": endpoint_config.drop_params,
        "custom_params": endpoint_config.custom_params,
        "title_convo": endpoint_config.title_convo,
        "title_model": endpoint_config.title_model,
        "force_prompt": endpoint_config.force_prompt,
        "summary_model": endpoint_config.summary_model,
        "model_display_label": endpoint_config.model_display_label,
        "title_method": endpoint_config.title_method or DEFAULT_TITLE_METHOD,
        "context_strategy": "summarize" if endpoint_config.summarize else None,
        "direct_endpoint": endpoint_config.direct_endpoint,
        "title_message_role": endpoint_config.title_message_role,
        "stream_rate": endpoint_config.stream_rate,
        "inject_session_info": endpoint_config.inject_session_info,
    }

    all_config = app_config.endpoints.all if app_config else None
    if all_config is not None and all_config.stream_rate is not None:
        custom_options["stream_rate"] = all_config.stream_rate

    return custom_options


def _resolve_declared(endpoint: str, endpoint_config: EndpointConfig) -> tuple[str, str]:
    api_key = extract_env_variable(endpoint_config.api_key)
    base_url = extract_env_variable(endpoint_config.base_url)

    if is_unresolved(api_key):
        logger.error(f"Unresolved API key placeholder for {endpoint}")
        raise CredentialUnresolvedError(endpoint, "api_key", f"Missing API Key for {endpoint}.")
    if is_unresolved(base_url):
        logger.error(f"Unresolved base URL placeholder for {endpoint}")
        raise CredentialUnresolvedError(endpoint, "base_url", f"Missing Base URL for {endpoint}.")

    return api_key, base_url


def resolve_proxy(params: InitializeParams) -> str | None:
    """The caller's proxy, else the process-wide PROXY setting."""
    return params.proxy or get_config().proxy


async def select_credentials(
    params: InitializeParams,
    declared_key: str,
    declared_url: str,
) -> tuple[str | None, str | None, bool]:
    """Pick the API key and base URL, reading user-provided fields from the store.

    The store is consulted once, and only when the caller presents an
    unexpired credential claim.

    Returns:
        (api_key, base_url, user_scoped) where `user_scoped` is True when
        either field is user-provided.

    Raises:
        UserKeyExpiredError: The caller's credential claim has expired.
        NoUserKeyError: A user-provided key is expected but not stored.
        NoBaseURLError: A user-provided base URL is expected but not stored.
    """
    request = params.request
    user_provides_key = is_user_provided(declared_key)
    user_provides_url = is_user_provided(declared_url)

    user_values: UserKeyValues | None = None
    if request.expires_at and (user_provides_key or user_provides_url):
        check_user_key_expiry(request.expires_at, params.endpoint)
        store = params.credential_store or get_config().credential_store
        user_values = await store.get_user_key_values(request.user_id, params.endpoint)

    api_key = (user_values.api_key if user_values else None) if user_provides_key else declared_key
    base_url = (user_values.base_url if user_values else None) if user_provides_url else declared_url

    if user_provides_key and not api_key:
        raise NoUserKeyError()
    if user_provides_url and not base_url:
        raise NoBaseURLError()

    return api_key, base_url, user_provides_key or user_provides_url


async def _resolve_token_config(
    params: InitializeParams,
    endpoint_config: EndpointConfig,
    api_key: str,
    base_url: str,
    user_scoped: bool,
) -> dict[str, dict[str, float]] | None:
    endpoint = params.endpoint
    user_id = params.request.user_id

    if endpoint_config.token_config is not None:
        return endpoint_config.token_config
    if endpoint.lower() not in FETCH_TOKEN_CONFIG:
        return None

    token_key = f"{endpoint}:{user_id}" if user_scoped else endpoint
    cache = params.cache or standard_cache(TOKEN_CONFIG_NAMESPACE)

    token_config = await cache.get(token_key)
    if token_config or not endpoint_config.models.fetch:
        return token_config or None

    fetch = params.fetch_models or fetch_models
    try:
        await fetch(
            api_key,
            base_url,
            endpoint,
            user_id,
            token_key,
            cache=cache,
            timeout=get_config().models_fetch_timeout,
            user_id_query=endpoint_config.models.user_id_query,
        )
    except ModelFetchError as e:
        logger.warning(f"Token config unavailable for {endpoint}: {e}")
        return None

    return await cache.get(token_key) or None


async def initialize_custom(params: InitializeParams) -> ClientOptions:
    """Build client options for a custom endpoint.

    Raises:
        EndpointConfigNotFoundError: No endpoint of that name is declared.
        CredentialUnresolvedError: A placeholder has no environment value,
            or no key/URL is available at all.
        UserKeyExpiredError: The caller's credential claim has expired.
        NoUserKeyError: A user-provided key is expected but not stored.
        NoBaseURLError: A user-provided base URL is expected but not stored.
    """
    request = params.request
    endpoint = params.endpoint
    app_config = request.app_config

    logger.info(f"Initializing custom endpoint: {endpoint}")

    endpoint_config = get_custom_endpoint_config(endpoint, app_config)
    if endpoint_config is None:
        logger.error(f"No custom endpoint config for {endpoint}")
        raise EndpointConfigNotFoundError(endpoint)

    logger.debug(
        f"Config loaded for {endpoint}",
        extra={
            "base_url": endpoint_config.base_url,
            "model_display_label": endpoint_config.model_display_label,
            "inject_session_info": endpoint_config.inject_session_info,
        },
    )

    declared_key, declared_url = _resolve_declared(endpoint, endpoint_config)
    api_key, base_url, user_scoped = await select_credentials(params, declared_key, declared_url)

    if not api_key:
        logger.error(f"No API key configured for {endpoint}")
        raise CredentialUnresolvedError(endpoint, "api_key", f"{endpoint} API key not provided.")
    if not base_url:
        logger.error(f"No base URL configured for {endpoint}")
        raise CredentialUnresolvedError(endpoint, "base_url", f"{endpoint} Base URL not provided.")

    endpoint_token_config = await _resolve_token_config(
        params,
        endpoint_config,
        api_key,
        base_url,
        user_scoped=user_scoped,
    )

    custom_options = build_custom_options(endpoint_config, app_config)
    merged: dict[str, Any] = {
        "reverse_proxy_url": base_url,
        "proxy": resolve_proxy(params),
        **custom_options,
        "model_options": {**params.model_parameters, "user": request.user_id},
    }
    if endpoint_config.inject_session_info:
        merged["session_id"] = request.session_id
        merged["user_id"] = request.user_id

    logger.info(
        f"Client options configured for {endpoint}",
        extra={"base_url": base_url, "model": params.model_parameters.get("model")},
    )

    options = build_openai_options(api_key, merged, endpoint)
    options.use_legacy_content = True
    options.endpoint_token_config = endpoint_token_config

    stream_rate = custom_options["stream_rate"]
    if stream_rate:
        options.llm_config["stream_delay"] = stream_rate

    logger.debug(
        f"OpenAI config created for {endpoint}",
        extra={
            "model": options.llm_config.get("model"),
            "base_url": options.config_options.get("base_url"),
            "streaming": options.llm_config.get("streaming"),
        },
    )
    return options
