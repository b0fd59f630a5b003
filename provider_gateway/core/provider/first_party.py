"""Environment-configured initializers for first-party providers.

Each provider reads its credentials from ``{PROVIDER}_API_KEY`` and
``{PROVIDER}_BASE_URL``; either may be set to ``user_provided`` to defer
to the caller's stored credentials.
"""

import logging
import os
from dataclasses import dataclass

from provider_gateway.core.exceptions import CredentialUnresolvedError
from provider_gateway.core.placeholders import extract_env_variable, is_unresolved
from provider_gateway.core.provider.constants import Providers
from provider_gateway.core.provider.context import InitializeFn, InitializeParams
from provider_gateway.core.provider.custom import resolve_proxy, select_credentials
from provider_gateway.core.provider.options import (
    ClientOptions,
    build_openai_options,
    build_provider_options,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FirstPartyProvider:
    """Environment variable names and defaults of a first-party provider."""

    name: str
    api_key_env: str
    base_url_env: str
    default_base_url: str | None = None
    api_version_env: str | None = None
    openai_compatible: bool = False


OPENAI = FirstPartyProvider(
    name=Providers.OPENAI.value,
    api_key_env="OPENAI_API_KEY",
    base_url_env="OPENAI_BASE_URL",
    default_base_url="https://api.openai.com/v1",
    openai_compatible=True,
)
AZURE_OPENAI = FirstPartyProvider(
    name=Providers.AZURE_OPENAI.value,
    api_key_env="AZURE_OPENAI_API_KEY",
    base_url_env="AZURE_OPENAI_BASE_URL",
    api_version_env="AZURE_OPENAI_API_VERSION",
    openai_compatible=True,
)
ANTHROPIC = FirstPartyProvider(
    name=Providers.ANTHROPIC.value,
    api_key_env="ANTHROPIC_API_KEY",
    base_url_env="ANTHROPIC_BASE_URL",
    default_base_url="https://api.anthropic.com",
)
GOOGLE = FirstPartyProvider(
    name=Providers.GOOGLE.value,
    api_key_env="GOOGLE_API_KEY",
    base_url_env="GOOGLE_BASE_URL",
    default_base_url="https://generativelanguage.googleapis.com",
)
BEDROCK = FirstPartyProvider(
    name=Providers.BEDROCK.value,
    api_key_env="BEDROCK_API_KEY",
    base_url_env="BEDROCK_BASE_URL",
)


def _read_env(provider: FirstPartyProvider, var: str, field: str) -> str:
    value = extract_env_variable(os.environ.get(var, ""))
    if is_unresolved(value):
        logger.error(f"Unresolved {field} placeholder in {var}")
        raise CredentialUnresolvedError(provider.name, field, f"Missing {var} for {provider.name}.")
    return value


def make_env_initializer(provider: FirstPartyProvider) -> InitializeFn:
    """Build the initializer for a first-party provider."""

    async def initialize(params: InitializeParams) -> ClientOptions:
        declared_key = _read_env(provider, provider.api_key_env, "api_key")
        declared_url = _read_env(provider, provider.base_url_env, "base_url")
        declared_url = declared_url or provider.default_base_url or ""

        api_key, base_url, _ = await select_credentials(params, declared_key, declared_url)
        if not api_key:
            logger.error(f"{provider.api_key_env} is not set")
            raise CredentialUnresolvedError(
                provider.name, "api_key", f"{provider.name} API key not provided."
            )

        model_options = {**params.model_parameters, "user": params.request.user_id}
        proxy = resolve_proxy(params)
        logger.info(
            f"Initializing {provider.name}",
            extra={"base_url": base_url, "model": params.model_parameters.get("model")},
        )

        if provider.openai_compatible:
            api_version = os.environ.get(provider.api_version_env) if provider.api_version_env else None
            return build_openai_options(
                api_key,
                {
                    "reverse_proxy_url": base_url,
                    "proxy": proxy,
                    "model_options": model_options,
                    "api_version": api_version,
                },
                provider.name,
            )

        extra_options = {"proxy": proxy} if proxy else {}
        return build_provider_options(
            provider.name, api_key, base_url or None, model_options, **extra_options
        )

    initialize.__name__ = f"initialize_{provider.name}"
    return initialize


_initialize_openai = make_env_initializer(OPENAI)
_initialize_azure_openai = make_env_initializer(AZURE_OPENAI)
initialize_anthropic = make_env_initializer(ANTHROPIC)
initialize_google = make_env_initializer(GOOGLE)
initialize_bedrock = make_env_initializer(BEDROCK)


async def initialize_openai(params: InitializeParams) -> ClientOptions:
    """OpenAI initializer; Azure OpenAI requests use the Azure environment."""
    if params.endpoint == Providers.AZURE_OPENAI.value:
        return await _initialize_azure_openai(params)
    return await _initialize_openai(params)
