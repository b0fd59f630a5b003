"""Provider resolution: map a provider identifier to its initializer.

Lookup order, first match wins:

1. exact identifier in the provider map
2. lowercased identifier in the provider map
3. a custom endpoint declared under the identifier (routed as "openAI")

Anything else is unsupported. Known custom providers (xai, deepseek,
openrouter) additionally require a declared custom endpoint.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from provider_gateway.core.config.app_config import (
    AppConfig,
    EndpointConfig,
    get_custom_endpoint_config,
)
from provider_gateway.core.exceptions import ProviderNotSupportedError
from provider_gateway.core.provider.constants import KNOWN_CUSTOM_PROVIDERS, Providers
from provider_gateway.core.provider.context import InitializeFn
from provider_gateway.core.provider.custom import initialize_custom
from provider_gateway.core.provider.first_party import (
    initialize_anthropic,
    initialize_bedrock,
    initialize_google,
    initialize_openai,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfigResult:
    """Outcome of resolving a provider identifier.

    Attributes:
        get_options: Initializer producing the request's ClientOptions
        override_provider: Canonical provider name
        custom_endpoint_config: Declared endpoint, for custom backends only
    """

    get_options: InitializeFn
    override_provider: str
    custom_endpoint_config: EndpointConfig | None = None


PROVIDER_CONFIG_MAP: Mapping[str, InitializeFn] = MappingProxyType(
    {
        Providers.XAI.value: initialize_custom,
        Providers.DEEPSEEK.value: initialize_custom,
        Providers.OPENROUTER.value: initialize_custom,
        Providers.OPENAI.value: initialize_openai,
        Providers.AZURE_OPENAI.value: initialize_openai,
        Providers.GOOGLE.value: initialize_google,
        Providers.BEDROCK.value: initialize_bedrock,
        Providers.ANTHROPIC.value: initialize_anthropic,
    }
)


def is_known_custom_provider(provider: str | None) -> bool:
    return bool(provider) and provider.lower() in KNOWN_CUSTOM_PROVIDERS


class ProviderResolver:
    """Resolves provider identifiers against an immutable initializer map."""

    def __init__(self, initializers: Mapping[str, InitializeFn]) -> None:
        self._initializers = MappingProxyType(dict(initializers))

    @property
    def providers(self) -> tuple[str, ...]:
        return tuple(self._initializers)

    def resolve(self, provider: str, app_config: AppConfig | None) -> ProviderConfigResult:
        """Resolve `provider` for a request.

        Raises:
            ProviderNotSupportedError: Nothing matches, or a known custom
                provider has no declared endpoint.
            EndpointConfigNotFoundError: A custom lookup was needed and no
                application configuration is available.
        """
        get_options = self._initializers.get(provider)
        override_provider = provider
        custom_config: EndpointConfig | None = None

        if get_options is not None:
            logger.debug(f"Resolved provider {provider} from provider map")
        else:
            lowered = provider.lower()
            get_options = self._initializers.get(lowered)
            if get_options is not None:
                override_provider = lowered
                logger.debug(
                    f"Resolved provider {provider} case-insensitively",
                    extra={"override_provider": override_provider},
                )
            else:
                custom_config = get_custom_endpoint_config(provider, app_config)
                if custom_config is None:
                    logger.error(f"Provider {provider} not supported")
                    raise ProviderNotSupportedError(provider)
                get_options = initialize_custom
                override_provider = Providers.OPENAI.value
                logger.info(
                    f"Resolved {provider} to a custom endpoint",
                    extra={"override_provider": override_provider},
                )

        if is_known_custom_provider(override_provider) and custom_config is None:
            custom_config = get_custom_endpoint_config(provider, app_config)
            if custom_config is None:
                logger.error(f"No custom endpoint declared for {provider}")
                raise ProviderNotSupportedError(provider)

        return ProviderConfigResult(
            get_options=get_options,
            override_provider=override_provider,
            custom_endpoint_config=custom_config,
        )


_default_resolver = ProviderResolver(PROVIDER_CONFIG_MAP)


def get_provider_config(provider: str, app_config: AppConfig | None) -> ProviderConfigResult:
    """Resolve `provider` with the built-in provider map."""
    return _default_resolver.resolve(provider, app_config)


__all__ = [
    "PROVIDER_CONFIG_MAP",
    "ProviderConfigResult",
    "ProviderResolver",
    "get_custom_endpoint_config",
    "get_provider_config",
    "is_known_custom_provider",
]
