"""Provider resolution and client option assembly.

- resolver: maps provider identifiers to initializers
- custom: initializer for operator-declared custom endpoints
- first_party: environment-configured OpenAI/Azure/Anthropic/Google/Bedrock
- options: ClientOptions and the option builders
- models_fetcher: remote model list and token metadata lookup
"""

from provider_gateway.core.provider.context import InitializeParams, RequestContext
from provider_gateway.core.provider.options import ClientOptions
from provider_gateway.core.provider.resolver import (
    ProviderConfigResult,
    ProviderResolver,
    get_provider_config,
)

__all__ = [
    "ClientOptions",
    "InitializeParams",
    "ProviderConfigResult",
    "ProviderResolver",
    "RequestContext",
    "get_provider_config",
]
