"""Provider identifiers and provider capability sets."""

from enum import Enum


class Providers(str, Enum):
    """Canonical provider identifiers.

    First-party names keep their camelCase spelling since clients send them
    verbatim; custom provider names are lowercase.
    """

    XAI = "xai"
    DEEPSEEK = "deepseek"
    OPENROUTER = "openrouter"
    OPENAI = "openAI"
    AZURE_OPENAI = "azureOpenAI"
    GOOGLE = "google"
    BEDROCK = "bedrock"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"


# Providers that always need a declared custom endpoint
KNOWN_CUSTOM_PROVIDERS = frozenset(
    {Providers.XAI.value, Providers.DEEPSEEK.value, Providers.OPENROUTER.value}
)

# Providers whose /models listing carries pricing and context metadata
FETCH_TOKEN_CONFIG = frozenset({Providers.OPENROUTER.value})
