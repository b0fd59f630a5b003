import pytest

from provider_gateway.core.config.app_config import AppConfig, EndpointConfig
from provider_gateway.core.exceptions import (
    EndpointConfigNotFoundError,
    ProviderNotSupportedError,
)
from provider_gateway.core.provider.custom import initialize_custom
from provider_gateway.core.provider.first_party import initialize_google, initialize_openai
from provider_gateway.core.provider.resolver import (
    PROVIDER_CONFIG_MAP,
    ProviderResolver,
    get_custom_endpoint_config,
    get_provider_config,
    is_known_custom_provider,
)


@pytest.mark.unit
class TestProviderMapLookup:
    def test_exact_match_keeps_identifier(self):
        result = get_provider_config("openAI", AppConfig())

        assert result.get_options is initialize_openai
        assert result.override_provider == "openAI"
        assert result.custom_endpoint_config is None

    def test_azure_uses_openai_initializer(self):
        result = get_provider_config("azureOpenAI", AppConfig())

        assert result.get_options is initialize_openai
        assert result.override_provider == "azureOpenAI"

    def test_case_insensitive_match_lowercases_name(self):
        result = get_provider_config("Google", AppConfig())

        assert result.get_options is initialize_google
        assert result.override_provider == "google"

    def test_map_lookup_does_not_need_app_config(self):
        result = get_provider_config("anthropic", None)

        assert result.override_provider == "anthropic"


@pytest.mark.unit
class TestCustomEndpointLookup:
    def test_declared_endpoint_routes_as_openai(self, make_app_config):
        mistral = EndpointConfig(name="Mistral", api_key="k", base_url="https://api.mistral.ai/v1")

        result = get_provider_config("Mistral", make_app_config(mistral))

        assert result.get_options is initialize_custom
        assert result.override_provider == "openAI"
        assert result.custom_endpoint_config is mistral

    def test_custom_names_match_exactly(self, make_app_config):
        mistral = EndpointConfig(name="Mistral", api_key="k", base_url="https://x")

        with pytest.raises(ProviderNotSupportedError):
            get_provider_config("mistral", make_app_config(mistral))

    def test_ollama_matches_case_insensitively(self, make_app_config):
        ollama = EndpointConfig(name="Ollama", api_key="ollama", base_url="http://localhost:11434/v1")

        result = get_provider_config("ollama", make_app_config(ollama))

        assert result.custom_endpoint_config is ollama
        assert result.override_provider == "openAI"

    def test_first_declared_endpoint_wins(self, make_app_config):
        first = EndpointConfig(name="Dup", base_url="https://first")
        second = EndpointConfig(name="Dup", base_url="https://second")

        assert get_custom_endpoint_config("Dup", make_app_config(first, second)) is first

    def test_lookup_without_app_config_raises(self):
        with pytest.raises(EndpointConfigNotFoundError):
            get_custom_endpoint_config("Mistral", None)


@pytest.mark.unit
class TestUnsupportedProviders:
    def test_unknown_provider_raises(self):
        with pytest.raises(ProviderNotSupportedError, match="Provider mystery not supported"):
            get_provider_config("mystery", AppConfig())

    def test_unknown_provider_without_app_config_is_config_error(self):
        with pytest.raises(EndpointConfigNotFoundError):
            get_provider_config("mystery", None)

    @pytest.mark.parametrize("provider", ["xai", "deepseek", "openrouter"])
    def test_known_custom_provider_requires_declaration(self, provider):
        with pytest.raises(ProviderNotSupportedError):
            get_provider_config(provider, AppConfig())

    def test_known_custom_provider_with_declaration(self, make_app_config, openrouter_endpoint):
        result = get_provider_config("openrouter", make_app_config(openrouter_endpoint))

        assert result.get_options is initialize_custom
        assert result.override_provider == "openrouter"
        assert result.custom_endpoint_config is openrouter_endpoint

    def test_known_custom_declaration_looked_up_by_original_identifier(
        self, make_app_config, openrouter_endpoint
    ):
        # "OpenRouter" resolves case-insensitively, but the declaration is named "openrouter"
        with pytest.raises(ProviderNotSupportedError):
            get_provider_config("OpenRouter", make_app_config(openrouter_endpoint))


@pytest.mark.unit
class TestProviderResolver:
    def test_default_map_is_read_only(self):
        with pytest.raises(TypeError):
            PROVIDER_CONFIG_MAP["new"] = initialize_custom  # type: ignore[index]

    def test_resolver_copies_its_mapping(self):
        initializers = {"local": initialize_custom}
        resolver = ProviderResolver(initializers)
        initializers["other"] = initialize_custom

        assert resolver.providers == ("local",)

    def test_custom_resolver_uses_injected_map(self):
        resolver = ProviderResolver({"local": initialize_openai})

        result = resolver.resolve("LOCAL", AppConfig())

        assert result.get_options is initialize_openai
        assert result.override_provider == "local"

    @pytest.mark.parametrize(
        "provider,expected",
        [("xai", True), ("DeepSeek", True), ("OPENROUTER", True), ("openAI", False), ("", False)],
    )
    def test_is_known_custom_provider(self, provider, expected):
        assert is_known_custom_provider(provider) is expected
