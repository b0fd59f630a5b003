from datetime import datetime, timedelta, timezone

import pytest

from provider_gateway.core.config.config import Config
from provider_gateway.core.credentials import UserKeyValues
from provider_gateway.core.credentials.memory_storage import InMemoryCredentialStore
from provider_gateway.core.exceptions import CredentialUnresolvedError, NoUserKeyError
from provider_gateway.core.provider.context import InitializeParams, RequestContext
from provider_gateway.core.provider.first_party import (
    FirstPartyProvider,
    initialize_anthropic,
    initialize_bedrock,
    initialize_google,
    initialize_openai,
    make_env_initializer,
)


def _params(endpoint, **request_fields):
    return InitializeParams(
        request=RequestContext(user_id="user-1", **request_fields),
        endpoint=endpoint,
        model_parameters={"model": "some-model"},
        credential_store=InMemoryCredentialStore(),
    )


@pytest.mark.unit
class TestOpenAIInitializer:
    @pytest.mark.asyncio
    async def test_openai_uses_env_key_and_default_url(self):
        options = await initialize_openai(_params("openAI"))

        assert options.provider == "openAI"
        assert options.llm_config["api_key"] == "test-openai-key-mocked"
        assert options.llm_config["model"] == "some-model"
        assert options.llm_config["user"] == "user-1"
        assert options.config_options["base_url"] == "https://api.openai.com/v1"

    @pytest.mark.asyncio
    async def test_base_url_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_BASE_URL", "https://openai.internal/v1")

        options = await initialize_openai(_params("openAI"))

        assert options.config_options["base_url"] == "https://openai.internal/v1"

    @pytest.mark.asyncio
    async def test_azure_reads_azure_environment(self, monkeypatch):
        monkeypatch.setenv("AZURE_OPENAI_API_KEY", "azure-key")
        monkeypatch.setenv("AZURE_OPENAI_BASE_URL", "https://res.openai.azure.com/openai")
        monkeypatch.setenv("AZURE_OPENAI_API_VERSION", "2024-06-01")

        options = await initialize_openai(_params("azureOpenAI"))

        assert options.provider == "azureOpenAI"
        assert options.llm_config["api_key"] == "azure-key"
        assert options.config_options["api_version"] == "2024-06-01"

    @pytest.mark.asyncio
    async def test_missing_key_is_fatal(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY")

        with pytest.raises(CredentialUnresolvedError, match="openAI API key not provided."):
            await initialize_openai(_params("openAI"))

    @pytest.mark.asyncio
    async def test_unresolved_placeholder_is_fatal(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "${UNSET_UPSTREAM_KEY}")

        with pytest.raises(CredentialUnresolvedError, match="Missing OPENAI_API_KEY"):
            await initialize_openai(_params("openAI"))


@pytest.mark.unit
class TestOtherProviders:
    @pytest.mark.asyncio
    async def test_anthropic_plain_mapping(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "ant-key")

        options = await initialize_anthropic(_params("anthropic"))

        assert options.llm_config == {"api_key": "ant-key", "model": "some-model", "user": "user-1"}
        assert options.config_options == {"base_url": "https://api.anthropic.com"}
        assert "transport" not in options.config_options

    @pytest.mark.asyncio
    async def test_bedrock_without_base_url(self, monkeypatch):
        monkeypatch.setenv("BEDROCK_API_KEY", "bedrock-key")

        options = await initialize_bedrock(_params("bedrock"))

        assert options.config_options["base_url"] is None

    @pytest.mark.asyncio
    async def test_google_user_provided_key(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "user_provided")
        store = InMemoryCredentialStore()
        store.put("user-1", "google", UserKeyValues(api_key="users-google-key"))
        expires = (datetime.now(timezone.utc) + timedelta(hours=1)).isoformat()
        params = InitializeParams(
            request=RequestContext(user_id="user-1", expires_at=expires),
            endpoint="google",
            credential_store=store,
        )

        options = await initialize_google(params)

        assert options.llm_config["api_key"] == "users-google-key"
        assert options.config_options["base_url"] == "https://generativelanguage.googleapis.com"

    @pytest.mark.asyncio
    async def test_user_provided_key_without_claim(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "user_provided")

        with pytest.raises(NoUserKeyError):
            await initialize_google(_params("google"))

    @pytest.mark.asyncio
    async def test_make_env_initializer_for_new_provider(self, monkeypatch):
        monkeypatch.setenv("LOCALAI_API_KEY", "local-key")
        provider = FirstPartyProvider(
            name="localai",
            api_key_env="LOCALAI_API_KEY",
            base_url_env="LOCALAI_BASE_URL",
            default_base_url="http://localhost:8080/v1",
            openai_compatible=True,
        )
        initialize = make_env_initializer(provider)

        options = await initialize(_params("localai"))

        assert initialize.__name__ == "initialize_localai"
        assert options.config_options["base_url"] == "http://localhost:8080/v1"
        assert options.llm_config["streaming"] is True


@pytest.mark.unit
class TestProcessProxy:
    @pytest.fixture(autouse=True)
    def proxy_env(self, monkeypatch):
        monkeypatch.setenv("PROXY", "http://proxy.internal:3128")
        Config.reset_singleton()

    @pytest.mark.asyncio
    async def test_openai_picks_up_process_proxy(self):
        options = await initialize_openai(_params("openAI"))

        assert options.config_options["proxy"] == "http://proxy.internal:3128"

    @pytest.mark.asyncio
    async def test_plain_mapping_picks_up_process_proxy(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "ant-key")

        options = await initialize_anthropic(_params("anthropic"))

        assert options.config_options["proxy"] == "http://proxy.internal:3128"
