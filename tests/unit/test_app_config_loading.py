import pytest

from provider_gateway.core.config.app_config import (
    AppConfig,
    EndpointConfig,
    get_custom_endpoint_config,
    load_app_config,
)

APP_CONFIG_TOML = """
[endpoints.all]
stream-rate = 25

[[endpoints.custom]]
name = "OpenRouter"
api-key = "${OPENROUTER_KEY}"
baseURL = "https://openrouter.ai/api/v1"
titleConvo = true
summarize = true
drop_params = ["stop", "user"]
inject-session-info = true
unknown-key = "ignored"
models = { default = ["openrouter/auto"], fetch = true, userIdQuery = true }
headers = { "HTTP-Referer" = "https://app.example" }

[[endpoints.custom]]
name = "Ollama"
api-key = "ollama"
base-url = "http://localhost:11434/v1"
"""


@pytest.mark.unit
class TestLoadAppConfig:
    def test_parses_endpoints_with_mixed_key_styles(self, tmp_path):
        path = tmp_path / "provider-gateway.toml"
        path.write_text(APP_CONFIG_TOML)

        app_config = load_app_config(path)

        openrouter, ollama = app_config.endpoints.custom
        assert openrouter.name == "OpenRouter"
        assert openrouter.api_key == "${OPENROUTER_KEY}"
        assert openrouter.base_url == "https://openrouter.ai/api/v1"
        assert openrouter.title_convo is True
        assert openrouter.summarize is True
        assert openrouter.drop_params == ("stop", "user")
        assert openrouter.inject_session_info is True
        assert openrouter.models.default == ("openrouter/auto",)
        assert openrouter.models.fetch is True
        assert openrouter.models.user_id_query is True
        assert openrouter.headers == {"HTTP-Referer": "https://app.example"}
        assert ollama.models.fetch is False
        assert app_config.endpoints.all.stream_rate == 25

    def test_missing_file_gives_empty_config(self, tmp_path):
        app_config = load_app_config(tmp_path / "absent.toml")

        assert app_config == AppConfig()
        assert app_config.endpoints.all is None

    def test_invalid_toml_raises(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[[endpoints.custom]\nname =")

        with pytest.raises(ValueError, match="Invalid app config"):
            load_app_config(path)

    def test_endpoint_without_name_raises(self, tmp_path):
        path = tmp_path / "nameless.toml"
        path.write_text('[[endpoints.custom]]\nbase-url = "https://x"\n')

        with pytest.raises(ValueError, match="requires a name"):
            load_app_config(path)


@pytest.mark.unit
class TestGetCustomEndpointConfig:
    def test_returns_none_for_unknown_name(self):
        app_config = AppConfig.from_dict({"endpoints": {"custom": [{"name": "A"}]}})

        assert get_custom_endpoint_config("B", app_config) is None

    def test_ollama_any_case(self):
        app_config = AppConfig.from_dict({"endpoints": {"custom": [{"name": "OLLAMA"}]}})

        found = get_custom_endpoint_config("Ollama", app_config)

        assert isinstance(found, EndpointConfig)
        assert found.name == "OLLAMA"
