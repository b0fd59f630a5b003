"""Shared pytest configuration and fixtures for Provider Gateway tests."""

import pytest

from provider_gateway.core.config.app_config import (
    AllEndpointsConfig,
    AppConfig,
    EndpointConfig,
    EndpointModelsConfig,
    EndpointsConfig,
)
from provider_gateway.core.config.config import Config
from provider_gateway.core.config.schema import ConfigSchema
from provider_gateway.core.provider.first_party import (
    ANTHROPIC,
    AZURE_OPENAI,
    BEDROCK,
    GOOGLE,
    OPENAI,
)
from tests.config import OPENROUTER_BASE_URL, TEST_API_KEYS

# Import HTTP mocking fixtures from fixtures module
pytest_plugins = ["tests.fixtures.mock_http"]

_PROVIDER_ENV_VARS = [
    var
    for provider in (OPENAI, AZURE_OPENAI, ANTHROPIC, GOOGLE, BEDROCK)
    for var in (provider.api_key_env, provider.base_url_env, provider.api_version_env)
    if var
]


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests (fast, no external deps)")
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (requires services)"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers to tests based on their location."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="function", autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Give every test a clean environment and fresh config singleton.

    Schema variables and provider credentials are cleared, the app config
    path points at a file that does not exist, and the fake keys in
    TEST_API_KEYS are exported. No real key is ever used since RESPX and
    httpx.MockTransport stand in for every provider.
    """
    for spec in ConfigSchema.all_specs().values():
        monkeypatch.delenv(spec.name, raising=False)
    for var in _PROVIDER_ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.setenv("APP_CONFIG_PATH", str(tmp_path / "provider-gateway.toml"))
    for key, value in TEST_API_KEYS.items():
        monkeypatch.setenv(key, value)

    Config.reset_singleton()
    yield
    # Restore the environment first; a test may leave invalid values behind
    monkeypatch.undo()
    Config.reset_singleton()


@pytest.fixture
def openrouter_endpoint():
    """OpenRouter declared with an env placeholder key and model fetching."""
    return EndpointConfig(
        name="openrouter",
        api_key="${OPENROUTER_KEY}",
        base_url=OPENROUTER_BASE_URL,
        models=EndpointModelsConfig(default=("openrouter/auto",), fetch=True),
    )


@pytest.fixture
def user_provided_endpoint():
    """Endpoint whose key and URL come from each user's stored credentials."""
    return EndpointConfig(
        name="openrouter",
        api_key="user_provided",
        base_url="user_provided",
        models=EndpointModelsConfig(fetch=True),
    )


@pytest.fixture
def make_app_config():
    """Factory building an AppConfig from endpoints and an optional global stream rate."""

    def _make(*endpoints: EndpointConfig, stream_rate: float | None = None) -> AppConfig:
        all_config = AllEndpointsConfig(stream_rate=stream_rate) if stream_rate is not None else None
        return AppConfig(endpoints=EndpointsConfig(custom=tuple(endpoints), all=all_config))

    return _make
