"""Configuration singleton for Provider Gateway.

This module provides a simple singleton that gives direct access to
configuration values loaded from the environment through ConfigSchema.

Settings are grouped as:
- server: host, port, log level
- providers: outbound proxy, app config path, credentials file
- cache: token config TTL and model fetch timeout
"""

import os
from typing import TYPE_CHECKING

from provider_gateway.core.config.lazy_managers import LazyManagers
from provider_gateway.core.config.schema import ConfigSchema
from provider_gateway.core.config.validation import load_env_var

if TYPE_CHECKING:
    from provider_gateway.core.cache import MemoryCache
    from provider_gateway.core.config.app_config import AppConfig
    from provider_gateway.core.credentials import CredentialStore


class Config:
    """Configuration singleton with direct access to all settings.

    Values are loaded at initialization time from environment variables.
    The app config, credential store and token cache are created lazily on
    first access.
    """

    def __init__(self) -> None:
        self._host: str = load_env_var(ConfigSchema.HOST)
        self._port: int = load_env_var(ConfigSchema.PORT)
        self._log_level: str = load_env_var(ConfigSchema.LOG_LEVEL)
        self._proxy: str | None = load_env_var(ConfigSchema.PROXY)
        self._app_config_path: str = load_env_var(ConfigSchema.APP_CONFIG_PATH)
        self._credentials_file: str | None = load_env_var(ConfigSchema.CREDENTIALS_FILE)
        self._token_config_cache_ttl: float = load_env_var(ConfigSchema.TOKEN_CONFIG_CACHE_TTL)
        self._models_fetch_timeout: float = load_env_var(ConfigSchema.MODELS_FETCH_TIMEOUT)

        self._managers = LazyManagers(
            app_config_path=self._app_config_path,
            credentials_file=self._credentials_file,
            token_config_cache_ttl=self._token_config_cache_ttl,
        )

    # Server settings
    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def log_level(self) -> str:
        # Extract just the first word to handle trailing comments
        return self._log_level.split()[0].upper()

    # Provider settings
    @property
    def proxy(self) -> str | None:
        return self._proxy

    @property
    def app_config_path(self) -> str:
        return self._app_config_path

    @property
    def credentials_file(self) -> str | None:
        return self._credentials_file

    # Cache settings
    @property
    def token_config_cache_ttl(self) -> float:
        return self._token_config_cache_ttl

    @property
    def models_fetch_timeout(self) -> float:
        return self._models_fetch_timeout

    # Lazy manager properties
    @property
    def app_config(self) -> "AppConfig":
        return self._managers.app_config

    @property
    def credential_store(self) -> "CredentialStore":
        return self._managers.credential_store

    @property
    def cache(self) -> "MemoryCache":
        return self._managers.cache

    @staticmethod
    def env_summary() -> dict[str, str | None]:
        """Return the raw values of every schema variable (for the CLI)."""
        return {spec.name: os.environ.get(spec.name) for spec in ConfigSchema.all_specs().values()}

    @classmethod
    def reset_singleton(cls) -> None:
        """Reset the global config singleton for test isolation.

        WARNING: Never call this in production code!
        """
        global config
        config = cls()


# Module-level singleton
config = Config()


def get_config() -> Config:
    """Return the current singleton, including one swapped in by reset_singleton()."""
    return config
