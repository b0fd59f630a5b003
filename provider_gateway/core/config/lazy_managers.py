"""Lazy initialization for the app config, credential store and token cache.

These are initialized on first access so that importing the config module
never touches the filesystem.
"""

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from provider_gateway.core.cache import MemoryCache
    from provider_gateway.core.config.app_config import AppConfig
    from provider_gateway.core.credentials import CredentialStore


class LazyManagers:
    """Lazy initialization for process-wide singletons.

    Thread-safety is ensured via threading.Lock for each lazy property.
    The double-check pattern is used to minimize lock contention.
    """

    def __init__(
        self,
        app_config_path: str,
        credentials_file: str | None,
        token_config_cache_ttl: float,
    ) -> None:
        self._app_config_path = app_config_path
        self._credentials_file = credentials_file
        self._token_config_cache_ttl = token_config_cache_ttl

        self._app_config: AppConfig | None = None
        self._credential_store: CredentialStore | None = None
        self._cache: MemoryCache | None = None

        self._app_config_lock = threading.Lock()
        self._credential_store_lock = threading.Lock()
        self._cache_lock = threading.Lock()

    @property
    def app_config(self) -> "AppConfig":
        """Get or load the application configuration from APP_CONFIG_PATH."""
        if self._app_config is None:
            with self._app_config_lock:
                if self._app_config is None:
                    from provider_gateway.core.config.app_config import load_app_config

                    self._app_config = load_app_config(self._app_config_path)

        return self._app_config

    @property
    def credential_store(self) -> "CredentialStore":
        """Get or create the credential store.

        Uses the JSON file store when CREDENTIALS_FILE is set, otherwise an
        empty in-memory store.
        """
        if self._credential_store is None:
            with self._credential_store_lock:
                if self._credential_store is None:
                    if self._credentials_file:
                        from provider_gateway.core.credentials.file_storage import (
                            FileCredentialStore,
                        )

                        self._credential_store = FileCredentialStore(self._credentials_file)
                    else:
                        from provider_gateway.core.credentials.memory_storage import (
                            InMemoryCredentialStore,
                        )

                        self._credential_store = InMemoryCredentialStore()

        return self._credential_store

    @property
    def cache(self) -> "MemoryCache":
        """Get or create the process-wide cache."""
        if self._cache is None:
            with self._cache_lock:
                if self._cache is None:
                    from provider_gateway.core.cache import MemoryCache

                    self._cache = MemoryCache(default_ttl=self._token_config_cache_ttl)

        return self._cache
