"""Declarative schema for environment variable configuration.

This module provides a single source of truth for all environment variables,
including automatic type coercion, validation, and documentation generation.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

PROXY_SCHEMES = frozenset({"http", "https", "socks5", "socks5h"})


@dataclass(frozen=True)
class EnvVarSpec:
    """Specification for a single environment variable.

    Attributes:
        name: Environment variable name (e.g., "PORT", "LOG_LEVEL")
        default: Default value if env var not set
        type_hint: Type for validation (int, str, float, bool)
        description: Human-readable description for docs
        validator: Optional custom validation function
        coerce: Optional function to convert string to target type
    """

    name: str
    default: Any
    type_hint: type
    description: str
    validator: Callable[[Any], bool] | None = None
    coerce: Callable[[str], Any] | None = None


class ConfigSchema:
    """Registry of all configuration environment variables."""

    # === Server Settings ===

    HOST = EnvVarSpec(
        name="HOST",
        default="0.0.0.0",
        type_hint=str,
        description="Server host address to bind to",
    )

    PORT = EnvVarSpec(
        name="PORT",
        default=8090,
        type_hint=int,
        description="Server port number",
        validator=lambda x: 1 <= x <= 65535,
    )

    LOG_LEVEL = EnvVarSpec(
        name="LOG_LEVEL",
        default="INFO",
        type_hint=str,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        validator=lambda x: x.split()[0].upper()
        in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )

    # === Provider Settings ===

    PROXY = EnvVarSpec(
        name="PROXY",
        default=None,
        type_hint=str,
        description="Outbound HTTP proxy handed to every provider client",
        validator=lambda x: urlsplit(x).scheme in PROXY_SCHEMES and bool(urlsplit(x).hostname),
    )

    APP_CONFIG_PATH = EnvVarSpec(
        name="APP_CONFIG_PATH",
        default="provider-gateway.toml",
        type_hint=str,
        description="TOML file declaring custom endpoints",
    )

    CREDENTIALS_FILE = EnvVarSpec(
        name="CREDENTIALS_FILE",
        default=None,
        type_hint=str,
        description="JSON file with user-provided credentials (in-memory store when unset)",
    )

    # === Token Config Cache ===

    TOKEN_CONFIG_CACHE_TTL = EnvVarSpec(
        name="TOKEN_CONFIG_CACHE_TTL",
        default=1800.0,
        type_hint=float,
        description="TTL in seconds for fetched model token metadata",
        validator=lambda x: x > 0,
    )

    MODELS_FETCH_TIMEOUT = EnvVarSpec(
        name="MODELS_FETCH_TIMEOUT",
        default=5.0,
        type_hint=float,
        description="Timeout in seconds for fetching a provider's model list",
        validator=lambda x: x > 0,
    )

    @classmethod
    def all_specs(cls) -> dict[str, EnvVarSpec]:
        """Get all environment variable specifications.

        Returns:
            Dictionary mapping spec names to EnvVarSpec objects
        """
        return {
            name: getattr(cls, name)
            for name in dir(cls)
            if isinstance(getattr(cls, name), EnvVarSpec)
        }
