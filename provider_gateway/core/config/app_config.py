"""Application configuration: operator-declared custom endpoints.

Endpoints are declared in a TOML file::

    [endpoints.all]
    stream-rate = 25

    [[endpoints.custom]]
    name = "OpenRouter"
    api-key = "${OPENROUTER_KEY}"
    base-url = "https://openrouter.ai/api/v1"
    models = { default = ["openrouter/auto"], fetch = true }

Keys may be written kebab-case, snake_case or camelCase.
"""

from __future__ import annotations

import logging
import re
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from provider_gateway.core.exceptions import EndpointConfigNotFoundError

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _normalize_key(key: str) -> str:
    # "baseURL" -> "base_url", "api-key" -> "api_key"
    return _CAMEL_BOUNDARY.sub("_", key.replace("-", "_")).lower()


def _normalize(raw: dict[str, Any]) -> dict[str, Any]:
    return {_normalize_key(k): v for k, v in raw.items()}


def _known_fields(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    unknown = set(data) - names
    if unknown:
        logger.debug(f"Ignoring unknown {cls.__name__} keys: {sorted(unknown)}")
    return {k: v for k, v in data.items() if k in names}


@dataclass(frozen=True)
class EndpointModelsConfig:
    """Model list settings of a custom endpoint."""

    default: tuple[str, ...] = ()
    fetch: bool = False
    user_id_query: bool = False

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> EndpointModelsConfig:
        if not raw:
            return cls()
        data = _known_fields(cls, _normalize(raw))
        data["default"] = tuple(data.get("default") or ())
        return cls(**data)


@dataclass(frozen=True)
class EndpointConfig:
    """Operator-declared settings for one OpenAI-compatible custom endpoint.

    ``api_key`` and ``base_url`` may hold a ``${VAR}`` placeholder or the
    ``user_provided`` sentinel.
    """

    name: str
    api_key: str | None = None
    base_url: str | None = None
    models: EndpointModelsConfig = field(default_factory=EndpointModelsConfig)
    headers: dict[str, str] | None = None
    add_params: dict[str, Any] | None = None
    drop_params: tuple[str, ...] | None = None
    custom_params: dict[str, Any] | None = None
    title_convo: bool | None = None
    title_model: str | None = None
    title_method: str | None = None
    title_message_role: str | None = None
    force_prompt: bool | None = None
    summarize: bool | None = None
    summary_model: str | None = None
    model_display_label: str | None = None
    direct_endpoint: bool | None = None
    stream_rate: float | None = None
    token_config: dict[str, dict[str, float]] | None = None
    inject_session_info: bool = False

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> EndpointConfig:
        data = _known_fields(cls, _normalize(raw))
        if not data.get("name"):
            raise ValueError("Custom endpoint requires a name")
        data["models"] = EndpointModelsConfig.from_dict(data.get("models"))
        if data.get("drop_params") is not None:
            data["drop_params"] = tuple(data["drop_params"])
        return cls(**data)


@dataclass(frozen=True)
class AllEndpointsConfig:
    """Settings applied to every endpoint."""

    stream_rate: float | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> AllEndpointsConfig:
        return cls(**_known_fields(cls, _normalize(raw)))


@dataclass(frozen=True)
class EndpointsConfig:
    custom: tuple[EndpointConfig, ...] = ()
    all: AllEndpointsConfig | None = None


@dataclass(frozen=True)
class AppConfig:
    """Application configuration consumed read-only by the gateway."""

    endpoints: EndpointsConfig = field(default_factory=EndpointsConfig)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> AppConfig:
        endpoints_raw = raw.get("endpoints") or {}
        custom = tuple(EndpointConfig.from_dict(item) for item in endpoints_raw.get("custom", []))
        all_raw = endpoints_raw.get("all")
        all_config = AllEndpointsConfig.from_dict(all_raw) if all_raw is not None else None
        return cls(endpoints=EndpointsConfig(custom=custom, all=all_config))


def load_app_config(path: str | Path) -> AppConfig:
    """Load the application configuration from a TOML file.

    A missing file yields an empty configuration; a malformed one raises.

    Raises:
        ValueError: If the file is not valid TOML or declares an invalid endpoint.
    """
    config_path = Path(path).expanduser()
    if not config_path.exists():
        logger.debug(f"No app config at {config_path}, using empty configuration")
        return AppConfig()

    try:
        with config_path.open("rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid app config {config_path}: {e}") from e

    app_config = AppConfig.from_dict(raw)
    logger.info(
        f"Loaded app config from {config_path}",
        extra={"custom_endpoints": [e.name for e in app_config.endpoints.custom]},
    )
    return app_config


def get_custom_endpoint_config(endpoint: str, app_config: AppConfig | None) -> EndpointConfig | None:
    """Return the first custom endpoint declared under `endpoint`.

    Names match exactly, except "ollama" which matches case-insensitively.

    Raises:
        EndpointConfigNotFoundError: If no application configuration is available.
    """
    if app_config is None:
        raise EndpointConfigNotFoundError(endpoint)

    for candidate in app_config.endpoints.custom:
        if candidate.name == endpoint:
            return candidate
        if candidate.name.lower() == "ollama" and endpoint.lower() == "ollama":
            return candidate
    return None
