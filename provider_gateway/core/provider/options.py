"""Client option assembly for provider calls.

`build_openai_options` turns resolved credentials and endpoint settings into
the `ClientOptions` an OpenAI-compatible client is constructed from. Other
first-party providers go through the plain field mapping of
`build_provider_options`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from provider_gateway.core.placeholders import extract_env_variable
from provider_gateway.core.transport import InstrumentedTransport

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"

# Option keys describing client behaviour rather than the HTTP connection
BEHAVIOUR_KEYS = (
    "title_convo",
    "title_model",
    "title_method",
    "title_message_role",
    "force_prompt",
    "summary_model",
    "model_display_label",
    "context_strategy",
    "direct_endpoint",
    "stream_rate",
    "custom_params",
)


@dataclass
class ClientOptions:
    """Everything needed to construct a provider client for one request.

    Attributes:
        provider: Endpoint or provider name the options were built for
        llm_config: Model invocation settings (model, api_key, sampling params)
        config_options: Connection settings (base_url, proxy, default_headers,
            and a bound `transport` when requests must be instrumented)
        custom_options: Behavioural flags (title generation, context strategy,
            stream rate, role overrides)
        tools: Provider-side tools, when the provider declares any
        use_legacy_content: Send message content as plain strings
        endpoint_token_config: Per-model pricing/context metadata
    """

    provider: str
    llm_config: dict[str, Any] = field(default_factory=dict)
    config_options: dict[str, Any] = field(default_factory=dict)
    custom_options: dict[str, Any] = field(default_factory=dict)
    tools: list[Any] | None = None
    use_legacy_content: bool = False
    endpoint_token_config: dict[str, dict[str, float]] | None = None

    def to_summary(self) -> dict[str, Any]:
        """JSON-safe view with secrets redacted and the transport described."""
        llm_config = {
            k: (REDACTED if k == "api_key" and v else v) for k, v in self.llm_config.items()
        }
        config_options = {}
        for key, value in self.config_options.items():
            if key == "transport":
                config_options[key] = type(value).__name__
            elif key == "default_headers" and value:
                config_options[key] = {name: REDACTED for name in value}
            else:
                config_options[key] = value
        return {
            "provider": self.provider,
            "llm_config": llm_config,
            "config_options": config_options,
            "custom_options": dict(self.custom_options),
            "tools": self.tools,
            "use_legacy_content": self.use_legacy_content,
            "endpoint_token_config": self.endpoint_token_config,
        }


def resolve_headers(headers: Mapping[str, str] | None) -> dict[str, str] | None:
    """Substitute ``${VAR}`` references in header values."""
    if not headers:
        return None
    return {name: extract_env_variable(str(value)) for name, value in headers.items()}


def build_openai_options(
    api_key: str,
    options: Mapping[str, Any],
    endpoint: str,
) -> ClientOptions:
    """Build client options for an OpenAI-compatible endpoint.

    Args:
        api_key: Resolved API key.
        options: Merged endpoint options. Recognized keys are
            ``reverse_proxy_url``, ``proxy``, ``model_options``, ``headers``,
            ``add_params``, ``drop_params``, ``inject_session_info``,
            ``session_id``, ``user_id``, ``api_version`` and every key in
            BEHAVIOUR_KEYS.
        endpoint: Endpoint name, used as provider label and log prefix.

    Returns:
        A fresh ClientOptions; `config_options["transport"]` is set when the
        endpoint needs URL override or session injection.
    """
    model_options = dict(options.get("model_options") or {})
    llm_config: dict[str, Any] = {"streaming": True, "api_key": api_key, **model_options}

    add_params = options.get("add_params") or {}
    if add_params:
        logger.debug(f"[{endpoint}] Adding params: {sorted(add_params)}")
        llm_config.update(add_params)

    for param in options.get("drop_params") or ():
        if llm_config.pop(param, None) is not None:
            logger.debug(f"[{endpoint}] Dropped param: {param}")

    base_url = options.get("reverse_proxy_url") or None
    proxy = options.get("proxy") or None
    config_options: dict[str, Any] = {"base_url": base_url}
    if proxy:
        config_options["proxy"] = proxy
    if options.get("api_version"):
        config_options["api_version"] = options["api_version"]

    default_headers = resolve_headers(options.get("headers"))
    if default_headers:
        config_options["default_headers"] = default_headers

    direct_endpoint = bool(options.get("direct_endpoint"))
    inject_session_info = bool(options.get("inject_session_info"))
    if direct_endpoint or inject_session_info:
        transport_kwargs: dict[str, Any] = {"proxy": proxy} if proxy else {}
        config_options["transport"] = InstrumentedTransport(
            direct_endpoint=direct_endpoint,
            reverse_proxy_url=base_url or "",
            endpoint=endpoint,
            session_id=options.get("session_id") if inject_session_info else None,
            user_id=options.get("user_id") if inject_session_info else None,
            **transport_kwargs,
        )

    custom_options = {key: options[key] for key in BEHAVIOUR_KEYS if key in options}

    return ClientOptions(
        provider=endpoint,
        llm_config=llm_config,
        config_options=config_options,
        custom_options=custom_options,
    )


def build_provider_options(
    provider: str,
    api_key: str,
    base_url: str | None,
    model_parameters: Mapping[str, Any] | None = None,
    **config_options: Any,
) -> ClientOptions:
    """Plain field mapping for providers without OpenAI-style options."""
    llm_config: dict[str, Any] = {"api_key": api_key, **(model_parameters or {})}
    return ClientOptions(
        provider=provider,
        llm_config=llm_config,
        config_options={"base_url": base_url, **config_options},
    )
