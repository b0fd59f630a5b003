"""Fetch a provider's model list and derive per-model token metadata.

Providers listed in FETCH_TOKEN_CONFIG return pricing and context sizes
alongside each model; that metadata is written to the token config cache
so later requests skip the round trip.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from provider_gateway.core.cache import NamespacedCache
from provider_gateway.core.exceptions import ModelFetchError
from provider_gateway.core.provider.constants import FETCH_TOKEN_CONFIG

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
TOKENS_PER_PRICE_UNIT = 1_000_000


def _to_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def build_token_config(models: list[dict[str, Any]]) -> dict[str, dict[str, float]]:
    """Map OpenRouter-style model entries to ``{model: {prompt, completion, context}}``.

    Prices arrive per token and are stored per million tokens. Missing,
    malformed or non-finite values are stored as 0.
    """
    token_config: dict[str, dict[str, float]] = {}
    for model in models:
        model_id = model.get("id")
        if not model_id or not isinstance(model_id, str):
            continue
        pricing = model.get("pricing")
        if not isinstance(pricing, dict):
            logger.debug(f"Skipping pricing for {model_id}", extra={"pricing": pricing})
            pricing = {}
        token_config[model_id] = {
            "prompt": _to_float(pricing.get("prompt")) * TOKENS_PER_PRICE_UNIT,
            "completion": _to_float(pricing.get("completion")) * TOKENS_PER_PRICE_UNIT,
            "context": int(_to_float(model.get("context_length"))),
        }
    return token_config


async def fetch_models(
    api_key: str,
    base_url: str,
    name: str,
    user_id: str,
    token_key: str,
    *,
    cache: NamespacedCache | None = None,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    user_id_query: bool = False,
) -> list[str]:
    """Return the model ids served at ``{base_url}/models``.

    For token-config providers the derived metadata is cached at `token_key`.

    Raises:
        ModelFetchError: On HTTP failure or an unexpected payload.
    """
    url = f"{base_url.rstrip('/')}/models"
    headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
    params = {"user": user_id} if user_id_query and user_id else None

    logger.debug(f"Fetching models for {name}", extra={"url": url})
    try:
        if client is not None:
            response = await client.get(url, headers=headers, params=params, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout) as owned_client:
                response = await owned_client.get(url, headers=headers, params=params)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as e:
        raise ModelFetchError(name, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise ModelFetchError(name, f"{type(e).__name__}: {e}") from e
    except ValueError as e:
        raise ModelFetchError(name, f"invalid JSON: {e}") from e

    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list):
        raise ModelFetchError(name, "response has no 'data' list")

    entries = [item for item in data if isinstance(item, dict)]
    model_ids = [item["id"] for item in entries if item.get("id")]

    if name.lower() in FETCH_TOKEN_CONFIG and cache is not None:
        token_config = build_token_config(entries)
        await cache.set(token_key, token_config)
        logger.info(
            f"Cached token config for {name}",
            extra={"token_key": token_key, "models": len(token_config)},
        )

    return model_ids
