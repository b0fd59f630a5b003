"""Instrumented httpx transport for outbound provider calls.

Wraps a real transport so every call to a provider is logged and timed,
optionally redirected to a fixed URL, and optionally tagged with the
caller's session and user ids.

Example:
    >>> transport = InstrumentedTransport(endpoint="OpenRouter", session_id="c-1")
    >>> client = httpx.AsyncClient(transport=transport)
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_PATH = "/chat/completions"
MESSAGE_PREVIEW_CHARS = 100

# Headers httpx derives from the URL and body of a rebuilt request
_DERIVED_HEADERS = frozenset({"host", "content-length"})

FetchFn = Callable[..., Awaitable[httpx.Response]]


class InstrumentedTransport(httpx.AsyncBaseTransport):
    """Async transport adding logging, URL override and body injection.

    Bound values are immutable strings, so a single instance may serve
    concurrent requests; the wrapped transport owns the connection pool.
    """

    def __init__(
        self,
        *,
        direct_endpoint: bool = False,
        reverse_proxy_url: str = "",
        endpoint: str = "",
        session_id: str | None = None,
        user_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the transport.

        Args:
            direct_endpoint: Send every request to `reverse_proxy_url` as is.
            reverse_proxy_url: Target URL used when `direct_endpoint` is set.
            endpoint: Label prefixed to log messages; also enables the
                chat-completion response summary.
            session_id: Injected as ``session_id`` into chat-completion bodies.
            user_id: Injected as ``user_id`` into chat-completion bodies.
            transport: Inner transport. Defaults to httpx.AsyncHTTPTransport
                built with the remaining keyword arguments.
        """
        self.direct_endpoint = direct_endpoint
        self.reverse_proxy_url = reverse_proxy_url
        self.endpoint = endpoint
        self.session_id = session_id
        self.user_id = user_id
        self._transport = transport or httpx.AsyncHTTPTransport(**kwargs)

    @property
    def _label(self) -> str:
        return f"[{self.endpoint}] " if self.endpoint else ""

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        url = (
            self.reverse_proxy_url
            if self.direct_endpoint and self.reverse_proxy_url
            else str(request.url)
        )
        body = await request.aread()
        injected_body = self._inject_session_info(url, body)

        if url != str(request.url) or injected_body is not body:
            request = _rebuild_request(request, url, injected_body)

        logger.info(
            f"{self._label}Making request to {url}",
            extra={
                "method": request.method,
                "has_body": bool(injected_body),
                "session_id_injected": bool(self.session_id),
                "user_id_injected": bool(self.user_id),
            },
        )

        start = time.perf_counter()
        try:
            response = await self._transport.handle_async_request(request)
        except Exception as e:
            logger.error(
                f"{self._label}Request failed to {url}",
                extra={"error": str(e), "duration": _format_duration(start)},
            )
            raise

        response.request = request
        content_type = response.headers.get("content-type", "")
        logger.debug(
            f"{self._label}Response received from {url}",
            extra={
                "status": response.status_code,
                "duration": _format_duration(start),
                "content_type": content_type,
            },
        )

        if (
            self.endpoint
            and CHAT_COMPLETIONS_PATH in url
            and response.is_success
            and "text/event-stream" not in content_type
        ):
            response = await self._summarize_and_clone(response, request)

        return response

    def _inject_session_info(self, url: str, body: bytes) -> bytes:
        """Return the body with session/user ids added, or `body` unchanged."""
        if not (self.session_id or self.user_id) or CHAT_COMPLETIONS_PATH not in url:
            return body
        if not body:
            return body

        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(
                f"{self._label}Failed to inject session info into request body",
                extra={"error": str(e)},
            )
            return body
        if not isinstance(payload, dict):
            logger.warning(
                f"{self._label}Failed to inject session info into request body",
                extra={"error": f"expected a JSON object, got {type(payload).__name__}"},
            )
            return body

        logger.info(
            f"{self._label}Injecting session info into request",
            extra={
                "has_session_id": bool(self.session_id),
                "has_user_id": bool(self.user_id),
            },
        )
        if self.session_id:
            payload["session_id"] = self.session_id
        if self.user_id:
            payload["user_id"] = self.user_id
        return json.dumps(payload).encode("utf-8")

    async def _summarize_and_clone(
        self, response: httpx.Response, request: httpx.Request
    ) -> httpx.Response:
        """Log a summary of the body and return an unread copy of `response`.

        The copy carries the raw bytes, so the client still decodes, closes
        and times it as it would the original.
        """
        try:
            raw = b"".join([chunk async for chunk in response.stream])
        finally:
            await response.aclose()

        self._log_completion_summary(response, raw)
        return httpx.Response(
            response.status_code,
            headers=response.headers,
            stream=httpx.ByteStream(raw),
            extensions=response.extensions,
            request=request,
        )

    def _log_completion_summary(self, response: httpx.Response, raw: bytes) -> None:
        try:
            # Decoded per the content-encoding header
            decoded = httpx.Response(response.status_code, headers=response.headers, content=raw)
            body = decoded.content
            if not body:
                return
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError, httpx.DecodingError) as e:
            logger.warning(
                f"{self._label}Could not parse response body for logging",
                extra={"error": str(e)},
            )
            return

        logger.debug(f"{self._label}Chat completion response", extra=summarize_completion(data))

    async def aclose(self) -> None:
        await self._transport.aclose()


def summarize_completion(data: Any) -> dict[str, Any]:
    """Redacted summary of a chat-completion response body."""
    if not isinstance(data, dict):
        return {"has_choices": False}

    choices = data.get("choices")
    first = choices[0] if isinstance(choices, list) and choices else None
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None

    return {
        "has_choices": bool(choices),
        "choices_length": len(choices) if isinstance(choices, list) else None,
        "first_choice_has_message": bool(message),
        "message_preview": content[:MESSAGE_PREVIEW_CHARS] if isinstance(content, str) else None,
        "usage": data.get("usage"),
    }


def _rebuild_request(request: httpx.Request, url: str, body: bytes) -> httpx.Request:
    headers = [
        (name, value)
        for name, value in request.headers.multi_items()
        if name.lower() not in _DERIVED_HEADERS
    ]
    return httpx.Request(
        request.method,
        url,
        headers=headers,
        content=body,
        extensions=request.extensions,
    )


def _format_duration(start: float) -> str:
    return f"{(time.perf_counter() - start) * 1000:.0f}ms"


def create_fetch(
    *,
    direct_endpoint: bool = False,
    reverse_proxy_url: str = "",
    endpoint: str = "",
    session_id: str | None = None,
    user_id: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchFn:
    """Build a fetch-style callable routed through an InstrumentedTransport.

    The returned ``fetch(url, init=None)`` accepts ``init`` keys ``method``,
    ``headers`` and ``body``. The caller owns the returned response and must
    read or close it.
    """
    instrumented = InstrumentedTransport(
        direct_endpoint=direct_endpoint,
        reverse_proxy_url=reverse_proxy_url,
        endpoint=endpoint,
        session_id=session_id,
        user_id=user_id,
        transport=transport,
    )

    async def fetch(url: str, init: Mapping[str, Any] | None = None) -> httpx.Response:
        init = init or {}
        body = init.get("body")
        if isinstance(body, str):
            body = body.encode("utf-8")
        request = httpx.Request(
            init.get("method") or "GET",
            url,
            headers=init.get("headers"),
            content=body,
        )
        return await instrumented.handle_async_request(request)

    return fetch
