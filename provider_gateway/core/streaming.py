"""Helpers for forwarding model stream events to a client.

Handlers take the response sink as an explicit argument (bound with
functools.partial) instead of closing over a client object, so a finished
request's sink is not kept alive by a long-lived agent graph.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from enum import Enum
from functools import partial
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class GraphEvents(str, Enum):
    """Agent graph events relayed to the client."""

    ON_RUN_STEP = "on_run_step"
    ON_MESSAGE_DELTA = "on_message_delta"
    ON_REASONING_DELTA = "on_reasoning_delta"


class ResponseSink(Protocol):
    """Anything that accepts server-sent event frames."""

    def write(self, data: str) -> Any: ...


def format_sse_event(event: Any) -> str:
    """Encode `event` as a single ``message`` server-sent event frame."""
    return f"event: message\ndata: {json.dumps(event)}\n\n"


def forward_event(sink: ResponseSink | None, event: Any) -> None:
    """Write `event` to `sink`; a missing sink drops the event."""
    if sink is None:
        return
    sink.write(format_sse_event(event))


def create_stream_event_handlers(
    sink: ResponseSink | None,
) -> dict[str, Callable[[Any], None]]:
    """Map each relayed GraphEvents name to a handler writing to `sink`."""
    handler = partial(forward_event, sink)
    return {
        GraphEvents.ON_RUN_STEP.value: handler,
        GraphEvents.ON_MESSAGE_DELTA.value: handler,
        GraphEvents.ON_REASONING_DELTA.value: handler,
    }


def create_handle_llm_new_token(stream_rate: float | None) -> Callable[..., Awaitable[None]]:
    """Build a per-token hook pacing the stream by `stream_rate` milliseconds."""

    async def handle_llm_new_token(*args: Any, **kwargs: Any) -> None:
        if stream_rate:
            await asyncio.sleep(stream_rate / 1000)

    return handle_llm_new_token


class QueueSink:
    """ResponseSink backed by an asyncio.Queue.

    Writers call write(); a StreamingResponse consumes frames through
    aiter() until close() is called.
    """

    _CLOSED = object()

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=maxsize)
        self.closed = False

    def write(self, data: str) -> None:
        if self.closed:
            logger.debug("Dropping event written to a closed sink")
            return
        self._queue.put_nowait(data)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._queue.put_nowait(self._CLOSED)

    async def aiter(self) -> AsyncIterator[str]:
        while True:
            item = await self._queue.get()
            if item is self._CLOSED:
                return
            yield item
