"""RESPX-based HTTP mocking fixtures for testing.

Reusable fixtures for mocking OpenAI-compatible provider endpoints.
"""

import httpx
import pytest
import respx

from tests.config import OPENROUTER_BASE_URL


# === OpenAI Response Fixtures ===


@pytest.fixture
def openai_chat_completion():
    """Standard OpenAI chat completion response."""
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1677652288,
        "model": "gpt-4",
        "choices": [
            {
                "index": 0,
                "message": {
                    "role": "assistant",
                    "content": "Hello! How can I help you today?",
                },
                "finish_reason": "stop",
            }
        ],
        "usage": {
            "prompt_tokens": 10,
            "completion_tokens": 15,
            "total_tokens": 25,
        },
    }


@pytest.fixture
def openrouter_models_response():
    """OpenRouter /models listing with pricing and context lengths."""
    return {
        "data": [
            {
                "id": "openai/gpt-4o",
                "context_length": 128000,
                "pricing": {"prompt": "0.0000025", "completion": "0.00001"},
            },
            {
                "id": "anthropic/claude-3.5-sonnet",
                "context_length": 200000,
                "pricing": {"prompt": "0.000003", "completion": "0.000015"},
            },
        ]
    }


# === RESPX Router Fixtures ===


@pytest.fixture
def mock_openrouter_api():
    """Mock OpenRouter API endpoints with RESPX.

    Example:
        def test_models(mock_openrouter_api, openrouter_models_response):
            mock_openrouter_api.get("/models").mock(
                return_value=httpx.Response(200, json=openrouter_models_response)
            )
    """
    with respx.mock(base_url=OPENROUTER_BASE_URL) as respx_mock:
        yield respx_mock


# === Helper Functions ===


def create_streaming_response(chunks: list[bytes]) -> httpx.Response:
    """Create a text/event-stream response from raw SSE chunks."""
    return httpx.Response(
        200,
        headers={"content-type": "text/event-stream"},
        content=b"".join(chunks),
    )
