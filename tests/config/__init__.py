"""Test configuration constants for Provider Gateway tests."""

TEST_USER_ID = "user-123"

TEST_API_KEYS = {
    "OPENROUTER_KEY": "test-openrouter-key-mocked",
    "OPENAI_API_KEY": "test-openai-key-mocked",
}

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

__all__ = ["OPENROUTER_BASE_URL", "TEST_API_KEYS", "TEST_USER_ID"]
