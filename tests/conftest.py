"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest

from askgpt.chat.client import ChatCompletionClient
from askgpt.config import OpenAISettings, get_settings

TEST_URL = "https://api.test/v1/chat/completions"


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Drop cached settings around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def response_data() -> dict[str, Any]:
    """A well-formed chat-completion response body."""
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "model": "gpt-4-turbo",
        "usage": {
            "prompt_tokens": 9,
            "completion_tokens": 12,
            "total_tokens": 21,
        },
        "choices": [
            {
                "message": {
                    "role": "assistant",
                    "content": "Hello there, how may I assist you today?",
                },
                "finish_reason": "stop",
                "index": 0,
            }
        ],
    }


@pytest.fixture
def settings() -> OpenAISettings:
    """API settings pointing at a fake endpoint."""
    return OpenAISettings(
        api_key="sk-test",
        model="gpt-4-turbo",
        endpoint=TEST_URL,
    )


@pytest.fixture
def make_client(
    settings: OpenAISettings,
) -> Callable[[Callable[[httpx.Request], httpx.Response]], ChatCompletionClient]:
    """Build a client whose HTTP traffic goes to ``handler``."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> ChatCompletionClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ChatCompletionClient("sk-test", settings=settings, client=http_client)

    return _make

