"""
Root Pytest Fixtures.

Shared fixtures available to all tests.

Storage:
    Tests use the in-memory backend unless they exercise the JSON file
    backend directly, in which case they write under tmp_path.

Remote AI endpoint:
    Never contacted. Gateways are built with an httpx.MockTransport whose
    handler records every request it receives.
"""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from studynotes.core.config_schema import AISchema
from studynotes.repositories.backends import MemoryBackend
from studynotes.repositories.store import LocalStore
from studynotes.services.ai import AIGateway

TEST_API_KEY = "sk-test-key"


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def backend() -> MemoryBackend:
    """Empty in-memory key-value backend."""
    return MemoryBackend()


@pytest.fixture
def store(backend: MemoryBackend) -> LocalStore:
    """LocalStore over the in-memory backend."""
    return LocalStore(backend)


# =============================================================================
# AI Fixtures
# =============================================================================


@pytest.fixture
def ai_config() -> AISchema:
    """AI settings pointing at a fake endpoint."""
    return AISchema(
        endpoint="https://ai.test/v1/chat/completions",
        model="test-model",
        temperature=0.7,
        timeout_seconds=5,
        placeholder_api_key="your_openai_api_key_here",
    )


def completion_body(content: str) -> dict[str, Any]:
    """Minimal chat-completion response carrying content."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"},
        ],
    }


class RecordingHandler:
    """MockTransport handler that records requests and replays a fixed response."""

    def __init__(self, status_code: int = 200, body: Any = None, content: str | None = None) -> None:
        self.status_code = status_code
        self.body = body if body is not None else completion_body(content or "")
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def payloads(self) -> list[dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]


@pytest.fixture
def make_gateway(ai_config: AISchema) -> Callable[..., tuple[AIGateway, RecordingHandler]]:
    """
    Build a gateway whose HTTP traffic goes to a RecordingHandler.

    Usage:
        gateway, handler = make_gateway(content="An explanation")
        await gateway.explain("heap")
        assert len(handler.requests) == 1
    """

    def _make(
        status_code: int = 200,
        body: Any = None,
        content: str | None = None,
        api_key: str = TEST_API_KEY,
    ) -> tuple[AIGateway, RecordingHandler]:
        handler = RecordingHandler(status_code=status_code, body=body, content=content)
        gateway = AIGateway(
            config=ai_config,
            api_key=api_key,
            transport=httpx.MockTransport(handler),
        )
        return gateway, handler

    return _make
