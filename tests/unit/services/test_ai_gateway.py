"""
Unit Tests for the AI Gateway.

All HTTP traffic goes to an httpx.MockTransport; the real endpoint is never
contacted.
"""

import json

import httpx
import pytest

from studynotes.core.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    MalformedAIOutputError,
    ValidationError,
)
from studynotes.schemas.flashcard import FlashcardDraft
from studynotes.services.ai import AIGateway, AIOperation, parse_flashcard_output

CARDS_JSON = json.dumps([
    {"question": "What is a heap?", "answer": "A tree with the heap property."},
    {"question": "Heap insert cost?", "answer": "O(log n)"},
])


class TestExecute:
    """Tests for explain, expand and summarize."""

    @pytest.mark.asyncio
    async def test_explain_returns_completion_text(self, make_gateway):
        gateway, handler = make_gateway(content="A heap is a tree...")

        async with gateway:
            result = await gateway.explain("binary heap")

        assert result == "A heap is a tree..."
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_request_payload(self, make_gateway, ai_config):
        gateway, handler = make_gateway(content="ok")

        async with gateway:
            await gateway.execute(AIOperation.SUMMARIZE, "Dijkstra's algorithm")

        request = handler.requests[0]
        assert str(request.url) == ai_config.endpoint
        assert request.method == "POST"
        assert request.headers["Authorization"] == "Bearer sk-test-key"

        payload = handler.payloads[0]
        assert payload["model"] == "test-model"
        assert payload["temperature"] == 0.7
        assert [m["role"] for m in payload["messages"]] == ["system", "user"]
        assert "Dijkstra's algorithm" in payload["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_each_operation_has_its_own_instruction(self, make_gateway):
        gateway, handler = make_gateway(content="ok")

        async with gateway:
            for op in AIOperation:
                await gateway.execute(op, "text")

        system_prompts = {p["messages"][0]["content"] for p in handler.payloads}
        assert len(system_prompts) == 3
        assert "computer science tutor" in handler.payloads[0]["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_operation_accepts_plain_string(self, make_gateway):
        gateway, _ = make_gateway(content="ok")
        async with gateway:
            assert await gateway.execute("expand", "text") == "ok"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   \n\t"])
    async def test_empty_input_fails_without_request(self, make_gateway, text):
        gateway, handler = make_gateway(content="unused")

        with pytest.raises(ValidationError, match="No text provided to explain"):
            await gateway.explain(text)

        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_unknown_operation(self, make_gateway):
        gateway, handler = make_gateway(content="unused")

        with pytest.raises(ValidationError, match="Unknown AI operation"):
            await gateway.execute("translate", "text")

        assert handler.requests == []


class TestCredential:
    """A missing or placeholder key fails before any request."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("api_key", ["", "your_openai_api_key_here"])
    async def test_unusable_key_raises_configuration_error(self, make_gateway, api_key):
        gateway, handler = make_gateway(content="unused", api_key=api_key)

        assert gateway.is_configured is False
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            await gateway.summarize("text")

        assert handler.requests == []

    def test_configured_key(self, make_gateway):
        gateway, _ = make_gateway()
        assert gateway.is_configured is True


class TestRemoteFailures:
    """Transport and HTTP failures surface as ExternalServiceError."""

    @pytest.mark.asyncio
    async def test_error_message_from_body_is_surfaced(self, make_gateway):
        gateway, _ = make_gateway(
            status_code=401,
            body={"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}},
        )

        with pytest.raises(ExternalServiceError, match="Incorrect API key provided"):
            await gateway.explain("text")

    @pytest.mark.asyncio
    async def test_error_without_body_uses_generic_message(self, make_gateway):
        gateway, _ = make_gateway(status_code=502, body="Bad Gateway")

        with pytest.raises(ExternalServiceError, match="HTTP 502"):
            await gateway.explain("text")

    @pytest.mark.asyncio
    async def test_transport_error(self, ai_config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        gateway = AIGateway(
            config=ai_config, api_key="sk-test-key", transport=httpx.MockTransport(handler),
        )

        with pytest.raises(ExternalServiceError, match="Failed to connect"):
            await gateway.explain("text")

    @pytest.mark.asyncio
    async def test_unexpected_success_body(self, make_gateway):
        gateway, _ = make_gateway(body={"choices": []})

        with pytest.raises(ExternalServiceError, match="unexpected response"):
            await gateway.explain("text")

    @pytest.mark.asyncio
    async def test_failed_request_is_not_retried(self, make_gateway):
        gateway, handler = make_gateway(status_code=500, body={"error": {"message": "boom"}})

        with pytest.raises(ExternalServiceError):
            await gateway.expand("text")

        assert len(handler.requests) == 1


class TestGenerateFlashcards:
    """Tests for flashcard generation."""

    @pytest.mark.asyncio
    async def test_returns_drafts(self, make_gateway):
        gateway, handler = make_gateway(content=CARDS_JSON)

        drafts = await gateway.generate_flashcards("# Heaps\n\nA heap is...")

        assert drafts == [
            FlashcardDraft(question="What is a heap?", answer="A tree with the heap property."),
            FlashcardDraft(question="Heap insert cost?", answer="O(log n)"),
        ]
        assert "JSON array" in handler.payloads[0]["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_empty_content_fails_without_request(self, make_gateway):
        gateway, handler = make_gateway(content=CARDS_JSON)

        with pytest.raises(ValidationError, match="No content provided"):
            await gateway.generate_flashcards("  ")

        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_non_json_reply_is_malformed(self, make_gateway):
        gateway, _ = make_gateway(content="Here are some flashcards: ...")

        with pytest.raises(MalformedAIOutputError):
            await gateway.generate_flashcards("notes")


class TestParseFlashcardOutput:
    """Tests for parsing the model's flashcard reply."""

    def test_plain_array(self):
        assert len(parse_flashcard_output(CARDS_JSON)) == 2

    def test_fenced_array(self):
        drafts = parse_flashcard_output(f"```json\n{CARDS_JSON}\n```")
        assert [d.answer for d in drafts] == ["A tree with the heap property.", "O(log n)"]

    def test_empty_array(self):
        assert parse_flashcard_output("[]") == []

    def test_object_instead_of_array(self):
        with pytest.raises(MalformedAIOutputError, match="JSON array"):
            parse_flashcard_output('{"question": "Q", "answer": "A"}')

    def test_card_missing_answer(self):
        with pytest.raises(MalformedAIOutputError, match="question and an answer"):
            parse_flashcard_output('[{"question": "Q"}]')

    def test_malformed_error_is_an_external_service_error(self):
        with pytest.raises(ExternalServiceError):
            parse_flashcard_output("not json")
