"""
AI Gateway.

Stateless wrapper around a remote chat-completion endpoint. Each operation
is a fixed system instruction plus a user template around the caller's
text, sent as a single POST:

    {"model": ..., "messages": [{"role": ..., "content": ...}], "temperature": ...}

The completion text is read from choices[0].message.content.

Failure modes, all raised before or instead of returning:
    ValidationError         - empty input, raised before any network call
    ConfigurationError      - missing or placeholder API key, before any call
    ExternalServiceError    - transport failure, non-success status, bad payload
    MalformedAIOutputError  - flashcard output that is not a JSON card array

Requests are attempted once. Nothing is retried.

Usage:
    async with AIGateway() as gateway:
        explanation = await gateway.execute(AIOperation.EXPLAIN, selected_text)
        drafts = await gateway.generate_flashcards(note.content)
"""

import json
import re
from enum import Enum
from typing import Any

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from studynotes.core.config_schema import AISchema
from studynotes.core.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    MalformedAIOutputError,
    ValidationError,
)
from studynotes.core.logging import get_logger, log_with_source
from studynotes.schemas.flashcard import FlashcardDraft

logger = get_logger(__name__)


class AIOperation(str, Enum):
    """Text transformations offered on a selection."""

    EXPLAIN = "explain"
    EXPAND = "expand"
    SUMMARIZE = "summarize"


_PROMPTS: dict[AIOperation, tuple[str, str]] = {
    AIOperation.EXPLAIN: (
        "You are a helpful computer science tutor. Explain concepts clearly and "
        "concisely, as if teaching a university student. Use examples when helpful.",
        "Please explain the following text in simpler terms:\n\n{text}",
    ),
    AIOperation.EXPAND: (
        "You are a helpful study assistant. Expand on the provided notes with "
        "additional detail, context and examples while keeping the original meaning. "
        "Format the result as markdown.",
        "Please expand the following text with more detail:\n\n{text}",
    ),
    AIOperation.SUMMARIZE: (
        "You are a helpful study assistant. Summarize the provided notes into a "
        "short, accurate overview of the key points. Format the result as markdown.",
        "Please summarize the following text:\n\n{text}",
    ),
}

_FLASHCARD_SYSTEM_PROMPT = """You are a helpful study assistant. Generate flashcards from the provided notes.
Return ONLY a valid JSON array of flashcards with this exact format:
[
  {"question": "What is...", "answer": "..."},
  {"question": "How does...", "answer": "..."}
]
Create 5-10 flashcards focusing on key concepts, definitions, and important details."""

_FLASHCARD_USER_TEMPLATE = "Generate flashcards from these notes:\n\n{text}"

_CODE_FENCE = re.compile(r"^```[\w-]*\s*\n(?P<body>.*?)\n?```\s*$", re.DOTALL)

_drafts_adapter = TypeAdapter(list[FlashcardDraft])


def build_messages(system_prompt: str, user_template: str, text: str) -> list[dict[str, str]]:
    """Chat messages for one request."""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_template.format(text=text)},
    ]


def parse_flashcard_output(raw: str) -> list[FlashcardDraft]:
    """
    Parse a model reply into flashcard drafts.

    The reply must be a JSON array of {"question", "answer"} objects,
    optionally wrapped in a markdown code fence.

    Raises:
        MalformedAIOutputError: If the reply is anything else
    """
    text = raw.strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group("body").strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedAIOutputError(
            "Failed to generate flashcards: the AI response was not valid JSON. Please try again."
        ) from e

    if not isinstance(data, list):
        raise MalformedAIOutputError(
            "Failed to generate flashcards: expected a JSON array of flashcards."
        )

    try:
        return _drafts_adapter.validate_python(data)
    except PydanticValidationError as e:
        raise MalformedAIOutputError(
            "Failed to generate flashcards: every flashcard needs a question and an answer."
        ) from e


def _remote_error_message(response: httpx.Response) -> str:
    """Extract error.message from an error body, with a generic fallback."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return f"Failed to connect to the AI service (HTTP {response.status_code})"


class AIGateway:
    """
    Client for the remote chat-completion endpoint.

    Endpoint, model, temperature and timeout come from config/settings/ai.yaml
    and the API key from config/.env unless passed explicitly.
    """

    def __init__(
        self,
        config: AISchema | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            config: Endpoint settings. If None, reads config/settings/ai.yaml.
            api_key: Bearer credential. If None, reads OPENAI_API_KEY from config/.env.
            transport: Optional httpx transport (used by tests).
        """
        if config is None:
            from studynotes.core.config import get_app_config
            config = get_app_config().ai
        if api_key is None:
            from studynotes.core.config import get_settings
            api_key = get_settings().openai_api_key

        self.config = config
        self._api_key = api_key.strip()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AIGateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def is_configured(self) -> bool:
        """Whether a usable API key is present."""
        return bool(self._api_key) and self._api_key != self.config.placeholder_api_key

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def execute(self, operation: AIOperation | str, text: str) -> str:
        """
        Run explain, expand or summarize on text.

        Returns:
            The model's reply

        Raises:
            ValidationError: Unknown operation or empty text
            ConfigurationError: No usable API key
            ExternalServiceError: The request failed
        """
        try:
            op = AIOperation(operation)
        except ValueError as e:
            raise ValidationError(
                f"Unknown AI operation: {operation}",
                details={"operation": str(operation)},
            ) from e

        if not text or not text.strip():
            raise ValidationError(f"No text provided to {op.value}")

        system_prompt, user_template = _PROMPTS[op]
        return await self._complete(
            op.value, build_messages(system_prompt, user_template, text),
        )

    async def explain(self, text: str) -> str:
        """Explain text in simpler terms."""
        return await self.execute(AIOperation.EXPLAIN, text)

    async def expand(self, text: str) -> str:
        """Expand text with more detail."""
        return await self.execute(AIOperation.EXPAND, text)

    async def summarize(self, text: str) -> str:
        """Summarize text."""
        return await self.execute(AIOperation.SUMMARIZE, text)

    async def generate_flashcards(self, content: str) -> list[FlashcardDraft]:
        """
        Generate flashcard drafts from note content.

        Raises:
            ValidationError: Empty content
            ConfigurationError: No usable API key
            ExternalServiceError: The request failed
            MalformedAIOutputError: The reply is not a JSON card array
        """
        if not content or not content.strip():
            raise ValidationError("No content provided to generate flashcards")

        reply = await self._complete(
            "flashcards",
            build_messages(_FLASHCARD_SYSTEM_PROMPT, _FLASHCARD_USER_TEMPLATE, content),
        )
        drafts = parse_flashcard_output(reply)
        log_with_source(logger, "ai", "info", "Flashcards generated", count=len(drafts))
        return drafts

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _complete(self, operation: str, messages: list[dict[str, str]]) -> str:
        if not self.is_configured:
            raise ConfigurationError(
                "AI API key not configured. Set OPENAI_API_KEY in config/.env"
            )

        payload = {
            "model": self.config.model,
            "messages": messages,
            "temperature": self.config.temperature,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        log_with_source(
            logger, "ai", "debug", "AI request",
            operation=operation, model=self.config.model,
        )

        try:
            response = await self._get_client().post(
                self.config.endpoint, json=payload, headers=headers,
            )
        except httpx.HTTPError as e:
            log_with_source(
                logger, "ai", "error", "AI request failed",
                operation=operation, error=str(e),
            )
            raise ExternalServiceError(f"Failed to connect to the AI service: {e}") from e

        if not response.is_success:
            message = _remote_error_message(response)
            log_with_source(
                logger, "ai", "error", "AI service returned an error",
                operation=operation, status_code=response.status_code, error=message,
            )
            raise ExternalServiceError(message)

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError("The AI service returned an unexpected response") from e

        if not isinstance(content, str):
            raise ExternalServiceError("The AI service returned an unexpected response")

        log_with_source(
            logger, "ai", "debug", "AI response",
            operation=operation, status_code=response.status_code, length=len(content),
        )
        return content
