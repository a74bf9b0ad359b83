"""Gemini implementation of the RemoteModelProvider protocol."""

import base64
import logging
import os
from collections.abc import AsyncGenerator

from google import genai
from google.genai import chats, types

from gemini_chat.llm.provider import (
    Candidate,
    CandidateContent,
    GenerationResponse,
    InlineData,
    InlineDataPart,
    MultiPart,
    ProviderConfig,
    ProviderContent,
    ResponsePart,
    StreamChunk,
    TextOnly,
    TextPart,
)

logger = logging.getLogger(__name__)

# The SDK calls the assistant role "model"
SDK_ROLES = {"user": "user", "assistant": "model"}


def to_sdk_part(part: TextPart | InlineDataPart) -> types.Part:
    """Convert a payload part to an SDK part, decoding inline base64 data."""
    if isinstance(part, TextPart):
        return types.Part(text=part.text)
    return types.Part.from_bytes(
        data=base64.b64decode(part.inline_data.data),
        mime_type=part.inline_data.mime_type or "application/octet-stream",
    )


def to_sdk_message(content: TextOnly | MultiPart) -> str | list[types.Part]:
    """Convert turn content to what AsyncChat.send_message_stream accepts."""
    if isinstance(content, TextOnly):
        return content.text
    return [to_sdk_part(part) for part in content.parts]


def to_sdk_contents(content: TextOnly | MultiPart) -> types.Content:
    """Convert turn content to a single user Content for generate_content."""
    if isinstance(content, TextOnly):
        parts = [types.Part(text=content.text)]
    else:
        parts = [to_sdk_part(part) for part in content.parts]
    return types.Content(role="user", parts=parts)


def to_sdk_config(config: ProviderConfig) -> types.GenerateContentConfig:
    """Convert a provider config to the SDK's GenerateContentConfig."""
    thinking_config = None
    if config.thinking_budget is not None:
        thinking_config = types.ThinkingConfig(thinking_budget=config.thinking_budget)

    return types.GenerateContentConfig(
        system_instruction=config.system_instruction,
        temperature=config.temperature,
        max_output_tokens=config.max_output_tokens,
        thinking_config=thinking_config,
    )


def to_sdk_history(history: list[ProviderContent]) -> list[types.Content]:
    """Convert replayed history to SDK contents, preserving order."""
    return [
        types.Content(
            role=SDK_ROLES[item.role],
            parts=[types.Part(text=part.text) for part in item.parts],
        )
        for item in history
    ]


def from_sdk_response(response: types.GenerateContentResponse) -> GenerationResponse:
    """Convert an SDK response, base64-encoding any inline binary data."""
    candidates = []
    for candidate in response.candidates or []:
        if candidate.content is None:
            candidates.append(Candidate())
            continue

        parts = []
        for part in candidate.content.parts or []:
            inline_data = None
            if part.inline_data is not None:
                inline_data = InlineData(
                    mime_type=part.inline_data.mime_type,
                    data=base64.b64encode(part.inline_data.data or b"").decode("ascii"),
                )
            parts.append(ResponsePart(text=part.text, inline_data=inline_data))

        candidates.append(Candidate(content=CandidateContent(parts=parts)))

    return GenerationResponse(candidates=candidates)


class GeminiChatHandle:
    """SessionHandle over a google-genai AsyncChat."""

    def __init__(self, chat: chats.AsyncChat):
        self._chat = chat

    async def stream_turn(
        self, content: TextOnly | MultiPart
    ) -> AsyncGenerator[StreamChunk, None]:
        """Send a turn and yield the streamed chunks."""
        stream = await self._chat.send_message_stream(to_sdk_message(content))
        try:
            async for chunk in stream:
                yield StreamChunk(text=chunk.text)
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()


class GeminiProvider:
    """Wrapper around Google GenAI client for chat sessions and one-shot calls."""

    def __init__(self, api_key: str | None = None):
        """Initialize the client.

        Args:
            api_key: Google API key. If not provided, uses GOOGLE_API_KEY env var.
        """
        self.api_key = api_key or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError(
                "Google API key required. Set GOOGLE_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self._client = genai.Client(api_key=self.api_key)

    def create_session(
        self,
        model_id: str,
        config: ProviderConfig,
        history: list[ProviderContent],
    ) -> GeminiChatHandle:
        """Create a chat session.

        Args:
            model_id: The conversational model
            config: System instruction and sampling parameters
            history: Prior conversation to replay

        Returns:
            A handle for streaming turns
        """
        chat = self._client.aio.chats.create(
            model=model_id,
            config=to_sdk_config(config),
            history=to_sdk_history(history),
        )
        logger.debug(f"Created Gemini chat for {model_id} with {len(history)} history item(s)")
        return GeminiChatHandle(chat)

    async def generate_once(
        self,
        model_id: str,
        content: TextOnly | MultiPart,
    ) -> GenerationResponse:
        """Run a single generate_content call.

        Args:
            model_id: The model to call
            content: The request payload

        Returns:
            The converted response
        """
        response = await self._client.aio.models.generate_content(
            model=model_id,
            contents=to_sdk_contents(content),
        )
        return from_sdk_response(response)


# Global provider instance (lazy initialization)
_gemini_provider: GeminiProvider | None = None


def get_gemini_client() -> GeminiProvider | None:
    """Get or create the global Gemini provider instance.

    Returns None if GOOGLE_API_KEY is not set (allows graceful fallback).
    """
    global _gemini_provider
    if _gemini_provider is None:
        try:
            _gemini_provider = GeminiProvider()
        except ValueError:
            # No API key, return None for fallback
            return None
    return _gemini_provider


def gemini_available() -> bool:
    """Check if Gemini is available (API key is set)."""
    return bool(os.getenv("GOOGLE_API_KEY"))
