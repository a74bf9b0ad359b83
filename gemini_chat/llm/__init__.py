"""LLM integration module for the chat backend."""

from gemini_chat.llm.gemini_client import (
    GeminiChatHandle,
    GeminiProvider,
    gemini_available,
    get_gemini_client,
)
from gemini_chat.llm.provider import (
    GenerationResponse,
    MultiPart,
    ProviderConfig,
    ProviderContent,
    RemoteModelProvider,
    SessionHandle,
    StreamChunk,
    TextOnly,
    TurnContent,
)

__all__ = [
    # Gemini client
    "GeminiProvider",
    "GeminiChatHandle",
    "get_gemini_client",
    "gemini_available",
    # Provider protocol
    "RemoteModelProvider",
    "SessionHandle",
    "ProviderConfig",
    "ProviderContent",
    "GenerationResponse",
    "StreamChunk",
    "TurnContent",
    "TextOnly",
    "MultiPart",
]
