"""Chat session infrastructure for a single conversation.

This module provides the core abstractions:
- ChatSession: A provider session bound to one settings/history snapshot
- ChatSessionManager: Owns the live session and rebuilds it on reconfigure
- TurnDispatcher: Routes user turns to the image or conversational path
"""

from gemini_chat.llm.chat.dispatcher import (
    IMAGE_ERROR_MESSAGE,
    IMAGE_FALLBACK_MESSAGE,
    IMAGE_MODEL,
    TurnDispatcher,
    build_turn_content,
)
from gemini_chat.llm.chat.errors import (
    ChatError,
    ImageGenerationFailure,
    MalformedResponse,
    SessionUnavailable,
    StreamingFailure,
    TurnInProgress,
)
from gemini_chat.llm.chat.manager import ChatSessionManager
from gemini_chat.llm.chat.models import (
    Attachment,
    ChatMessage,
    ChatRole,
    ChatSessionInfo,
    ChatSettings,
    Personality,
)
from gemini_chat.llm.chat.session import ChatSession
from gemini_chat.llm.provider import RemoteModelProvider


def build_dispatcher(
    provider: RemoteModelProvider,
    settings: ChatSettings | None = None,
) -> TurnDispatcher:
    """Wire a session manager and dispatcher around a provider."""
    return TurnDispatcher(provider, ChatSessionManager(provider, settings))


__all__ = [
    "Attachment",
    "ChatError",
    "ChatMessage",
    "ChatRole",
    "ChatSession",
    "ChatSessionInfo",
    "ChatSessionManager",
    "ChatSettings",
    "IMAGE_ERROR_MESSAGE",
    "IMAGE_FALLBACK_MESSAGE",
    "IMAGE_MODEL",
    "ImageGenerationFailure",
    "MalformedResponse",
    "Personality",
    "SessionUnavailable",
    "StreamingFailure",
    "TurnDispatcher",
    "TurnInProgress",
    "build_dispatcher",
    "build_turn_content",
]
