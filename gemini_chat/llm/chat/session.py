"""ChatSession wraps a provider SessionHandle for one settings snapshot."""

import logging
import uuid
from collections.abc import AsyncGenerator
from datetime import datetime

from gemini_chat.llm.chat.errors import SessionUnavailable
from gemini_chat.llm.chat.instructions import build_provider_config, build_provider_history
from gemini_chat.llm.chat.models import ChatMessage, ChatSessionInfo, ChatSettings
from gemini_chat.llm.provider import (
    MultiPart,
    ProviderConfig,
    RemoteModelProvider,
    SessionHandle,
    StreamChunk,
    TextOnly,
)

logger = logging.getLogger(__name__)


class ChatSession:
    """A chat session bound to one ChatSettings and one history snapshot.

    Sessions are never reconfigured. When the settings change the manager
    builds a new session and closes this one; a closed session refuses
    further turns.
    """

    def __init__(
        self,
        session_id: str,
        settings: ChatSettings,
        history: list[ChatMessage],
        provider_config: ProviderConfig,
        handle: SessionHandle,
    ):
        self.session_id = session_id
        self.settings = settings
        self.history = tuple(history)
        self.provider_config = provider_config
        self.created_at = datetime.now()
        self.last_activity = datetime.now()
        self.turn_count = 0
        self._handle: SessionHandle | None = handle

    @property
    def is_active(self) -> bool:
        """Whether the session can still accept turns."""
        return self._handle is not None

    async def stream_turn(
        self, content: TextOnly | MultiPart
    ) -> AsyncGenerator[StreamChunk, None]:
        """Send a user turn and yield the provider's response chunks.

        Args:
            content: The turn payload.

        Yields:
            Response chunks in provider order.

        Raises:
            SessionUnavailable: If the session was closed.
        """
        if self._handle is None:
            raise SessionUnavailable(f"Chat session {self.session_id} is closed")

        self.turn_count += 1
        self.last_activity = datetime.now()

        stream = self._handle.stream_turn(content)
        try:
            async for chunk in stream:
                yield chunk
        finally:
            # Release the upstream call if the consumer stopped early
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

    def close(self) -> None:
        """Invalidate the session. Closing twice is a no-op."""
        if self._handle is not None:
            self._handle = None
            logger.info(f"Chat session {self.session_id} closed")

    def get_info(self) -> ChatSessionInfo:
        """Get session information."""
        return ChatSessionInfo(
            session_id=self.session_id,
            model=self.settings.model,
            personality=self.settings.personality,
            created_at=self.created_at,
            last_activity=self.last_activity,
            history_length=len(self.history),
            turn_count=self.turn_count,
            provider_config=self.provider_config,
            is_active=self.is_active,
        )


def create_session(
    provider: RemoteModelProvider,
    settings: ChatSettings,
    history: list[ChatMessage] | None = None,
) -> ChatSession:
    """Factory function to create a chat session through the provider.

    Args:
        provider: The model provider.
        settings: Settings the session is bound to.
        history: Prior conversation to replay, in order.

    Returns:
        A ChatSession ready to receive turns.
    """
    history = list(history or [])
    provider_config = build_provider_config(settings)

    handle = provider.create_session(
        settings.model,
        provider_config,
        build_provider_history(history),
    )

    return ChatSession(
        session_id=str(uuid.uuid4())[:12],
        settings=settings,
        history=history,
        provider_config=provider_config,
        handle=handle,
    )
