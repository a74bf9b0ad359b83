"""ChatSessionManager owns the single live chat session."""

import logging

from gemini_chat.llm.chat.errors import SessionUnavailable
from gemini_chat.llm.chat.models import ChatMessage, ChatSettings
from gemini_chat.llm.chat.session import ChatSession, create_session
from gemini_chat.llm.provider import RemoteModelProvider

logger = logging.getLogger(__name__)


class ChatSessionManager:
    """Manages the lifecycle of one conversation's session.

    Responsibilities:
    - Build a session bound to the latest settings and history
    - Replace (never mutate) the session when settings change
    - Remember the last-known settings for self-healing
    """

    def __init__(
        self,
        provider: RemoteModelProvider,
        settings: ChatSettings | None = None,
    ):
        """Initialize the manager and start an empty-history session.

        Args:
            provider: The model provider sessions are created through.
            settings: Initial settings. Defaults to ChatSettings().
        """
        self._provider = provider
        self._settings = settings or ChatSettings()
        self._session: ChatSession | None = None
        self.start(self._settings)

    @property
    def settings(self) -> ChatSettings:
        """The settings last supplied by the caller."""
        return self._settings

    @property
    def has_session(self) -> bool:
        return self._session is not None

    def start(
        self,
        settings: ChatSettings,
        history: list[ChatMessage] | None = None,
    ) -> None:
        """Build a new session and swap it in place of the current one.

        The new session is fully created before the swap. If the provider
        fails, the previous session and settings are left untouched.

        Args:
            settings: Settings the new session is bound to.
            history: Prior conversation to replay, in order.
        """
        session = create_session(self._provider, settings, history)

        previous, self._session = self._session, session
        self._settings = settings

        if previous is not None:
            previous.close()
            logger.info(
                f"Replaced chat session {previous.session_id} with {session.session_id} "
                f"(model={settings.model}, history={len(session.history)})"
            )
        else:
            logger.info(
                f"Started chat session {session.session_id} "
                f"(model={settings.model}, history={len(session.history)})"
            )

    def reconfigure(self, settings: ChatSettings, history: list[ChatMessage]) -> None:
        """Rebuild the session for new settings, replaying the history.

        Always a full rebuild, even for unchanged settings: a session's
        system instruction and sampling parameters cannot be edited.
        """
        self.start(settings, history)

    def current(self) -> ChatSession:
        """Get the live session.

        Raises:
            SessionUnavailable: If no session is live.
        """
        if self._session is None:
            raise SessionUnavailable("No live chat session")
        return self._session

    def shutdown(self) -> None:
        """Close the live session and empty the slot."""
        session, self._session = self._session, None
        if session is not None:
            session.close()
        logger.info("Chat session manager shutdown complete")
