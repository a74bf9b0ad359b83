"""TurnDispatcher routes a user turn to the image or conversational path."""

import logging
from collections.abc import AsyncGenerator, Callable

from gemini_chat.llm.chat.errors import (
    ChatError,
    ImageGenerationFailure,
    MalformedResponse,
    SessionUnavailable,
    StreamingFailure,
    TurnInProgress,
)
from gemini_chat.llm.chat.images import is_image_request, render_image_reply
from gemini_chat.llm.chat.manager import ChatSessionManager
from gemini_chat.llm.chat.models import Attachment, ChatMessage, ChatSettings
from gemini_chat.llm.chat.session import ChatSession
from gemini_chat.llm.provider import (
    InlineData,
    InlineDataPart,
    MultiPart,
    RemoteModelProvider,
    TextOnly,
    TextPart,
)

logger = logging.getLogger(__name__)

# Model used for the one-shot image path
IMAGE_MODEL = "gemini-2.5-flash-image"

IMAGE_FALLBACK_MESSAGE = "I couldn't generate an image based on that description."
IMAGE_ERROR_MESSAGE = (
    "Sorry, I encountered an error while trying to generate that image. Please try again."
)


def build_turn_content(
    text: str, attachments: list[Attachment] | None = None
) -> TextOnly | MultiPart:
    """Build the payload for a conversational turn.

    Bare text when there are no attachments; otherwise a text part followed
    by one inline part per attachment, in order.
    """
    if not attachments:
        return TextOnly(text=text)

    return MultiPart(
        parts=[
            TextPart(text=text),
            *(
                InlineDataPart(
                    inline_data=InlineData(mime_type=attachment.mime_type, data=attachment.data)
                )
                for attachment in attachments
            ),
        ]
    )


class TurnDispatcher:
    """Turns user input into a stream of assistant text fragments.

    One turn at a time. A new turn closes a previous turn that is suspended
    or abandoned, and is rejected with TurnInProgress only while the previous
    turn is executing.
    """

    def __init__(self, provider: RemoteModelProvider, sessions: ChatSessionManager):
        self._provider = provider
        self._sessions = sessions
        self._active_turn: AsyncGenerator[str, None] | None = None

    @property
    def sessions(self) -> ChatSessionManager:
        return self._sessions

    @property
    def is_processing(self) -> bool:
        """Whether a started turn has not finished or been closed yet."""
        return self._active_turn is not None

    def reconfigure(self, settings: ChatSettings, history: list[ChatMessage]) -> None:
        """Rebuild the conversation session with new settings."""
        self._sessions.reconfigure(settings, history)

    def dispatch(
        self,
        text: str,
        attachments: list[Attachment] | None = None,
    ) -> AsyncGenerator[str, None]:
        """Answer a user turn.

        Image requests resolve atomically into a single fragment and never
        raise. Conversational turns stream fragments as they arrive. Nothing
        runs until the first fragment is requested.

        Args:
            text: The user's message.
            attachments: Optional attachments (ignored for image requests).

        Returns:
            An async generator of assistant text fragments, in order. It
            raises TurnInProgress if another turn is executing, and
            StreamingFailure if the provider fails mid-stream.
        """
        # The turn registers itself once started, so it needs its own handle
        turn = self._answer(text, attachments, lambda: turn)
        return turn

    async def _answer(
        self,
        text: str,
        attachments: list[Attachment] | None,
        this_turn: Callable[[], AsyncGenerator[str, None]],
    ) -> AsyncGenerator[str, None]:
        await self._claim(this_turn())
        try:
            if is_image_request(text):
                logger.info("Routing turn to image generation")
                yield await self._generate_image(text)
                return

            session = self._live_session()
            content = build_turn_content(text, attachments)
            logger.info(
                f"Sending turn to session {session.session_id} "
                f"({len(attachments or [])} attachment(s))"
            )

            chunks = session.stream_turn(content)
            try:
                async for chunk in chunks:
                    if chunk.text:
                        yield chunk.text
                    else:
                        logger.debug("Dropped chunk without text")
            except ChatError:
                raise
            except Exception as e:
                logger.error(f"Error streaming response from {session.settings.model}: {e}")
                raise StreamingFailure(f"Streaming failed: {e}") from e
            finally:
                await chunks.aclose()

        finally:
            if self._active_turn is this_turn():
                self._active_turn = None

    async def _claim(self, turn: AsyncGenerator[str, None]) -> None:
        """Make `turn` the active turn, closing a suspended predecessor.

        Raises:
            TurnInProgress: If the previous turn is executing right now.
        """
        previous = self._active_turn
        if previous is not None and previous is not turn:
            if previous.ag_running:
                raise TurnInProgress()
            logger.info("Closing unfinished previous turn")
            await previous.aclose()
        self._active_turn = turn

    def _live_session(self) -> ChatSession:
        """Get the live session, restarting it with the last settings if absent."""
        try:
            return self._sessions.current()
        except SessionUnavailable:
            logger.warning("No live chat session, restarting with last known settings")
            self._sessions.start(self._sessions.settings)
            return self._sessions.current()

    async def _generate_image(self, text: str) -> str:
        """Run the one-shot image path. Failures become a reply, never an error."""
        try:
            try:
                response = await self._provider.generate_once(
                    IMAGE_MODEL,
                    MultiPart(parts=[TextPart(text=text)]),
                )
            except Exception as e:
                raise ImageGenerationFailure(f"Image generation failed: {e}") from e
            return render_image_reply(response)

        except MalformedResponse as e:
            logger.warning(f"{e}, sending fallback reply")
            return IMAGE_FALLBACK_MESSAGE

        except Exception as e:
            logger.error(f"Image generation failed: {e}")
            return IMAGE_ERROR_MESSAGE
