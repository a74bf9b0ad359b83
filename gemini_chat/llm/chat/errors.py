"""Exceptions raised by the chat session and turn dispatch layer.

Failures fall into two groups:
1. Propagated to the caller (StreamingFailure, TurnInProgress)
2. Recovered locally into a user-visible message (ImageGenerationFailure,
   MalformedResponse) or by rebuilding the session (SessionUnavailable)
"""


class ChatError(Exception):
    """Base exception for chat errors."""

    def __init__(self, message: str, retriable: bool = False):
        super().__init__(message)
        self.retriable = retriable


class SessionUnavailable(ChatError):
    """No live session when one was required."""

    pass


class TurnInProgress(ChatError):
    """A turn was submitted while the previous one is still streaming."""

    def __init__(self, message: str = "A response is already being generated"):
        super().__init__(message, retriable=True)


class StreamingFailure(ChatError):
    """The provider failed while streaming a conversational response."""

    def __init__(self, message: str):
        super().__init__(message, retriable=True)


class ImageGenerationFailure(ChatError):
    """The one-shot image generation call failed."""

    pass


class MalformedResponse(ChatError):
    """A generation response carried no text or image content."""

    pass
