"""Chat API endpoints for the conversation."""

import logging
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from gemini_chat.llm.chat import TurnDispatcher
from gemini_chat.llm.chat.models import (
    ChatEvent,
    ChatSessionInfo,
    ChatSettings,
    ReconfigureRequest,
    SendMessageRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_dispatcher(request: Request) -> TurnDispatcher:
    """Get the dispatcher wired into the application."""
    dispatcher: TurnDispatcher | None = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise HTTPException(
            status_code=503,
            detail="Chat is unavailable. Set GOOGLE_API_KEY to enable it.",
        )
    return dispatcher


def _sse(event: ChatEvent) -> str:
    return f"data: {event.model_dump_json(exclude_none=True)}\n\n"


@router.post("/chat/messages")
async def send_message(
    body: SendMessageRequest,
    dispatcher: TurnDispatcher = Depends(get_dispatcher),
) -> Any:
    """Send a user turn and stream the reply with SSE.

    Events sent to client:
    {"event": "text", "text": "..."}
    {"event": "complete"}
    {"event": "error", "message": "..."}
    """
    if not body.message.strip() and not body.attachments:
        raise HTTPException(status_code=400, detail="Message is required")

    if dispatcher.is_processing:
        raise HTTPException(
            status_code=409,
            detail="A response is already being generated",
        )

    async def event_generator() -> AsyncGenerator[str, None]:
        fragments = dispatcher.dispatch(body.message, body.attachments)
        try:
            async for fragment in fragments:
                yield _sse(ChatEvent(event="text", text=fragment))

            yield _sse(ChatEvent(event="complete"))
        except Exception as e:
            logger.error(f"Error in chat turn: {e}")
            yield _sse(ChatEvent(event="error", message=str(e)))
        finally:
            await fragments.aclose()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.put("/chat/settings")
async def update_settings(
    body: ReconfigureRequest,
    dispatcher: TurnDispatcher = Depends(get_dispatcher),
) -> ChatSessionInfo:
    """Rebuild the session with new settings, replaying the given history."""
    if dispatcher.is_processing:
        raise HTTPException(
            status_code=409,
            detail="Cannot change settings while a response is being generated",
        )

    dispatcher.reconfigure(body.settings, body.history)
    return dispatcher.sessions.current().get_info()


@router.get("/chat/settings")
async def get_settings(dispatcher: TurnDispatcher = Depends(get_dispatcher)) -> ChatSettings:
    """Get the settings the conversation is running with."""
    return dispatcher.sessions.settings


@router.get("/chat/session")
async def get_session(dispatcher: TurnDispatcher = Depends(get_dispatcher)) -> ChatSessionInfo:
    """Get information about the live chat session."""
    if not dispatcher.sessions.has_session:
        raise HTTPException(status_code=404, detail="No live chat session")
    return dispatcher.sessions.current().get_info()
