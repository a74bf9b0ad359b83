"""Pydantic models for chat sessions."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from gemini_chat.llm.provider import ProviderConfig

DEFAULT_CHAT_MODEL = "gemini-2.5-flash"


class ChatRole(str, Enum):
    """Role of a chat message sender."""

    USER = "user"
    ASSISTANT = "assistant"


class Personality(str, Enum):
    """Tone the assistant adopts for a session."""

    PROFESSIONAL = "professional"
    FRIENDLY = "friendly"
    CREATIVE = "creative"
    HUMOROUS = "humorous"
    STRICT = "strict"
    NONE = "none"


class ChatMessage(BaseModel):
    """A single message in the conversation history."""

    role: ChatRole
    text: str

    model_config = ConfigDict(use_enum_values=True)


class Attachment(BaseModel):
    """A binary attachment on a user turn."""

    mime_type: str
    data: str = Field(description="Base64-encoded payload")


class ChatSettings(BaseModel):
    """Configuration a chat session is bound to.

    Settings are immutable: changing any of them means building a new
    session (see ChatSessionManager.reconfigure).
    """

    model: str = DEFAULT_CHAT_MODEL
    personality: Personality = Personality.NONE
    custom_instruction: str | None = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=8192, ge=1)
    thinking_enabled: bool = False
    # -1 requests dynamic thinking; None falls back to dynamic when enabled
    thinking_budget: int | None = Field(default=None, ge=-1)

    model_config = ConfigDict(frozen=True)


class ChatSessionInfo(BaseModel):
    """Information about the live chat session."""

    session_id: str
    model: str
    personality: Personality
    created_at: datetime
    last_activity: datetime
    history_length: int
    turn_count: int
    provider_config: ProviderConfig
    is_active: bool = True


class SendMessageRequest(BaseModel):
    """Request to send a user turn."""

    message: str = ""
    attachments: list[Attachment] = Field(
        default_factory=list,
        description="Attachments rendered after the text, in this order",
    )


class ReconfigureRequest(BaseModel):
    """Request to rebuild the session with new settings."""

    settings: ChatSettings
    history: list[ChatMessage] = Field(
        default_factory=list,
        description="The conversation so far, replayed into the new session",
    )


class ChatEvent(BaseModel):
    """An event emitted while streaming a response."""

    event: str
    text: str | None = None
    message: str | None = None
