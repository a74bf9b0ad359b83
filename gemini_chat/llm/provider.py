"""Provider-facing request/response types and the RemoteModelProvider protocol.

The chat core only talks to the model through these types. GeminiProvider in
gemini_client.py maps them onto the google-genai SDK; tests use a fake.
"""

from collections.abc import AsyncIterator
from typing import Annotated, Literal, Protocol, runtime_checkable

from pydantic import BaseModel, Field


class TextPart(BaseModel):
    """A plain text part of a content payload."""

    text: str


class InlineData(BaseModel):
    """Inline binary data, base64 encoded."""

    mime_type: str | None = None
    data: str


class InlineDataPart(BaseModel):
    """A binary part of a content payload (image, document, ...)."""

    inline_data: InlineData


Part = TextPart | InlineDataPart


class TextOnly(BaseModel):
    """Turn content sent as a bare string."""

    kind: Literal["text"] = "text"
    text: str


class MultiPart(BaseModel):
    """Turn content sent as an ordered list of parts."""

    kind: Literal["parts"] = "parts"
    parts: list[Part]


# Decided once per turn; providers branch on `kind`, never on shape
TurnContent = Annotated[TextOnly | MultiPart, Field(discriminator="kind")]


class ProviderConfig(BaseModel):
    """Session configuration handed to the provider."""

    system_instruction: str = Field(min_length=1)
    temperature: float = Field(ge=0.0, le=2.0)
    max_output_tokens: int = Field(ge=1)
    # Only set when extended reasoning is enabled; -1 lets the model decide
    thinking_budget: int | None = Field(default=None, ge=-1)


class ProviderContent(BaseModel):
    """One replayed history item: a role and its text parts."""

    role: Literal["user", "assistant"]
    parts: list[TextPart]


class StreamChunk(BaseModel):
    """One streamed response chunk. Chunks may carry only metadata."""

    text: str | None = None


class ResponsePart(BaseModel):
    """A part of a one-shot generation response."""

    text: str | None = None
    inline_data: InlineData | None = None


class CandidateContent(BaseModel):
    parts: list[ResponsePart] | None = None


class Candidate(BaseModel):
    content: CandidateContent | None = None


class GenerationResponse(BaseModel):
    """Result of a one-shot (non-streaming) generation call."""

    candidates: list[Candidate] | None = None


@runtime_checkable
class SessionHandle(Protocol):
    """A provider-side conversational context."""

    def stream_turn(self, content: TextOnly | MultiPart) -> AsyncIterator[StreamChunk]:
        """Send one user turn and iterate the response chunks in order."""
        ...


@runtime_checkable
class RemoteModelProvider(Protocol):
    """Protocol that model provider implementations must satisfy."""

    def create_session(
        self,
        model_id: str,
        config: ProviderConfig,
        history: list[ProviderContent],
    ) -> SessionHandle:
        """Create a chat session bound to a configuration and history."""
        ...

    async def generate_once(
        self,
        model_id: str,
        content: TextOnly | MultiPart,
    ) -> GenerationResponse:
        """Run a single atomic generation call (no streaming)."""
        ...
