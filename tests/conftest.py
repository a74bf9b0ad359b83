"""Pytest configuration and fixtures."""

import asyncio
from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient

from gemini_chat.llm.chat import ChatSessionManager, TurnDispatcher
from gemini_chat.llm.provider import (
    GenerationResponse,
    MultiPart,
    ProviderConfig,
    ProviderContent,
    StreamChunk,
    TextOnly,
)
from gemini_chat.main import create_app


class FakeChatHandle:
    """Session handle that replays the provider's scripted stream."""

    def __init__(self, provider: "FakeProvider"):
        self._provider = provider
        self.sent: list[TextOnly | MultiPart] = []
        self.closed = False

    async def stream_turn(
        self, content: TextOnly | MultiPart
    ) -> AsyncGenerator[StreamChunk, None]:
        self.sent.append(content)
        try:
            for item in list(self._provider.stream_script):
                if isinstance(item, asyncio.Event):
                    # Hold the stream open until the test releases it
                    await item.wait()
                    continue
                if isinstance(item, Exception):
                    raise item
                yield item
        finally:
            self.closed = True


@dataclass
class CreatedSession:
    """Arguments of one create_session call."""

    model_id: str
    config: ProviderConfig
    history: list[ProviderContent]
    handle: FakeChatHandle


class FakeProvider:
    """In-memory RemoteModelProvider that records every call."""

    def __init__(self):
        self.sessions: list[CreatedSession] = []
        self.stream_script: list[StreamChunk | Exception | asyncio.Event] = [
            StreamChunk(text="Hello"),
            StreamChunk(text=" there"),
        ]
        self.create_error: Exception | None = None
        self.generate_calls: list[tuple[str, TextOnly | MultiPart]] = []
        self.generate_response = GenerationResponse()
        self.generate_error: Exception | None = None

    @property
    def latest(self) -> CreatedSession:
        return self.sessions[-1]

    def create_session(
        self,
        model_id: str,
        config: ProviderConfig,
        history: list[ProviderContent],
    ) -> FakeChatHandle:
        if self.create_error is not None:
            raise self.create_error
        handle = FakeChatHandle(self)
        self.sessions.append(CreatedSession(model_id, config, history, handle))
        return handle

    async def generate_once(
        self,
        model_id: str,
        content: TextOnly | MultiPart,
    ) -> GenerationResponse:
        self.generate_calls.append((model_id, content))
        if self.generate_error is not None:
            raise self.generate_error
        return self.generate_response


@pytest.fixture
def provider() -> FakeProvider:
    """Create a fake model provider."""
    return FakeProvider()


@pytest.fixture
def manager(provider: FakeProvider) -> ChatSessionManager:
    """Create a session manager with default settings."""
    return ChatSessionManager(provider)


@pytest.fixture
def dispatcher(provider: FakeProvider, manager: ChatSessionManager) -> TurnDispatcher:
    """Create a dispatcher around the fake provider."""
    return TurnDispatcher(provider, manager)


@pytest.fixture
async def client(dispatcher: TurnDispatcher) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=create_app(dispatcher)),
        base_url="http://test",
    ) as client:
        yield client
