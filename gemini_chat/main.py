"""FastAPI application entry point."""

import logging
import os
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gemini_chat.api import chat
from gemini_chat.llm.chat import TurnDispatcher, build_dispatcher
from gemini_chat.llm.gemini_client import gemini_available, get_gemini_client

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown."""
    # Startup
    if getattr(app.state, "dispatcher", None) is None:
        if not gemini_available():
            logger.warning("GOOGLE_API_KEY is not set, chat endpoints are disabled")
        else:
            app.state.dispatcher = build_dispatcher(get_gemini_client())
            logger.info("Chat dispatcher ready")

    yield

    # Shutdown
    dispatcher: TurnDispatcher | None = getattr(app.state, "dispatcher", None)
    if dispatcher is not None:
        dispatcher.sessions.shutdown()


def create_app(dispatcher: TurnDispatcher | None = None) -> FastAPI:
    """Create the application.

    Args:
        dispatcher: Pre-built dispatcher. When omitted, one is built from
            GeminiProvider at startup.
    """
    app = FastAPI(
        title="Gemini Chat",
        description="Streaming chat backend with session rebuilds and image generation",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.dispatcher = dispatcher

    # CORS middleware - allow any localhost port for local frontends
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^http://localhost(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    app.include_router(chat.router, prefix="/api/v1", tags=["chat"])

    return app


app = create_app()
