"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration. The session store and relay are built once per
application and kept on ``app.state``.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chat_relay.api.chat import router as chat_router
from chat_relay.relay.config import RelayConfig, get_relay_config
from chat_relay.relay.provider import AgnoProvider
from chat_relay.relay.service import ChatRelay
from chat_relay.store.session_store import SessionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    config = app.state.relay.config
    logger.info(f"Starting chat relay (model={config.model_name}, max_turns={config.max_turns})")
    yield
    logger.info(f"Shutting down chat relay ({len(app.state.relay.store)} session(s) discarded)")


def build_relay(config: RelayConfig | None = None) -> ChatRelay:
    """Build the production relay from configuration.

    Args:
        config: Optional relay configuration. Loads from environment if not provided.

    Returns:
        ChatRelay with a fresh session store and the Agno provider.
    """
    config = config or get_relay_config()
    store = SessionStore(
        max_sessions=config.max_sessions,
        ttl_seconds=config.session_ttl_seconds,
    )
    return ChatRelay(store=store, provider=AgnoProvider(config), config=config)


def create_app(relay: ChatRelay | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        relay: Relay to serve. Built from the environment if not provided.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Chat Relay API",
        description=(
            "Relays chat messages to a hosted language model and streams the "
            "reply back as plain text, keeping a bounded history per session."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.relay = relay or build_relay()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "chat-relay"}

    return application
