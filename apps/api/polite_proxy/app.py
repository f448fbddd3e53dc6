import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from polite_proxy.core import Settings, get_settings
from polite_proxy.providers import (
    ChatProvider,
    IdentityProvider,
    MessageStore,
    OpenAIChatProvider,
    SupabaseAuthProvider,
    SupabaseMessageStore,
)
from polite_proxy.routers import ROUTERS, method_not_allowed_handler
from polite_proxy.services import SubmitMessagePipeline

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    identity: IdentityProvider | None = None,
    chat: ChatProvider | None = None,
    store: MessageStore | None = None,
) -> FastAPI:
    """Composition root. Reads settings once; raises ConfigError if any required value is missing."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    # Shared by the default providers only; injected providers own their transport
    http_client = None
    if identity is None or chat is None or store is None:
        http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    pipeline = SubmitMessagePipeline(
        identity=identity or SupabaseAuthProvider.from_settings(http_client, settings),
        chat=chat or OpenAIChatProvider.from_settings(http_client, settings),
        store=store or SupabaseMessageStore.from_settings(http_client, settings),
    )
    logger.info("Polite proxy configured with model %s", settings.openai_model)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        if http_client is not None:
            await http_client.aclose()

    app = FastAPI(
        title="Polite Proxy API",
        description="Rewrites chat messages politely before they are stored and broadcast.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.pipeline = pipeline
    app.state.http_client = http_client
    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)

    for router in ROUTERS:
        app.include_router(router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
