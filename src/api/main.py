"""PromptVault ASGI application: middleware, lifespan and router wiring."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import (
    admin,
    auth,
    categories,
    config,
    entries,
    health,
    me,
    retention,
)
from core.config import get_settings
from db.session import async_session_factory, engine
from models import Base
from services.bootstrap import bootstrap_if_needed

logger = logging.getLogger(__name__)

# HTTPS only for a year, no MIME sniffing, never rendered inside a frame
SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Create the schema and seed an empty database on startup; dispose the engine on shutdown."""
    app_settings = get_settings()

    # Startup: create schema and seed an empty database
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with async_session_factory() as session:
        if await bootstrap_if_needed(session, app_settings):
            await session.commit()
    logger.info("PromptVault API started (env=%s, db=%s)", app_settings.app_env, app_settings.db_type)

    yield

    # Shutdown: release pooled connections
    await engine.dispose()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp SECURITY_HEADERS onto every response, including errors."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Forward the request, then set the headers on the way out."""
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response


app_settings = get_settings()

app = FastAPI(
    title="PromptVault API",
    description="A knowledge base for AI prompt/output pairs with tagging, trash and retention.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(config.router)
app.include_router(auth.router)
app.include_router(me.router)
app.include_router(categories.router)
app.include_router(entries.router)
app.include_router(admin.router)
app.include_router(retention.router)
