"""
Chat Sessions API - Main Application Entry Point

This module builds the FastAPI application that serves chat sessions from
the Redis-backed SessionStore.

Startup order:
1. Configure structured logging
2. Connect to Redis and PING it; startup aborts if Redis is unreachable
3. Publish the SessionStore on app.state.session_store
4. Serve requests

Run with: uvicorn chat_sessions.main:app --port 3000
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import redis.asyncio as redis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chat_sessions.api.errors import register_exception_handlers
from chat_sessions.api.middleware.logging import RequestLoggingMiddleware
from chat_sessions.api.middleware.security import SecurityHeadersMiddleware
from chat_sessions.api.routes.health import router as health_router
from chat_sessions.api.routes.sessions import router as sessions_router
from chat_sessions.core.config import Settings, get_settings
from chat_sessions.core.exceptions import StorageUnavailableError
from chat_sessions.observability.logging import configure_logging, get_logger
from chat_sessions.sessions.store import SessionStore

# Application metadata
APP_NAME = "Chat Sessions API"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "REST API for managing chat sessions"

logger = get_logger(__name__)


def build_redis_client(settings: Settings) -> redis.Redis:
    """Create the shared async Redis client; the driver manages pooling."""
    return redis.from_url(
        settings.redis_url,
        max_connections=settings.redis_pool_size,
        decode_responses=True,
    )


# =============================================================================
# Lifespan Context Manager
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan: connect storage on startup, release it on shutdown.

    Raises:
        StorageUnavailableError: If Redis does not answer PING at startup.
            The ASGI server then refuses to serve and exits non-zero.
    """
    settings: Settings = app.state.settings
    configure_logging(
        level=settings.log_level,
        service_name=settings.service_name,
        force=True,
    )

    injected: Optional[redis.Redis] = app.state.redis_client
    client = injected if injected is not None else build_redis_client(settings)
    store = SessionStore(
        redis_client=client,
        key_prefix=settings.redis_key_prefix,
        default_limit=settings.default_list_limit,
    )

    try:
        await store.ping()
    except StorageUnavailableError as e:
        logger.error("storage_connection_failed", redis_url=settings.redis_url, error=e.message)
        if injected is None:
            await client.aclose()
        raise

    app.state.session_store = store
    logger.info(
        "startup",
        service=settings.service_name,
        version=APP_VERSION,
        environment=settings.environment,
    )

    yield

    logger.info("shutdown", service=settings.service_name)
    app.state.session_store = None
    if injected is None:
        await client.aclose()


# =============================================================================
# Application Factory
# =============================================================================


def create_app(
    settings: Optional[Settings] = None,
    redis_client: Optional[redis.Redis] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (default: get_settings()).
        redis_client: Pre-built Redis client, e.g. fakeredis in tests. When
            given, the application does not close it on shutdown.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()
    docs_enabled = not settings.is_production

    application = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.redis_client = redis_client
    application.state.session_store = None

    register_exception_handlers(application)

    # Last added runs first: logging wraps security headers wraps CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(SecurityHeadersMiddleware)
    application.add_middleware(RequestLoggingMiddleware)

    application.include_router(health_router)
    application.include_router(sessions_router)

    @application.get("/", tags=["Info"])
    async def root() -> dict[str, Any]:
        """Root endpoint returning service information and the endpoint list."""
        return {
            "message": f"Welcome to {APP_NAME}",
            "version": APP_VERSION,
            "documentation": "/docs" if docs_enabled else "disabled",
            "health": "/health",
            "endpoints": {
                "POST /api/sessions": "Create new chat session",
                "GET /api/sessions": "Get all sessions for user",
                "GET /api/sessions/{id}": "Get specific session",
                "PUT /api/sessions/{id}": "Update session",
                "DELETE /api/sessions/{id}": "Delete session",
            },
        }

    return application


app = create_app()
