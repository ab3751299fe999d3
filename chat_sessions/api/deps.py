"""
API Dependencies

This module provides FastAPI dependency injection functions for the API layer.

All dependencies are factory functions that can be overridden in tests
using FastAPI's dependency_overrides mechanism.
"""

from fastapi import Request

from chat_sessions.core.config import Settings, get_settings as _get_settings
from chat_sessions.core.exceptions import StorageUnavailableError
from chat_sessions.sessions.store import SessionStore


# =============================================================================
# get_settings Dependency
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Pattern: Singleton with @lru_cache (from core.config)
    """
    return _get_settings()


# =============================================================================
# get_session_store Dependency
# =============================================================================


def get_session_store(request: Request) -> SessionStore:
    """
    Get the SessionStore created during application startup.

    The lifespan handler connects to Redis and places the store on
    ``app.state.session_store`` before any request is served.

    Raises:
        StorageUnavailableError: If the application has no store, e.g. the
            router is mounted on an app without the lifespan handler.
    """
    store = getattr(request.app.state, "session_store", None)
    if store is None:
        raise StorageUnavailableError(
            "Session store is not initialized", operation="dependency"
        )
    return store
