"""
Tests for API Dependencies
"""

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from chat_sessions.api.deps import get_session_store, get_settings
from chat_sessions.api.errors import register_exception_handlers
from chat_sessions.core.config import Settings
from chat_sessions.core.exceptions import StorageUnavailableError


class TestGetSettings:
    def test_returns_settings_instance(self):
        assert isinstance(get_settings(), Settings)

    def test_returns_singleton(self):
        assert get_settings() is get_settings()


class TestGetSessionStore:
    def test_returns_store_from_app_state(self, client, app):
        from chat_sessions.sessions.store import SessionStore

        assert isinstance(app.state.session_store, SessionStore)

    def test_raises_when_store_missing(self):
        app = FastAPI()
        app.state.settings = Settings()
        register_exception_handlers(app)

        @app.get("/probe")
        async def probe(store=Depends(get_session_store)):
            return {"ok": True}

        response = TestClient(app).get("/probe")

        assert response.status_code == 500
        assert response.json()["message"] == "Session store is not initialized"

    def test_can_be_overridden(self, app):
        sentinel = object()
        app.dependency_overrides[get_session_store] = lambda: sentinel

        @app.get("/probe-override")
        async def probe(store=Depends(get_session_store)):
            return {"same": store is sentinel}

        with TestClient(app) as client:
            assert client.get("/probe-override").json() == {"same": True}

    def test_error_type(self):
        class _State:
            session_store = None

        class _App:
            state = _State()

        class _Request:
            app = _App()

        with pytest.raises(StorageUnavailableError):
            get_session_store(_Request())
