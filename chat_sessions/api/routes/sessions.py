"""
Sessions Router - Chat session CRUD endpoints

This module maps the REST interface onto the SessionStore operations:

| Method & path                         | Store operation |
|---------------------------------------|-----------------|
| POST   /api/sessions                  | create          |
| GET    /api/sessions?userId&limit&skip | list           |
| GET    /api/sessions/{id}?userId      | get             |
| PUT    /api/sessions/{id}             | update          |
| DELETE /api/sessions/{id}?userId      | delete          |

Handlers do not translate errors themselves: InvalidArgumentError,
SessionNotFoundError and StorageUnavailableError propagate to the
application exception handlers (chat_sessions.api.errors).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from chat_sessions.api.deps import get_session_store
from chat_sessions.models.requests import SessionCreateRequest, SessionUpdateRequest
from chat_sessions.models.responses import (
    ErrorResponse,
    SessionDeleteResponse,
    SessionResponse,
)
from chat_sessions.observability.logging import get_logger
from chat_sessions.sessions.store import SessionStore


logger = get_logger(__name__)


# =============================================================================
# Router Setup
# =============================================================================

router = APIRouter(
    prefix="/api/sessions",
    tags=["Sessions"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad request"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
)

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Session not found"}}


# =============================================================================
# POST /api/sessions - Create Session
# =============================================================================


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=SessionResponse,
    summary="Create a new chat session",
)
async def create_session(
    request: SessionCreateRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    """
    Create a new chat session.

    The session id and createdAt are assigned by the server.
    """
    session = await store.create(request.user_id, request.title, request.messages)
    logger.info("session_created", session_id=session.id, user_id=session.owner_id)
    return SessionResponse.from_session(session)


# =============================================================================
# GET /api/sessions - List Sessions
# =============================================================================


@router.get(
    "",
    response_model=list[SessionResponse],
    summary="Get all sessions for a user",
)
async def list_sessions(
    user_id: Optional[str] = Query(None, alias="userId", description="User ID to get sessions for"),
    limit: Optional[str] = Query(None, description="Maximum number of sessions to return (default 50)"),
    skip: Optional[str] = Query(None, description="Number of sessions to skip (default 0)"),
    store: SessionStore = Depends(get_session_store),
) -> list[SessionResponse]:
    """
    List a user's sessions, newest first.

    limit and skip are parsed by the store so that malformed values are
    reported as a 400 with the store's message.
    """
    sessions = await store.list(user_id, limit=limit, offset=skip)
    logger.info("sessions_listed", user_id=user_id, count=len(sessions))
    return [SessionResponse.from_session(s) for s in sessions]


# =============================================================================
# GET /api/sessions/{id} - Retrieve Session
# =============================================================================


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    responses=_NOT_FOUND,
    summary="Get a specific session by ID",
)
async def get_session(
    session_id: str,
    user_id: Optional[str] = Query(None, alias="userId", description="User ID (for security)"),
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    """Retrieve one session owned by the requesting user."""
    session = await store.get(session_id, user_id)
    logger.info("session_retrieved", session_id=session_id, user_id=user_id)
    return SessionResponse.from_session(session)


# =============================================================================
# PUT /api/sessions/{id} - Update Session
# =============================================================================


@router.put(
    "/{session_id}",
    response_model=SessionResponse,
    responses=_NOT_FOUND,
    summary="Update a session (rename or replace messages)",
)
async def update_session(
    session_id: str,
    request: SessionUpdateRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    """
    Update a session's title and/or messages.

    Omitted fields are left untouched; a provided messages list replaces
    the whole history.
    """
    session = await store.update(session_id, request.user_id, request.to_patch())
    logger.info("session_updated", session_id=session_id, user_id=request.user_id)
    return SessionResponse.from_session(session)


# =============================================================================
# DELETE /api/sessions/{id} - Delete Session
# =============================================================================


@router.delete(
    "/{session_id}",
    response_model=SessionDeleteResponse,
    responses=_NOT_FOUND,
    summary="Delete a session",
)
async def delete_session(
    session_id: str,
    user_id: Optional[str] = Query(None, alias="userId", description="User ID (for security)"),
    store: SessionStore = Depends(get_session_store),
) -> SessionDeleteResponse:
    """Permanently delete a session owned by the requesting user."""
    await store.delete(session_id, user_id)
    logger.info("session_deleted", session_id=session_id, user_id=user_id)
    return SessionDeleteResponse()
