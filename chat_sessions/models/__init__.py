"""Models Package - Session domain, request and response models.

This package contains the Session/Message domain models and the Pydantic
models used for API request/response validation.
"""

from chat_sessions.models.domain import (
    DEFAULT_TITLE,
    Message,
    Session,
    SessionPatch,
    normalize_title,
    parse_messages,
)
from chat_sessions.models.requests import SessionCreateRequest, SessionUpdateRequest
from chat_sessions.models.responses import (
    ErrorResponse,
    MessageResponse,
    SessionDeleteResponse,
    SessionResponse,
)

__all__ = [
    # Domain
    "DEFAULT_TITLE",
    "Message",
    "Session",
    "SessionPatch",
    "normalize_title",
    "parse_messages",
    # Requests
    "SessionCreateRequest",
    "SessionUpdateRequest",
    # Responses
    "ErrorResponse",
    "MessageResponse",
    "SessionDeleteResponse",
    "SessionResponse",
]
