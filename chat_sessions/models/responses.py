"""
Response Models - Session Endpoints

This module contains Pydantic models for API responses. They describe the
external wire shape only; no storage key or internal counter is ever part
of a response.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from chat_sessions.models.domain import Session


# =============================================================================
# Session Response Models
# =============================================================================


class MessageResponse(BaseModel):
    """A message as returned to clients."""

    role: Literal["user", "assistant"]
    text: str
    ts: datetime


class SessionResponse(BaseModel):
    """
    Session response model.

    Attributes:
        id: Store-assigned session identifier
        userId: Owning user identifier
        title: Session title
        messages: Ordered conversation history
        createdAt: Creation timestamp
    """

    id: str = Field(..., description="Session identifier")
    userId: str = Field(..., description="Owning user identifier")
    title: str
    messages: list[MessageResponse] = Field(default_factory=list)
    createdAt: datetime

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        """Build the response from a stored session via its wire form."""
        return cls.model_validate(session.to_wire())


class SessionDeleteResponse(BaseModel):
    """Confirmation returned by DELETE /api/sessions/{id}."""

    message: str = "Session deleted successfully"


# =============================================================================
# Error Response Model
# =============================================================================


class ErrorResponse(BaseModel):
    """
    Error body returned for 4xx/5xx responses.

    Attributes:
        error: Short error summary
        message: Detail about the failure (optional)
        stack: Formatted traceback, only outside production (optional)
    """

    error: str
    message: Optional[str] = None
    stack: Optional[str] = None
