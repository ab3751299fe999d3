"""
Request Models - Session Endpoints

This module contains Pydantic models for API request validation. Field
names match the wire format (userId, messages[].ts) through aliases.

Anti-Patterns Avoided:
- Optional fields use Optional[T] with explicit None default
- Presence of optional update fields is read from model_fields_set,
  never inferred from a None value
"""

from typing import Optional

from pydantic import BaseModel, Field

from chat_sessions.models.domain import Message, SessionPatch


# =============================================================================
# POST /api/sessions
# =============================================================================


class SessionCreateRequest(BaseModel):
    """
    Session creation request model.

    Attributes:
        user_id: Owning user identifier (wire name: userId)
        title: Session title; blank titles are stored as "Conversation"
        messages: Initial conversation history, possibly empty
    """

    user_id: str = Field(..., alias="userId", min_length=1)
    title: str = Field(..., description="Session title (trimmed by the store)")
    messages: list[Message] = Field(..., description="Initial message history")

    model_config = {"populate_by_name": True}


# =============================================================================
# PUT /api/sessions/{id}
# =============================================================================


class SessionUpdateRequest(BaseModel):
    """
    Session update request model.

    Only title and messages may change. A provided messages list replaces
    the stored history in full; it is never appended.
    """

    user_id: str = Field(..., alias="userId", min_length=1)
    title: Optional[str] = None
    messages: Optional[list[Message]] = None

    model_config = {"populate_by_name": True}

    def to_patch(self) -> SessionPatch:
        """Build a SessionPatch carrying only the fields the client sent."""
        provided = {
            name: getattr(self, name)
            for name in ("title", "messages")
            if name in self.model_fields_set
        }
        return SessionPatch(**provided)
