"""
Domain Models - Chat Session and Message

This module contains the domain models for persisted chat sessions: the
Message value object, the Session aggregate root and the SessionPatch used
for partial updates, together with the normalization rules applied to them.

Field names are Pythonic (owner_id, created_at, timestamp); the aliases
(userId, createdAt, ts) are the external wire names. Session.to_wire() is the
only serialization step used for responses and never carries storage keys.

Pattern: Domain models as value objects (Pydantic, frozen where immutable)
Pattern: Aggregate root owns its ordered message list
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from chat_sessions.core.exceptions import InvalidArgumentError


# =============================================================================
# Constants
# =============================================================================

DEFAULT_TITLE = "Conversation"
MAX_TITLE_LENGTH = 200
MAX_MESSAGE_TEXT_LENGTH = 10000

MessageRole = Literal["user", "assistant"]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =============================================================================
# Message Model
# =============================================================================


class Message(BaseModel):
    """
    A single message in a chat session.

    Messages have no identity of their own; they only exist inside the
    ordered message list of a Session.

    Attributes:
        role: Who sent the message (user or assistant).
        text: Message body, 1..10000 characters.
        timestamp: When the message was written (wire name: ts).
            Defaults to the time the message value is created.

    Example:
        >>> Message(role="user", text="Hello")
        >>> Message.model_validate({"role": "assistant", "text": "Hi", "ts": "2024-05-01T12:00:00Z"})
    """

    role: MessageRole = Field(..., description="Message role (user or assistant)")
    text: str = Field(
        ...,
        min_length=1,
        max_length=MAX_MESSAGE_TEXT_LENGTH,
        description="Message text content",
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        alias="ts",
        description="Message timestamp",
    )

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        """Store every timestamp as aware UTC."""
        return _as_utc(v)


# =============================================================================
# Session Model
# =============================================================================


class Session(BaseModel):
    """
    A persisted chat session owned by exactly one user.

    Attributes:
        id: Store-assigned unique identifier (UUID string).
        owner_id: Owning user identifier (wire name: userId).
        title: Session title, already trimmed and defaulted.
        messages: Ordered conversation history.
        created_at: When the session was created (wire name: createdAt).
    """

    id: str = Field(..., min_length=1, description="Unique session identifier")
    owner_id: str = Field(..., alias="userId", min_length=1, description="Owning user")
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        """Store creation time as aware UTC."""
        return _as_utc(v)

    def to_wire(self) -> dict[str, Any]:
        """
        Serialize to the external representation.

        Returns:
            {"id", "userId", "title", "messages": [{"role", "text", "ts"}], "createdAt"}
        """
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# SessionPatch Model
# =============================================================================


class SessionPatch(BaseModel):
    """
    Partial update for a session.

    Only fields that were explicitly set are applied. A field that was never
    given is distinct from one given as empty: ``SessionPatch(messages=[])``
    clears the history while ``SessionPatch()`` leaves it untouched. Presence
    is read from ``model_fields_set``.
    """

    title: Optional[str] = None
    messages: Optional[list[Any]] = None

    @property
    def has_title(self) -> bool:
        return "title" in self.model_fields_set

    @property
    def has_messages(self) -> bool:
        return "messages" in self.model_fields_set

    @property
    def is_empty(self) -> bool:
        return not (self.has_title or self.has_messages)


# =============================================================================
# Normalization Rules
# =============================================================================


def normalize_title(title: Any) -> str:
    """
    Apply the title rule shared by create and update.

    The title is trimmed; a blank result falls back to DEFAULT_TITLE.

    Raises:
        InvalidArgumentError: If the title is not a string or is longer
            than MAX_TITLE_LENGTH after trimming.
    """
    if not isinstance(title, str):
        raise InvalidArgumentError("title must be a string", field="title")

    trimmed = title.strip()
    if not trimmed:
        return DEFAULT_TITLE
    if len(trimmed) > MAX_TITLE_LENGTH:
        raise InvalidArgumentError(
            f"title must be at most {MAX_TITLE_LENGTH} characters",
            field="title",
        )
    return trimmed


def parse_messages(messages: Any) -> list[Message]:
    """
    Validate a submitted message sequence, keeping its order.

    Accepts Message instances or mappings in wire shape ({role, text, ts?}).

    Raises:
        InvalidArgumentError: If ``messages`` is not a list or tuple, or any
            item is not a well-formed message.
    """
    if isinstance(messages, (str, bytes)) or not isinstance(messages, Sequence):
        raise InvalidArgumentError("messages must be an array", field="messages")

    parsed: list[Message] = []
    for index, item in enumerate(messages):
        if isinstance(item, Message):
            parsed.append(item)
            continue
        try:
            parsed.append(Message.model_validate(item))
        except ValidationError as e:
            raise InvalidArgumentError(
                f"messages[{index}] is invalid: {e.errors()[0]['msg']}",
                field="messages",
            ) from e
    return parsed


def require_owner_id(owner_id: Any) -> str:
    """
    Check that a caller supplied a usable owner id.

    Raises:
        InvalidArgumentError: If owner_id is missing or blank.
    """
    if not isinstance(owner_id, str) or not owner_id.strip():
        raise InvalidArgumentError("userId is required", field="userId")
    return owner_id
