"""
Core module for the Chat Sessions API.

This module contains configuration and the exception hierarchy.
"""

from chat_sessions.core.config import Settings, get_settings
from chat_sessions.core.exceptions import (
    ChatSessionsException,
    ErrorCode,
    InvalidArgumentError,
    SessionNotFoundError,
    StorageUnavailableError,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Exceptions
    "ErrorCode",
    "ChatSessionsException",
    "InvalidArgumentError",
    "SessionNotFoundError",
    "StorageUnavailableError",
]
