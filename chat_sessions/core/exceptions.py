"""
Custom exceptions for the Chat Sessions API.

This module provides the exception hierarchy used by the session store and the
HTTP layer. All exceptions inherit from ChatSessionsException and carry an
error code for consistent error handling and API responses.

The store raises exactly three kinds of failure:
- InvalidArgumentError: a required field is missing or malformed
- SessionNotFoundError: no session matches the (id, userId) pair
- StorageUnavailableError: the Redis backend failed the call
"""

from enum import Enum
from typing import Any


# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(str, Enum):
    """
    Error codes for Chat Sessions exceptions.

    These codes provide a consistent way to identify error types
    across the API and in logging.
    """

    SERVICE_ERROR = "SERVICE_ERROR"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"


# =============================================================================
# Base Exception
# =============================================================================


class ChatSessionsException(Exception):
    """
    Base exception for all Chat Sessions errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code from ErrorCode enum.
    """

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.SERVICE_ERROR,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# InvalidArgumentError
# =============================================================================


class InvalidArgumentError(ChatSessionsException):
    """
    Exception for missing or malformed input.

    Raised when a required field is absent, a message does not have the
    expected shape, or a pagination value cannot be parsed. Retrying the
    same request will not help.

    Attributes:
        field: Name of the offending field (if known).
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_code: str = ErrorCode.INVALID_ARGUMENT,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.field = field


# =============================================================================
# SessionNotFoundError
# =============================================================================


class SessionNotFoundError(ChatSessionsException):
    """
    Exception raised when no session matches an (id, userId) pair.

    A session that exists under another user is reported exactly like a
    session that does not exist at all.

    Attributes:
        session_id: ID that was looked up.
    """

    def __init__(
        self,
        message: str = "Session not found",
        session_id: str | None = None,
        error_code: str = ErrorCode.NOT_FOUND,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.session_id = session_id


# =============================================================================
# StorageUnavailableError
# =============================================================================


class StorageUnavailableError(ChatSessionsException):
    """
    Exception for storage backend failures.

    Raised when Redis cannot be reached or rejects a command. The condition
    may be transient; callers may retry with backoff, the store never does.

    Attributes:
        operation: Store operation that failed (create, list, get, ...).
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        error_code: str = ErrorCode.STORAGE_UNAVAILABLE,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.operation = operation
