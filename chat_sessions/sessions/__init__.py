"""
Sessions Package - Chat session persistence

This package provides the Redis-backed SessionStore: owner-scoped create,
list, get, update and delete over chat sessions.
"""

from chat_sessions.sessions.store import SessionStore

__all__ = [
    "SessionStore",
]
