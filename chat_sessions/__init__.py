"""Chat Sessions API - Source Package.

Note: Import `app` directly from `chat_sessions.main` to avoid circular imports.
"""

__all__ = ["main", "api", "core", "models", "sessions", "observability"]
