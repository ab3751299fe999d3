"""API Package - FastAPI routes, middleware, and dependencies.

Components:
- routes: API endpoint routers (health, sessions)
- middleware: Request/response middleware (logging, security headers)
- deps: FastAPI dependency injection functions

Note: Import routers directly from chat_sessions.api.routes to avoid circular imports.
"""

__all__ = ["routes", "middleware", "deps"]
