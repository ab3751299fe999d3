"""
API Middleware Package

This package contains middleware components for the Chat Sessions API.

Middleware Components:
- logging: Request/response logging with header redaction and correlation IDs
- security: Default HTTP security headers
"""

from chat_sessions.api.middleware.logging import RequestLoggingMiddleware, redact_sensitive_headers
from chat_sessions.api.middleware.security import SecurityHeadersMiddleware

__all__ = [
    # Logging
    "RequestLoggingMiddleware",
    "redact_sensitive_headers",
    # Security
    "SecurityHeadersMiddleware",
]
