"""Presentation layer - API endpoints and HTTP concerns.

Thin FastAPI layer: routers build commands, dispatch them to handlers
from the container and translate Result values to HTTP responses.

Structure:
- routers/system.py: root and health
- routers/api/v1/: versioned endpoints (auth, sessions) and RFC 9457 errors
- routers/api/middleware/: trace, security headers, rate limiting, auth
"""
