"""API tests package.

HTTP tests against the real FastAPI app using TestClient:
- Request validation and RFC 9457 error bodies
- Handler orchestration over in-memory stores
- Middleware (trace, security headers, rate limiting)
"""
