# Middleware package init
"""
InkPost Backend: Middleware Package
====================================

What:  Cross-cutting concerns applied to requests.

Middleware Chain (order matters):
    Request → [Request ID] → [Rate Limit] → [Logging] → [GZip] → [CORS] → Route

    1. Request ID: correlation id for logs and error bodies, echoed in X-Request-ID
    2. Rate Limit: reject abusive clients before any route work
    3. Logging: method, path, status, duration, request id, user id
    4. CORS: FastAPI's CORSMiddleware (handles preflight)

Authentication (auth.py) is a route dependency rather than ASGI middleware,
so it runs only on protected routers and can hand the user id straight to
the handler.
"""
