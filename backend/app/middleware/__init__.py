# Middleware package init
"""
Contacts API - Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first, so every later log line and error body carries it
    - Logging measures the full handler time and records the final status
    - CORS (Starlette's CORSMiddleware) answers preflight OPTIONS requests
"""
