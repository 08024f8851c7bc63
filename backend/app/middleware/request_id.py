"""
Contacts API - Request ID Middleware
======================================

What:  Assigns a correlation id to each request and returns it in the
       X-Request-ID response header.
How:   Takes the client's X-Request-ID when present, otherwise generates a
       short UUID; stores it in a ContextVar for loggers and exception
       handlers, and in request.state for route handlers.
When:  Runs before the access-log middleware, so log lines can carry the id.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    """8 hex characters of a UUID4; plenty to correlate log lines."""
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
