"""
Notes API - Request ID Middleware
=================================

What:  Assigns a correlation ID to each incoming request and returns it in
       the X-Request-ID response header.
Why:   A failed call reaches the client as a generic envelope; the `traceId`
       in it is the only handle that leads back to the matching server log
       lines and stack trace.
How:   Reuses a client-supplied X-Request-ID or generates a UUID4, then stores
       it in a ContextVar and in request.state.
Who:   Read by the logging middleware, the exception handlers and the note
       routes, which all report it as the envelope's `traceId`.
When:  Outermost application middleware, so the ID exists before anything
       else logs.

Flow:
    Client ──X-Request-ID: abc──▶ middleware ──▶ handler (traceId = "abc")
    Client ◀──X-Request-ID: abc── middleware ◀── response
"""

import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


def current_trace_id() -> Optional[str]:
    """
    The active request's correlation ID, or None outside a request.

    Routes call this when building the success envelope; the exception
    handlers read the same ContextVar for error envelopes.
    """
    return request_id_var.get("") or None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Attaches a correlation ID to every request and response.

    Behavior:
        1. Use the client's X-Request-ID header when present (lets the SPA
           correlate its own error reports with server logs)
        2. Otherwise generate a UUID4
        3. Store it for loggers and handlers, then echo it on the response

    Why both a ContextVar and request.state:
        The ContextVar is visible to any code running for this request
        without passing the request around (services, log calls). The
        request.state copy survives into handlers that run outside this
        middleware's context, such as the catch-all 500 handler.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
