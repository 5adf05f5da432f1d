"""
Notes API - Middleware Package
==============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID used as the envelope `traceId`
    2. Logging: method, path, status and duration, tagged with the request ID
    3. GZip / CORS: Starlette built-ins

    Responses travel the chain in reverse, so the logging middleware sees the
    final status code and the request ID header is added last.
"""
