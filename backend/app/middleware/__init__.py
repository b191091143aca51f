# Middleware package init
"""
FormDrop Backend: Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for every log line of the request
    2. Logging: method, path, status and duration, tagged with the request ID
    3. GZip / CORS: FastAPI's stock middleware

    Responses travel back through the same chain in reverse, which is when
    the request ID header is added and the access line is written.
"""
