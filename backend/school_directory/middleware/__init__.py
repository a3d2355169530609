# Middleware package init
"""
School Directory — Middleware Package
=======================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID: correlation ID stored in a ContextVar and echoed back
    - Logging: method, path, status and duration, tagged with the request ID
"""
