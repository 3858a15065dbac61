# Middleware package init
"""
AyurCare Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Rate Limit] → [Access Log] → [GZip] → [CORS] → Router

    The request ID is assigned first, so 429 bodies and access log lines
    carry it. Rate limiting then rejects abusive clients before any
    database session is opened.
"""
