"""
PhotoShare Backend - Middleware Package
=========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Language] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit FIRST: reject abusive clients before any processing
    2. Request ID: correlation ID for logs and error bodies
    3. Language: Accept-Language → language_var, used by every message
    4. Logging: method, path, status and duration with the request ID
"""
