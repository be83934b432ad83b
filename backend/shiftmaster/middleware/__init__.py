"""
ShiftMaster Backend — Middleware Package
==========================================

Cross-cutting concerns applied to every request.

Request order:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

The request ID is set before the access log line is written, so every log
entry for a request carries the same ID.
"""
