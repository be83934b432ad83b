"""
ShiftMaster Backend — Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    ShiftMasterError (base)
    ├── InvalidInputError           → 400 Bad Request (client can fix)
    ├── AggregateQueryFailedError   → 500 Internal Server Error (no partial data)
    ├── MissingAggregateError       → 500 Internal Server Error (wiring defect)
    └── DatabaseError               → 500 via the fallback handler

The `context` dict is logged server-side and never returned to API consumers.
"""

from typing import Any, Dict, Optional


class ShiftMasterError(Exception):
    """
    Base exception for all ShiftMaster application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidInputError(ShiftMasterError):
    """
    Raised when a caller-supplied value cannot be used.

    When:    The reporting clock handed over something that is not an
             aware timestamp, or a week start day outside 0..6.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Invalid input",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AggregateQueryFailedError(ShiftMasterError):
    """
    Raised when one query of a concurrent aggregate batch fails.

    What:    The whole batch is abandoned; no partial results are returned.
    When:    Store unreachable, malformed filter, unknown collection, or the
             query exceeded its timeout (cause is a TimeoutError).
    HTTP:    500 Internal Server Error

    Attributes:
        query_name: Name of the AggregateQuery that failed first
        cause:      The underlying exception
    """

    def __init__(
        self,
        query_name: str,
        cause: BaseException,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["query_name"] = query_name
        ctx["cause"] = type(cause).__name__
        super().__init__(
            message=f"Aggregate query '{query_name}' failed: {type(cause).__name__}",
            context=ctx,
        )
        self.query_name = query_name
        self.cause = cause

    @property
    def timed_out(self) -> bool:
        return isinstance(self.cause, TimeoutError)


class MissingAggregateError(ShiftMasterError):
    """
    Raised when the assembler cannot find a result it requires.

    This is a programming error: the dashboard queries and the assembler
    disagree on query names. It is never recovered by substituting zero.
    HTTP: 500 Internal Server Error
    """

    def __init__(
        self,
        name: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["name"] = name
        super().__init__(message=f"No aggregate result named '{name}'", context=ctx)
        self.name = name


class DatabaseError(ShiftMasterError):
    """
    Raised by SQLAlchemyDataStore when the driver fails.

    Inside a dashboard batch it becomes the cause of the
    AggregateQueryFailedError. Anywhere else it reaches the catch-all
    handler: 500 internal_server_error, detail logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
