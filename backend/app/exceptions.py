"""
Notes API - Custom Exception Hierarchy
======================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message, an HTTP status code and an
       optional context dict. Global exception handlers (registered in
       main.py) catch these and return the standard JSON envelope.
Who:   Raised by the store, the authentication dependency and the routes;
       caught by global handlers.

Exception Hierarchy:
    NotesAppError (base)
    ├── ValidationError     → 400 Bad Request (carries every violated rule)
    ├── UnauthorizedError   → 401 Unauthorized
    ├── NotFoundError       → 404 Not Found
    ├── ConflictError       → 409 Conflict (reserved)
    └── DatabaseError       → 500 Internal Server Error

Not-found is a normal return value inside the service layer (None / False).
The routes translate it into NotFoundError, so only the API boundary decides
that a missing note is a 404.
"""

from typing import Any, Dict, List, Optional


class NotesAppError(Exception):
    """
    Base exception for all Notes API application errors.

    Attributes:
        message:     User-facing error description (safe to return in API response)
        status_code: HTTP status the global handler responds with
        context:     Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesAppError):
    """
    Raised when client input fails one or more business rules.

    The full list of violations is reported at once, never just the first:

        {
            "success": false,
            "message": "One or more validation errors occurred.",
            "errors": ["Title is required.", "Content cannot exceed 5000 characters."],
            ...
        }
    """

    status_code = 400

    def __init__(
        self,
        errors: List[str],
        message: str = "One or more validation errors occurred.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = list(errors)


class UnauthorizedError(NotesAppError):
    """Raised when a request carries no usable credentials."""

    status_code = 401

    def __init__(
        self,
        message: str = "Unauthorized access.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NotesAppError):
    """
    Raised by the API layer when a requested resource does not exist.

    Example: GET /api/v1/notes/{id} with an unknown UUID.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found."
        if resource_id:
            message = f"{resource} with id '{resource_id}' was not found."
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(NotesAppError):
    """Reserved for write conflicts; nothing raises it yet."""

    status_code = 409

    def __init__(
        self,
        message: str = "The resource was modified by another request.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(NotesAppError):
    """
    Raised when database operations fail unexpectedly.

    What:    A query, insert, update or delete failed.
    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The original
    exception type is kept in `context` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
