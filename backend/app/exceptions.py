"""
FormDrop Backend: Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages. They replace generic Python
       exceptions that would leak internal details to the client.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": message}` JSON bodies with the right status code.
Who:   Raised by services; caught by global handlers.
When:  During request processing when recoverable errors occur.

Exception Hierarchy:
    FormDropError (base)
    ├── ValidationError      → 400 Bad Request (client can fix)
    ├── NotFoundError        → 404 Not Found
    ├── UploadError          → 500 Internal Server Error
    ├── StorageError         → 500 Internal Server Error
    └── NotificationError    → 500 Internal Server Error (record stays saved)

Services raise instead of returning result objects; the intake workflow
stops at the first raised error.
"""

from typing import Any, Dict, List, Optional


class FormDropError(Exception):
    """
    Base exception for all FormDrop application errors.

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


class ValidationError(FormDropError):
    """
    Raised when client input fails validation.

    When:    Missing form field, no attachments, too many attachments,
             attempted path escape on the uploads route.
    HTTP:    400 Bad Request

    Example response:
        {"error": "All fields are required!"}
    """

    def __init__(
        self,
        message: str = "All fields are required!",
        missing: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if missing:
            ctx["missing"] = list(missing)
        super().__init__(message=message, context=ctx)
        self.missing = list(missing or [])


class NotFoundError(FormDropError):
    """
    Raised when a requested resource does not exist.

    When:    GET /uploads/{filename} for a file that was never stored.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class UploadError(FormDropError):
    """
    Raised when an incoming attachment cannot be stored.

    When:    Disk full, permission denied, unreadable multipart part.
    HTTP:    500 Internal Server Error

    Files written earlier in the same request are left in place.
    """

    def __init__(
        self,
        message: str = "Failed to upload images",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageError(FormDropError):
    """
    Raised when the submissions store is unreachable or rejects an operation.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; driver details
    go to the log only.
    """

    def __init__(
        self,
        message: str = "Failed to save submission",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotificationError(FormDropError):
    """
    Raised when the confirmation email cannot be sent.

    When:    Relay unreachable, login/send rejected, or an attachment
             referenced by the submission cannot be read.
    HTTP:    500 Internal Server Error

    The submission saved before this step is NOT removed; the response
    carries a `details` line saying so.
    """

    details = "The submission was saved but the notification email could not be sent."

    def __init__(
        self,
        message: str = "Failed to send notification email",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
