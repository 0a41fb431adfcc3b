"""
Bookstore Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the registration/login flow.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return the `ResponseMessage` envelope with the matching statusCode.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    BookstoreError (base)
    ├── ValidationError          → statusCode 400, status FAILED
    ├── AuthenticationError      → statusCode 400, status FAILED
    ├── NotFoundError            → statusCode 404, status FAILED
    ├── CredentialDecodeError    → never reaches a handler (login treats it as mismatch)
    └── DatabaseError            → statusCode 500, status FAILURE

Transport Note:
    Every handler answers with HTTP 200. The real outcome lives in the
    envelope's statusCode/status fields, which existing clients read.
"""

from typing import Any, Dict, Optional


class BookstoreError(Exception):
    """
    Base exception for all bookstore application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BookstoreError):
    """
    Raised when client input fails a business rule.

    When:    Blank email/password, duplicate email (when enforced),
             unparsable registration JSON, oversize attachment.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(BookstoreError):
    """
    Raised when login credentials do not match a stored account.

    The message is identical for "no such email" and "wrong password";
    the distinguishing reason is kept in `context` for server-side logs only.
    """

    def __init__(
        self,
        message: str = "Invalid Email and Password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(BookstoreError):
    """Raised when a requested resource does not exist."""

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class CredentialDecodeError(BookstoreError):
    """Raised when a stored password is not valid Base64/UTF-8."""

    def __init__(
        self,
        message: str = "Stored credential could not be decoded",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BookstoreError):
    """
    Raised when a store operation fails unexpectedly.

    `detail` holds the driver's message; handlers append it to the
    operation's failure text ("User Registration Failed: <detail>").
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        detail: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if detail:
            ctx["detail"] = detail
        super().__init__(message=message, context=ctx)
        self.detail = detail
