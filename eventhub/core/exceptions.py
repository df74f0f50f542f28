# eventhub/core/exceptions.py
"""
Domain error hierarchy.

CRUD and service code raises these; the handlers in
`eventhub.middleware.error_handler` turn them into structured JSON responses.
"""

from typing import Optional


class ErrorCategory:
    """Error categories for structured error handling"""
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class AppError(Exception):
    """Base application error with structured information"""

    def __init__(
        self,
        message: str,
        category: str = ErrorCategory.INTERNAL,
        status_code: int = 500,
        code: str = "INTERNAL_ERROR",
        details: Optional[dict] = None,
    ):
        self.message = message
        self.category = category
        self.status_code = status_code
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found", details: Optional[dict] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.NOT_FOUND,
            status_code=404,
            code="NOT_FOUND",
            details=details,
        )


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(
            message=message,
            category=ErrorCategory.UNAUTHORIZED,
            status_code=401,
            code="UNAUTHORIZED",
        )


class ForbiddenError(AppError):
    def __init__(self, message: str = "Access denied"):
        super().__init__(
            message=message,
            category=ErrorCategory.FORBIDDEN,
            status_code=403,
            code="FORBIDDEN",
        )


class ValidationError(AppError):
    """Malformed or inconsistent input"""
    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            status_code=400,
            code="VALIDATION_ERROR",
            details=details,
        )


class ConflictError(AppError):
    """The request clashes with the current state of a resource"""
    def __init__(self, message: str, code: str = "CONFLICT", details: Optional[dict] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFLICT,
            status_code=409,
            code=code,
            details=details,
        )


class AlreadyRegisteredError(ConflictError):
    def __init__(self, event_id: str):
        super().__init__(
            "Already registered for this event",
            code="ALREADY_REGISTERED",
            details={"eventId": event_id},
        )


class NotRegisteredError(ConflictError):
    def __init__(self, event_id: str):
        super().__init__(
            "Not registered for this event",
            code="NOT_REGISTERED",
            details={"eventId": event_id},
        )


class CapacityExceededError(ConflictError):
    def __init__(self, event_id: str):
        super().__init__(
            "Event is full",
            code="CAPACITY_EXCEEDED",
            details={"eventId": event_id},
        )


class InvalidStateError(ConflictError):
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, code="INVALID_STATE", details=details)


class DuplicateAttendeeError(ConflictError):
    def __init__(self, email: str):
        super().__init__(
            "An attendee with this email is already on the event roster",
            code="DUPLICATE_ATTENDEE",
            details={"email": email},
        )


class EmailInUseError(ConflictError):
    def __init__(self):
        super().__init__("An account with this email already exists", code="EMAIL_IN_USE")
