"""
Error handling for the API.

Every failure leaves the service as a JSON body of the same shape:

    {"msg": "...", "error": {"code": ..., "category": ..., "path": ..., "timestamp": ...}}

Domain errors (`AppError`) keep their status and code; request validation
errors become 400; anything unexpected, database failures included, becomes
a generic 500 without internal detail.
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventhub.core.exceptions import AppError, ErrorCategory

logger = logging.getLogger(__name__)

# Status codes raised by the framework itself (missing bearer token,
# unknown route, wrong method)
HTTP_STATUS_CATEGORIES = {
    400: (ErrorCategory.VALIDATION, "VALIDATION_ERROR"),
    401: (ErrorCategory.UNAUTHORIZED, "UNAUTHORIZED"),
    403: (ErrorCategory.FORBIDDEN, "FORBIDDEN"),
    404: (ErrorCategory.NOT_FOUND, "NOT_FOUND"),
    405: (ErrorCategory.VALIDATION, "METHOD_NOT_ALLOWED"),
    409: (ErrorCategory.CONFLICT, "CONFLICT"),
}


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def error_body(
    message: str, *, code: str, category: str, path: str, **details
) -> dict:
    return {
        "msg": message,
        "error": {
            "code": code,
            "category": category,
            "path": path,
            "timestamp": _timestamp(),
            **details,
        },
    }


async def error_handler_middleware(request: Request, call_next: Callable) -> Response:
    """
    Outermost safety net: catches whatever the exception handlers did not.
    """
    try:
        return await call_next(request)

    except SQLAlchemyError as e:
        return handle_database_error(e, request)

    except Exception as e:
        return handle_unexpected_error(e, request)


def handle_app_error(error: AppError, request: Request) -> JSONResponse:
    """Handle structured application errors"""

    log = logger.error if error.status_code >= 500 else logger.info
    log(
        f"{error.code} on {request.method} {request.url.path}: {error.message}",
        extra={
            "category": error.category,
            "status_code": error.status_code,
            "details": error.details,
        },
    )

    return JSONResponse(
        status_code=error.status_code,
        content=error_body(
            error.message,
            code=error.code,
            category=error.category,
            path=request.url.path,
            **error.details,
        ),
    )


def handle_validation_error(error: RequestValidationError, request: Request) -> JSONResponse:
    """Handle FastAPI validation errors"""

    errors = []
    for err in error.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        })

    logger.warning(
        f"Validation error on {request.url.path}",
        extra={"errors": errors, "method": request.method},
    )

    return JSONResponse(
        status_code=400,
        content=error_body(
            "Request validation failed",
            code="VALIDATION_ERROR",
            category=ErrorCategory.VALIDATION,
            path=request.url.path,
            validation_errors=errors,
        ),
    )


def handle_http_exception(error: StarletteHTTPException, request: Request) -> JSONResponse:
    """Handle HTTPExceptions raised by FastAPI/Starlette internals"""

    category, code = HTTP_STATUS_CATEGORIES.get(
        error.status_code, (ErrorCategory.INTERNAL, "HTTP_ERROR")
    )
    return JSONResponse(
        status_code=error.status_code,
        content=error_body(
            str(error.detail), code=code, category=category, path=request.url.path
        ),
        headers=getattr(error, "headers", None),
    )


def handle_database_error(error: SQLAlchemyError, request: Request) -> JSONResponse:
    """Handle database errors"""

    logger.error(
        f"Database error: {type(error).__name__}",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
        exc_info=error,
    )

    return JSONResponse(
        status_code=500,
        content=error_body(
            "Database operation failed. Please try again.",
            code="INTERNAL_ERROR",
            category=ErrorCategory.INTERNAL,
            path=request.url.path,
        ),
    )


def handle_unexpected_error(error: Exception, request: Request) -> JSONResponse:
    """Handle unexpected errors"""

    logger.critical(
        f"Unexpected error: {type(error).__name__}",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
        exc_info=error,
    )

    # Don't expose internal details
    return JSONResponse(
        status_code=500,
        content=error_body(
            "Server Error",
            code="INTERNAL_ERROR",
            category=ErrorCategory.INTERNAL,
            path=request.url.path,
        ),
    )


# Exception handlers for FastAPI
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """FastAPI exception handler for AppError"""
    return handle_app_error(exc, request)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """FastAPI exception handler for validation errors"""
    return handle_validation_error(exc, request)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return handle_http_exception(exc, request)
