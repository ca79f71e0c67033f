"""Typed API exceptions and the handlers that render them as response envelopes.

Every failure leaves the service as ``{"status", "message", "code", "errors"?}``.
Stack traces and internal identifiers are only ever written to the logs.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiException(HTTPException):
    """
    Base exception class for all business-rule and request failures.

    Subclasses fix the HTTP status and a stable machine-readable code;
    callers supply the human-readable message.
    """

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "An unexpected error occurred while processing the request"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize an API exception.

        Args:
            message: Human-readable explanation specific to this occurrence
            errors: Optional list of field-level problems
            status_code: Override of the class HTTP status code
            code: Override of the class error code
            headers: HTTP headers to include in response
        """
        self.status_code = status_code or type(self).status_code
        self.code = code or type(self).code
        self.message = message or self.default_message
        self.errors = errors

        self.body: Dict[str, Any] = {
            "status": self.status_code,
            "message": self.message,
            "code": self.code,
        }
        if errors:
            self.body["errors"] = errors

        super().__init__(
            status_code=self.status_code,
            detail=self.message,
            headers=headers,
        )


class ValidationError(ApiException):
    """Malformed input or an id of the wrong shape."""

    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "The request data failed validation"


class InvalidOperationError(ApiException):
    """A well-formed request that asks for something the rules forbid, e.g. self-follow."""

    status_code = 400
    code = "INVALID_OPERATION"
    default_message = "The requested operation is not allowed"


class AuthenticationError(ApiException):
    """Missing or invalid actor identity."""

    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Authentication credentials are required"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(ApiException):
    """Authenticated, but not allowed to act on this entity."""

    status_code = 403
    code = "FORBIDDEN"
    default_message = "You are not authorized to perform this action"


class NotFoundError(ApiException):
    """Exception for resource not found errors."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(
        self,
        resource_type: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if not message:
            message = f"The requested {resource_type}"
            if resource_id:
                message += f" with ID '{resource_id}'"
            message += " could not be found"
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class NotFoundOrUnauthorizedError(ApiException):
    """Used where revealing that another actor's entity exists would leak data."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource_type: str = "resource"):
        super().__init__(f"{resource_type.capitalize()} not found or unauthorized.")


class ConflictError(ApiException):
    """The request conflicts with the current state of the resource."""

    status_code = 409
    code = "CONFLICT"
    default_message = "The request conflicts with the current state of the resource"


class InsufficientCapacityError(ApiException):
    """Requested slots exceed what the package has left."""

    status_code = 400
    code = "INSUFFICIENT_CAPACITY"

    def __init__(self, package_id: str, requested_slots: int, available_slots: int):
        self.package_id = package_id
        self.requested_slots = requested_slots
        self.available_slots = available_slots
        super().__init__(
            f"Not enough available slots. Requested: {requested_slots}, "
            f"available: {available_slots}."
        )


class InventoryInvariantError(ApiException):
    """A release would push available slots above the package maximum.

    This means a caller released slots it never held; it is surfaced as a
    server error instead of being clamped.
    """

    status_code = 500
    code = "INVENTORY_INVARIANT_VIOLATION"
    default_message = "An unexpected error occurred while processing the request"


class InternalServerError(ApiException):
    """Exception for internal server errors."""

    status_code = 500
    code = "INTERNAL_ERROR"


async def api_exception_handler(request: Request, exc: ApiException) -> JSONResponse:
    """
    Exception handler for typed API exceptions.

    Args:
        request: FastAPI request object
        exc: API exception

    Returns:
        JSONResponse: Failure envelope
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.body,
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Render FastAPI request validation failures as 400 envelopes.

    Args:
        request: FastAPI request object
        exc: Request validation error raised by FastAPI

    Returns:
        JSONResponse: Failure envelope with field-level errors
    """
    errors = [
        {
            "path": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "status": 400,
            "message": "The request data failed validation",
            "code": ValidationError.code,
            "errors": errors,
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Generic exception handler that converts unhandled exceptions to a failure envelope.

    Args:
        request: FastAPI request object
        exc: Unhandled exception

    Returns:
        JSONResponse: Failure envelope without internal details
    """
    logger.error(
        "Unhandled exception while processing request",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
        },
        exc_info=exc,
    )

    return JSONResponse(
        status_code=500,
        content={
            "status": 500,
            "message": InternalServerError.default_message,
            "code": InternalServerError.code,
        },
    )
