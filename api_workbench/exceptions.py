"""
Custom exception classes and error handling for the API Workbench.

Two families live here:
- APIException and its subclasses for route-level failures (missing
  resources, bad payloads), rendered as {"detail", "error_code"}.
- EngineError and its subclasses for request-execution failures. Each one
  carries an ErrorKind so callers never have to inspect message text.
"""

import enum
import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError


logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Standard error response format."""
    detail: str
    error_code: str | None = None


class APIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | None = None
    ):
        self.detail = detail
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(detail)


class ResourceNotFoundError(APIException):
    """Exception raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            detail=f"{resource_type} with id {resource_id} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND"
        )


class BadRequestError(APIException):
    """Exception raised for invalid request data."""

    def __init__(self, detail: str):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="BAD_REQUEST"
        )


class ConfigurationError(Exception):
    """Raised when settings are missing or invalid."""


# Engine errors

class ErrorKind(str, enum.Enum):
    """Classification of request-execution failures."""
    VALIDATION = "validation"
    NOT_IMPLEMENTED = "not_implemented"
    CONSTRUCTION = "construction"
    AUTHENTICATION = "authentication"
    EXECUTION = "execution"


class EngineError(Exception):
    """
    Base exception for request-execution failures.

    Messages must never contain credentials, tokens or signatures; only
    parameter names go into `field`.

    Attributes:
        kind: ErrorKind of the failure
        message: Human-readable summary
        field: Offending field or parameter name, if any
        cause: Underlying exception, if any
    """

    kind: ErrorKind = ErrorKind.EXECUTION

    def __init__(
        self,
        message: str,
        field: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.cause = cause

    def __str__(self) -> str:
        if self.field:
            return f"{self.message}: {self.field}"
        return self.message


class ValidationError(EngineError):
    """Invalid method, URL, header key or auth configuration."""
    kind = ErrorKind.VALIDATION


class NotImplementedAuthError(EngineError):
    """An authentication scheme that is recognized but not supported."""
    kind = ErrorKind.NOT_IMPLEMENTED


class ConstructionError(EngineError):
    """Failure assembling the outbound request envelope."""
    kind = ErrorKind.CONSTRUCTION


class AuthenticationError(EngineError):
    """Failure inside an authentication scheme's computation."""
    kind = ErrorKind.AUTHENTICATION


class ExecutionError(EngineError):
    """Network-level failure while dispatching the request."""
    kind = ErrorKind.EXECUTION

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message, cause=cause)
        self.timed_out = timed_out


ENGINE_ERROR_STATUS = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_IMPLEMENTED: status.HTTP_501_NOT_IMPLEMENTED,
    ErrorKind.CONSTRUCTION: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.AUTHENTICATION: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.EXECUTION: status.HTTP_502_BAD_GATEWAY,
}


def engine_error_status(exc: EngineError) -> int:
    """Map an engine error to the HTTP status returned to the client."""
    if isinstance(exc, ExecutionError) and exc.timed_out:
        return status.HTTP_504_GATEWAY_TIMEOUT
    return ENGINE_ERROR_STATUS[exc.kind]


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handler for custom API exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code}
    )


async def engine_exception_handler(request: Request, exc: EngineError) -> JSONResponse:
    """Handler for request-execution failures."""
    details = None
    if exc.cause is not None and exc.kind is ErrorKind.EXECUTION:
        # Transport errors describe the connection, not the request contents
        details = str(exc.cause) or type(exc.cause).__name__
    logger.warning("Execution failed (%s): %s", exc.kind.value, exc)
    return JSONResponse(
        status_code=engine_error_status(exc),
        content={
            "error": exc.message,
            "errorKind": exc.kind.value,
            "field": exc.field,
            "details": details,
        }
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    errors = exc.errors()
    # Format validation errors into a readable message
    error_messages = []
    for error in errors:
        loc = " -> ".join(str(l) for l in error["loc"])
        msg = error["msg"]
        error_messages.append(f"{loc}: {msg}")

    detail = "; ".join(error_messages) if error_messages else "Validation error"

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": detail, "error_code": "VALIDATION_ERROR"}
    )


async def sqlalchemy_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Handler for SQLAlchemy database errors."""
    logger.error("Database error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred", "error_code": "DATABASE_ERROR"}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(EngineError, engine_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
