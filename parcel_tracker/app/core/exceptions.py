"""
Custom exceptions and error handlers for consistent error responses.

Every error leaves the API wrapped in the same envelope as successful
responses (see ``core/responses.py``).
"""

import logging
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict

from parcel_tracker.app.core.responses import ResponseKey, STATUS_TO_RESPONSE_KEY, error_body

logger = logging.getLogger("parcel_tracker.errors")


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        response_key: ResponseKey,
        status_code: int = 500,
        details: Dict[str, Any] = None,
    ):
        self.message = message
        self.response_key = response_key
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            response_key=ResponseKey.NOT_FOUND,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": str(resource_id) if resource_id else None},
        )


class ConflictError(AppException):
    """Raised when a unique value (reference, code, email) is already taken."""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message=message,
            response_key=ResponseKey.CONFLICT,
            status_code=status.HTTP_409_CONFLICT,
            details={"field": field} if field else None,
        )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.response_key, exc.message, exc.details),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    response_key = STATUS_TO_RESPONSE_KEY.get(exc.status_code, ResponseKey.INTERNAL_ERROR)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(response_key, exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for request validation errors; rejected input is a 400."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            ResponseKey.VALIDATION_FAIL,
            details={"errors": jsonable_encoder(exc.errors())},
        ),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception(
        "Unhandled exception on %s %s: %s", request.method, request.url.path, type(exc).__name__
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(ResponseKey.INTERNAL_ERROR),
    )
