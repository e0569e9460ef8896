"""Global error handlers for the admin API.

Exceptions raised by route handlers are converted into the standard
``{"success": false, "error": {...}}`` envelope with a matching HTTP status.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .exceptions import (
    APIError,
    ExternalServiceError,
    SwarmError,
)
from .logging import get_logger

logger = get_logger(__name__)


def create_error_response(
    status_code: int,
    error: str,
    message: str,
    details: dict[str, Any] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Create a standardized error response.

    Args:
        status_code: HTTP status code
        error: Error type/code
        message: Human-readable error message
        details: Optional additional error details
        request_id: Optional request ID for tracing

    Returns:
        JSONResponse with error information
    """
    content: dict[str, Any] = {
        "success": False,
        "error": {
            "code": error,
            "message": message,
        },
    }

    if details:
        content["error"]["details"] = details

    if request_id:
        content["metadata"] = {"request_id": request_id}

    return JSONResponse(status_code=status_code, content=content)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions with their own status code."""
    request_id = getattr(request.state, "request_id", None)

    logger.warning(
        "API error occurred",
        error=exc.__class__.__name__,
        message=exc.message,
        status_code=exc.status_code,
        request_id=request_id,
        path=str(request.url.path),
    )

    return create_error_response(
        status_code=exc.status_code,
        error=exc.__class__.__name__,
        message=exc.message,
        details=exc.details or None,
        request_id=request_id,
    )


async def external_service_error_handler(
    request: Request, exc: ExternalServiceError
) -> JSONResponse:
    """Handle reasoning-service errors that escape to a request (502)."""
    request_id = getattr(request.state, "request_id", None)

    logger.error(
        "Reasoning service error",
        error=exc.__class__.__name__,
        message=exc.message,
        details=exc.details,
        request_id=request_id,
        path=str(request.url.path),
    )

    return create_error_response(
        status_code=502,
        error=exc.__class__.__name__,
        message=exc.message,
        details=exc.details or None,
        request_id=request_id,
    )


async def swarm_error_handler(request: Request, exc: SwarmError) -> JSONResponse:
    """Handle any other SwarmError (500)."""
    request_id = getattr(request.state, "request_id", None)

    logger.error(
        "Swarm error occurred",
        error=exc.__class__.__name__,
        message=exc.message,
        details=exc.details,
        request_id=request_id,
        path=str(request.url.path),
    )

    return create_error_response(
        status_code=500,
        error=exc.__class__.__name__,
        message=exc.message,
        details=exc.details or None,
        request_id=request_id,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request body and parameter validation failures (422)."""
    request_id = getattr(request.state, "request_id", None)

    errors = [
        {
            "field": ".".join(str(x) for x in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    logger.warning(
        "Request validation error",
        errors=errors,
        request_id=request_id,
        path=str(request.url.path),
    )

    return create_error_response(
        status_code=422,
        error="ValidationError",
        message="Request validation failed",
        details={"validation_errors": errors},
        request_id=request_id,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    request_id = getattr(request.state, "request_id", None)

    logger.exception(
        "Unexpected error occurred",
        error=exc.__class__.__name__,
        message=str(exc),
        request_id=request_id,
        path=str(request.url.path),
    )

    return create_error_response(
        status_code=500,
        error="InternalServerError",
        message="An unexpected error occurred",
        request_id=request_id,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    # Most specific first
    app.add_exception_handler(APIError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ExternalServiceError, external_service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SwarmError, swarm_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Error handlers registered")
