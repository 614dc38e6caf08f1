"""
Shared API Middleware
======================

Common middleware and exception handlers for the FastAPI application.
"""

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from cmdb.core import (
    ApplicationException,
    OperationFailedException,
    ResourceNotFoundException,
    ValidationException,
)
from cmdb.shared.api.responses import ErrorEnvelope, ValidationErrorEnvelope
from cmdb.shared.infrastructure.logging import correlation_id_var, get_logger

logger = get_logger(__name__)


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Adds correlation ID to requests for tracing.

    The ID is stored on ``request.state`` and in a context variable so
    every log line emitted while handling the request carries it.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))
        request.state.correlation_id = correlation_id
        token = correlation_id_var.set(correlation_id)
        try:
            response = await call_next(request)
        except Exception as exc:
            # Answer here so the error response still carries the header
            response = await global_exception_handler(request, exc)
        finally:
            correlation_id_var.reset(token)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """Adds an X-Response-Time header."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Response-Time"] = f"{time.perf_counter() - start_time:.3f}s"
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs all requests and responses.

    Provides audit trail and debugging information.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "error": str(e),
                    "response_time_ms": int((time.perf_counter() - start_time) * 1000)
                }
            )
            raise

        logger.info(
            "Request completed",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "response_time_ms": int((time.perf_counter() - start_time) * 1000)
            }
        )
        return response


# ========== Exception Handlers ==========

async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request payloads are reported as 400 with field-level details."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationErrorEnvelope(details=jsonable_encoder(exc.errors())).model_dump(),
    )


async def application_exception_handler(request: Request, exc: ApplicationException) -> JSONResponse:
    """
    Map the application exception taxonomy onto HTTP responses.

    Store failures keep their internal message server-side.
    """
    if isinstance(exc, ValidationException):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ValidationErrorEnvelope(error=exc.message, details=exc.errors).model_dump(),
        )

    if isinstance(exc, ResourceNotFoundException):
        status_code, message = status.HTTP_404_NOT_FOUND, exc.message
    elif isinstance(exc, OperationFailedException):
        status_code, message = status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message
    else:
        logger.error(
            "Unhandled application exception",
            extra={
                "path": request.url.path,
                "error_type": type(exc).__name__,
                "error_message": exc.message,
            }
        )
        status_code, message = status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"

    return JSONResponse(status_code=status_code, content=ErrorEnvelope(error=message).model_dump())


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.

    Returns the error envelope; internal details are only logged.
    """
    logger.error(
        "Unhandled exception",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_message": str(exc)
        }
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorEnvelope(error="Internal server error").model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
