"""
Error handling utilities for the Air Quality Service.
Maps domain exceptions to JSON error responses.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..ports.exceptions import (
    AirQualityServiceError,
    MeasurementParseError,
    RepositoryError,
    ExternalServiceError,
    SubscriptionError
)


def _error_response(http_status: int, error: str, exc: AirQualityServiceError, message: str = None, **extra) -> JSONResponse:
    content = {
        "error": error,
        "message": message or exc.message,
        "details": exc.details,
        "exception": exc.__class__.__name__
    }
    content.update(extra)
    return JSONResponse(status_code=http_status, content=content)


async def measurement_parse_handler(request: Request, exc: MeasurementParseError):
    """Unparseable measurement records are a client problem."""
    return _error_response(422, "Invalid measurement", exc)


async def external_service_handler(request: Request, exc: ExternalServiceError):
    return _error_response(
        502,
        "External service error",
        exc,
        message=f"Service '{exc.service_name}' is unavailable",
        status_code=exc.status_code
    )


async def repository_error_handler(request: Request, exc: RepositoryError):
    return _error_response(500, "Data access error", exc)


async def subscription_error_handler(request: Request, exc: SubscriptionError):
    """A stopped subscription cannot be restarted; report it as a conflict."""
    return _error_response(409, "Subscription error", exc)


async def air_quality_service_error_handler(request: Request, exc: AirQualityServiceError):
    return _error_response(500, "Air quality service error", exc)


def register_error_handlers(app: FastAPI):
    """
    Register all exception handlers for the FastAPI application.
    Subclasses are registered before their bases.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(MeasurementParseError, measurement_parse_handler)
    app.add_exception_handler(ExternalServiceError, external_service_handler)
    app.add_exception_handler(RepositoryError, repository_error_handler)
    app.add_exception_handler(SubscriptionError, subscription_error_handler)
    app.add_exception_handler(AirQualityServiceError, air_quality_service_error_handler)
