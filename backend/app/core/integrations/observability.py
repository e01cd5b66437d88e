"""
Observability hooks.
Exceptions surfaced at the HTTP edge are recorded here before the response is built.
"""

from typing import Optional
from fastapi import Request
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)


def setup_observability() -> None:
    """Announce the service identity used to tag log records."""
    logger.info(
        "Setting up observability",
        extra={
            "service_name": settings.OTEL_SERVICE_NAME,
            "environment": settings.OTEL_ENVIRONMENT,
        },
    )


def record_exception(exc: Exception, request: Optional[Request] = None) -> None:
    """
    Record an exception in the observability backend.

    Args:
        exc: The exception that occurred
        request: The FastAPI request object, when raised inside a request
    """
    logger.error(
        f"Exception recorded: {type(exc).__name__}",
        extra={
            "exception_message": str(exc),
            "path": request.url.path if request is not None else None,
            "service_name": settings.OTEL_SERVICE_NAME,
        },
    )
