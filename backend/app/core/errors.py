"""
Typed booking errors and their mapping to HTTP responses.

The service layer raises NotFoundError / ForbiddenError; the handlers
registered here turn them into 404 / 403. Every error carries a `reason`
code so distinct causes stay visible in logs and metrics while the
status code contract stays coarse.
"""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.logging import get_logger

logger = get_logger(__name__)


class BookingError(Exception):
    """Base class for business-rule failures raised by the booking core."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Booking request rejected"

    def __init__(self, message: Optional[str] = None, reason: str = "unspecified"):
        self.message = message or self.default_message
        self.reason = reason
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(reason={self.reason}, message={self.message!r})>"


class NotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "No result for this search!"


class ForbiddenError(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "No vacancy!"


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    logger.info(
        "booking_error",
        error=type(exc).__name__,
        reason=exc.reason,
        status_code=exc.status_code,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "reason": exc.reason},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors()), "reason": "invalid_request"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "reason": "internal_error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
