"""
Error types and JSON error helpers.

Two response shapes are used by the API: proxy-style routes raise
HTTPException (``{"detail": ...}``), function-style routes return
``{"success": false, "error": ...}``.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.timeutils import utc_now

MSG_MISSING_FIELDS = "Missing required fields"
MSG_SERVER_ERROR = "Server error"


class ServiceError(Exception):
    """Base class for errors raised by services."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InvalidMeetingTimeError(ServiceError):
    """Meeting date/time could not be parsed."""

    status_code = status.HTTP_400_BAD_REQUEST


class UpstreamServiceError(ServiceError):
    """A third-party API failed or returned an unusable response."""

    status_code = status.HTTP_502_BAD_GATEWAY


def function_error(status_code: int, message: str) -> JSONResponse:
    """Error body of the notification functions."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": message,
            "timestamp": utc_now().isoformat(),
        },
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error": MSG_MISSING_FIELDS,
            "detail": jsonable_encoder(exc.errors()),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the 400 handler for request validation failures."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
