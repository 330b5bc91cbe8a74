"""
Error taxonomy for the slot machine API.

Every error carries the HTTP status it is rendered with and a message that
ends up in the ``{"error": ...}`` response body.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class SlotsException(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class MissingParameter(SlotsException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required parameter"


class InvalidIndex(SlotsException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid 'n' or 'maxPlaycount' value"


class UpstreamNotFound(SlotsException):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Last.fm user not found"


class TrackNotFound(SlotsException):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Track not found at the specified index."


class UpstreamError(SlotsException):
    """Non-success upstream response; keeps the upstream status when it is an error status."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Error fetching data from Last.fm API"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        if status_code is not None and status_code < 400:
            status_code = None
        super().__init__(message, status_code)


class MalformedUpstreamData(SlotsException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Invalid data received from Last.fm"


class ServerMisconfigured(SlotsException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server misconfigured: Missing API key"


class MissingCredentials(SlotsException):
    """Spotify client id/secret not configured. Only raised inside enrichment."""

    default_message = "Spotify credentials not configured"


async def slots_exception_handler(request: Request, exc: SlotsException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Query strings that FastAPI itself rejects are reported like our own 400s
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request parameters"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to the application."""
    app.add_exception_handler(SlotsException, slots_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
