"""
Exception handlers - Map domain errors to HTTP responses.

Every failure leaves the API as ``{"success": false, "message": ...}``
with a stable message. Storage and unexpected failures are logged here
and reported only as "Internal server error".
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain import exceptions

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

# Most specific first
_STATUS_BY_ERROR: list[tuple[type[exceptions.LifecycleError], int]] = [
    (exceptions.ValidationError, status.HTTP_400_BAD_REQUEST),
    (exceptions.ConflictError, status.HTTP_400_BAD_REQUEST),
    (exceptions.AccountBlocked, status.HTTP_403_FORBIDDEN),
    (exceptions.InvalidCredentials, status.HTTP_401_UNAUTHORIZED),
    (exceptions.AuthError, status.HTTP_401_UNAUTHORIZED),
    (exceptions.NotFoundError, status.HTTP_404_NOT_FOUND),
]


def error_body(message: str) -> dict:
    return {"success": False, "message": message}


def status_for(error: exceptions.LifecycleError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def lifecycle_error_handler(request: Request, exc: exceptions.LifecycleError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        # Detail was already logged by the adapter
        return JSONResponse(status_code=status_code, content=error_body(INTERNAL_ERROR_MESSAGE))
    return JSONResponse(status_code=status_code, content=error_body(exc.message))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first schema violation as ``<field>: <reason>`` with status 400."""
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=400, content=error_body("Invalid request"))

    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first['msg']}" if field else first["msg"]
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(INTERNAL_ERROR_MESSAGE),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain, schema and catch-all handlers on an app."""
    app.add_exception_handler(exceptions.LifecycleError, lifecycle_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
