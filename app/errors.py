"""
Application errors and their HTTP rendering.

Services raise a ``ServiceError`` subclass carrying a machine-readable
``code`` and a human-readable ``message``; the handlers registered by
``register_exception_handlers`` turn them into the error envelope::

    {"success": false, "error": {"code": "NOT_FOUND", "message": "..."}}

Store errors are deliberately absent here: they propagate untouched and
end up as a 500 from FastAPI's default handling.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    code: str = "INTERNAL_SERVER_ERROR"
    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(ServiceError):
    code = "UNAUTHORIZED"
    status_code = HTTP_401_UNAUTHORIZED
    default_message = "You must be signed in to perform this action."


class NotFoundError(ServiceError):
    code = "NOT_FOUND"
    status_code = HTTP_404_NOT_FOUND
    default_message = "Resource not found."


class BadRequestError(ServiceError):
    code = "BAD_REQUEST"
    status_code = HTTP_400_BAD_REQUEST
    default_message = "Invalid input."


def _error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    logger.warning("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return _error_response(exc.status_code, exc.code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render pydantic request validation failures as ``BAD_REQUEST``."""
    errors = exc.errors()
    logger.warning(
        "BAD_REQUEST on %s %s: %d validation error(s)",
        request.method,
        request.url.path,
        len(errors),
    )
    # ctx may hold the raw ValueError raised by a model validator
    details = jsonable_encoder(
        [{k: v for k, v in err.items() if k != "ctx"} for err in errors]
    )
    message = errors[0]["msg"] if errors else BadRequestError.default_message
    return _error_response(HTTP_400_BAD_REQUEST, BadRequestError.code, message, details)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
