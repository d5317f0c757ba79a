"""Error handlers that turn every failure into exactly one rendered page.

- Unmatched routes and missing books end up on the "not-found" view with 404.
- Any other HTTP error keeps its status and renders the "error" view.
- Unexpected exceptions are logged with their traceback and rendered as a
  generic 500 page; internal details never reach the user.
"""
import logging
from dataclasses import dataclass

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog.views import SECURITY_HEADERS, render

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Oops! It looks like the page you're looking for does not exist."
SERVER_ERROR_MESSAGE = "Oops!  It looks like something went wrong on the server."


@dataclass
class ErrorInfo:
    """What the error views show."""
    status: int
    message: str


def render_not_found(request: Request):
    err = ErrorInfo(status=404, message=NOT_FOUND_MESSAGE)
    return render(request, "not-found", {"err": err, "title": "Page Not Found"}, status_code=404)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        logger.info(f"404 for {request.method} {request.url.path}")
        return render_not_found(request)
    logger.warning(f"{exc.status_code} for {request.method} {request.url.path}: {exc.detail}")
    err = ErrorInfo(status=exc.status_code, message=str(exc.detail))
    return render(request, "error", {"err": err, "title": "Error"}, status_code=exc.status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed path parameters (e.g. /books/abc) name no book
    logger.info(f"Invalid request for {request.method} {request.url.path}: {exc.errors()}")
    return render_not_found(request)


async def server_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error for {request.method} {request.url.path}", exc_info=exc)
    err = ErrorInfo(status=500, message=SERVER_ERROR_MESSAGE)
    response = render(request, "error", {"err": err, "title": "Server Error"}, status_code=500)
    # Unhandled errors are answered outside the app middleware, so the headers and log line go here
    response.headers.update(SECURITY_HEADERS)
    logger.info(f"{request.method} {request.url.path} 500")
    return response


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, server_error_handler)
