"""
Error Handling

Every failure the API reports goes through one exception type,
BoroHubError, carrying a message and an HTTP status code:

- 400: validation errors and duplicate-state transitions (already liked...)
- 401: missing or invalid session
- 403: authenticated but not allowed
- 404: referenced member/post/comment/chat does not exist
- 500: anything unexpected

Services raise it; the handlers registered here turn it (and FastAPI's own
exceptions) into the JSON error envelope:

    {"success": false, "message": "...", "status": 404}
"""

import logging
import traceback

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from borohub.config import settings

logger = logging.getLogger(__name__)


class BoroHubError(Exception):
    """API error with an HTTP status code (defaults to 500)."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __repr__(self):
        return f"BoroHubError({self.message!r}, {self.status_code})"


def error_response(message: str, status_code: int, error=None, headers=None) -> JSONResponse:
    """Build the error envelope. `error` is only included when given."""
    body = {"success": False, "message": message, "status": status_code}
    if error is not None:
        body["error"] = jsonable_encoder(error)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def handle_borohub_error(request: Request, exc: BoroHubError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(exc.message, exc.status_code)


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(message, exc.status_code, headers=getattr(exc, "headers", None))


async def handle_validation_error(request: Request, exc: RequestValidationError):
    # Pydantic error dicts can carry the raw exception under "ctx"
    errors = [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]
    return error_response("Validation failed", 400, error=errors)


async def handle_rate_limit(request: Request, exc: RateLimitExceeded):
    return error_response("Too many requests, please try again later.", 429)


async def handle_unexpected(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = None
    if not settings.is_production:
        error = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return error_response("Internal Server Error", 500, error=error)


def register_exception_handlers(app: FastAPI):
    """Attach the envelope-producing handlers to the application."""
    app.add_exception_handler(BoroHubError, handle_borohub_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(RateLimitExceeded, handle_rate_limit)
    app.add_exception_handler(Exception, handle_unexpected)
