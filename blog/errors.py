"""
Domain errors for posts and the handlers that turn them into responses.

Every error carries a human-readable ``message`` and the HTTP status it
maps to.  JSON API paths (``/api/...``) receive ``{"detail": message}``;
page routes receive a rendered error page.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import (
    http_exception_handler,
    request_validation_exception_handler,
)
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog.templating import render_error

logger = logging.getLogger(__name__)


class PostError(Exception):
    """Base class for every post-related failure."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PostError):
    """One or more required fields are missing.  Carries the field error map."""

    http_status = status.HTTP_200_OK

    def __init__(self, errors: dict[str, str | None]) -> None:
        super().__init__("Post is missing required fields")
        self.errors = errors


class NotFoundError(PostError):
    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, slug: str) -> None:
        super().__init__(f"Post not found: {slug}")
        self.slug = slug


class StoreError(PostError):
    """The database rejected or could not perform the operation."""


class ConflictError(StoreError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"A post with slug {slug!r} already exists")
        self.slug = slug


class StoreUnavailableError(StoreError):
    def __init__(self, message: str = "The post store is unavailable") -> None:
        super().__init__(message)


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

def _wants_json(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def register_error_handlers(app: FastAPI) -> None:
    """Install the PostError, HTTP error and catch-all handlers on *app*."""

    @app.exception_handler(PostError)
    async def post_error_handler(request: Request, exc: PostError):
        if exc.http_status >= 500:
            logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
        else:
            logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)

        if _wants_json(request):
            return JSONResponse(status_code=exc.http_status, content={"detail": exc.message})
        return render_error(request, exc.http_status, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if _wants_json(request):
            return await http_exception_handler(request, exc)
        return render_error(request, exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        if _wants_json(request):
            return await request_validation_exception_handler(request, exc)
        logger.info("Invalid form submission on %s: %s", request.url.path, exc.errors())
        return render_error(request, 422, "The submitted form is invalid")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        message = "An unexpected error occurred"
        if _wants_json(request):
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"detail": message},
            )
        return render_error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, message)
